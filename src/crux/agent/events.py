"""
Render events emitted by an Agent Runtime during one run.

A run produces, in order, any number of
``thinking_start → thinking_chunk* → thinking_end`` /
``output_start → output_chunk* → output_end`` segments, interleaved with
tool calls and results, followed by exactly one ``complete`` or ``error``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class EventType(str, Enum):
    THINKING_START = "thinking_start"
    THINKING_CHUNK = "thinking_chunk"
    THINKING_END = "thinking_end"
    OUTPUT_START = "output_start"
    OUTPUT_CHUNK = "output_chunk"
    OUTPUT_END = "output_end"
    TOOL_CALL = "tool_call"
    TOOL_RESULT = "tool_result"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (EventType.COMPLETE, EventType.ERROR)


@dataclass(frozen=True)
class ToolCallEvent:
    id: str
    name: str
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResultEvent:
    id: str
    name: str
    result: Any
    is_error: bool = False


@dataclass(frozen=True)
class Usage:
    """Token usage reported with a completed run."""

    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    @classmethod
    def coerce(cls, value: Any) -> "Usage":
        """Accept a Usage, a mapping (snake or camel case keys) or None."""
        if isinstance(value, Usage):
            return value
        if isinstance(value, Mapping):
            prompt = value.get("prompt_tokens", value.get("promptTokens", 0))
            completion = value.get("completion_tokens", value.get("completionTokens", 0))
            return cls(int(prompt or 0), int(completion or 0))
        if value is None:
            return cls()
        return cls(
            int(getattr(value, "prompt_tokens", 0) or 0),
            int(getattr(value, "completion_tokens", 0) or 0),
        )


@dataclass(frozen=True)
class CompletePayload:
    response: str = ""
    usage: Usage = field(default_factory=Usage)


@dataclass(frozen=True)
class RenderEvent:
    """One tagged event of a run's stream.

    ``data`` depends on ``event_type``: the text for chunk events, a
    ToolCallEvent / ToolResultEvent for tool events, a CompletePayload for
    ``complete`` and the runtime's error value for ``error``.
    """

    event_type: EventType
    data: Any = None

    @classmethod
    def thinking_start(cls) -> "RenderEvent":
        return cls(EventType.THINKING_START)

    @classmethod
    def thinking_chunk(cls, text: str) -> "RenderEvent":
        return cls(EventType.THINKING_CHUNK, text)

    @classmethod
    def thinking_end(cls) -> "RenderEvent":
        return cls(EventType.THINKING_END)

    @classmethod
    def output_start(cls) -> "RenderEvent":
        return cls(EventType.OUTPUT_START)

    @classmethod
    def output_chunk(cls, text: str) -> "RenderEvent":
        return cls(EventType.OUTPUT_CHUNK, text)

    @classmethod
    def output_end(cls) -> "RenderEvent":
        return cls(EventType.OUTPUT_END)

    @classmethod
    def tool_call(cls, id: str, name: str, args: Optional[Dict[str, Any]] = None) -> "RenderEvent":
        return cls(EventType.TOOL_CALL, ToolCallEvent(id, name, dict(args or {})))

    @classmethod
    def tool_result(cls, id: str, name: str, result: Any, is_error: bool = False) -> "RenderEvent":
        return cls(EventType.TOOL_RESULT, ToolResultEvent(id, name, result, is_error))

    @classmethod
    def complete(cls, response: str = "", usage: Any = None) -> "RenderEvent":
        return cls(EventType.COMPLETE, CompletePayload(response or "", Usage.coerce(usage)))

    @classmethod
    def error(cls, value: Any) -> "RenderEvent":
        return cls(EventType.ERROR, value)
