"""
Scripted Agent Runtime.

Replays a precomputed list of RenderEvents through the callback contract.
It stands in for a real reasoning loop in tests and serves as the default
runtime (``echo_runtime``) when no runtime is configured.

Cancellation is cooperative: ``abort()`` sets a flag that is checked
between events, after which the run ends with an AbortError.
"""

import asyncio
import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence

from crux.agent.events import EventType, RenderEvent, Usage
from crux.agent.runtime import AgentCallbacks
from crux.core.common.exceptions import AbortError

logger = logging.getLogger(__name__)

Script = Callable[[str], Sequence[RenderEvent]]


def emit(callbacks: AgentCallbacks, event: RenderEvent) -> None:
    """Deliver one RenderEvent through the matching callback, if set."""
    t = event.event_type
    if t == EventType.THINKING_START and callbacks.on_thinking_start:
        callbacks.on_thinking_start()
    elif t == EventType.THINKING_CHUNK and callbacks.on_thinking:
        callbacks.on_thinking(event.data)
    elif t == EventType.THINKING_END and callbacks.on_thinking_end:
        callbacks.on_thinking_end()
    elif t == EventType.OUTPUT_START and callbacks.on_output_start:
        callbacks.on_output_start()
    elif t == EventType.OUTPUT_CHUNK and callbacks.on_output:
        callbacks.on_output(event.data)
    elif t == EventType.OUTPUT_END and callbacks.on_output_end:
        callbacks.on_output_end()
    elif t == EventType.TOOL_CALL and callbacks.on_tool_call:
        callbacks.on_tool_call(event.data)
    elif t == EventType.TOOL_RESULT and callbacks.on_tool_result:
        callbacks.on_tool_result(event.data)
    elif t == EventType.COMPLETE and callbacks.on_complete:
        callbacks.on_complete(event.data.response, event.data.usage)
    elif t == EventType.ERROR and callbacks.on_error:
        callbacks.on_error(event.data)


class ScriptedRuntime:
    """Runtime that replays ``script(prompt)``.

    Args:
        script: Returns the events for a prompt. A script without a
            terminal event gets ``complete`` appended.
        delay: Seconds to sleep between events (lets the loop serve input)
    """

    def __init__(self, script: Script, delay: float = 0.0):
        self._script = script
        self._delay = delay
        self._aborted: Optional[asyncio.Event] = None
        self.prompts: List[str] = []
        self.abort_calls = 0

    @property
    def is_running(self) -> bool:
        return self._aborted is not None

    async def run(self, prompt: str, callbacks: AgentCallbacks) -> None:
        self.prompts.append(prompt)
        self._aborted = asyncio.Event()
        try:
            events = list(self._script(prompt))
            if not events or not events[-1].event_type.is_terminal:
                events.append(RenderEvent.complete())
            for event in events:
                if self._aborted.is_set():
                    emit(callbacks, RenderEvent.error(AbortError()))
                    return
                emit(callbacks, event)
                if event.event_type.is_terminal:
                    return
                await asyncio.sleep(self._delay)
        finally:
            self._aborted = None

    def abort(self) -> None:
        self.abort_calls += 1
        if self._aborted is not None:
            logger.debug("Abort requested for scripted run")
            self._aborted.set()


def echo_script(prompt: str) -> List[RenderEvent]:
    """Think briefly, then stream the prompt back word by word."""
    words = prompt.split(" ")
    events = [
        RenderEvent.thinking_start(),
        RenderEvent.thinking_chunk("Echoing the request back."),
        RenderEvent.thinking_end(),
        RenderEvent.output_start(),
    ]
    for i, word in enumerate(words):
        events.append(RenderEvent.output_chunk(word if i == 0 else " " + word))
    events.append(RenderEvent.output_end())
    events.append(
        RenderEvent.complete(prompt, Usage(prompt_tokens=len(words), completion_tokens=len(words)))
    )
    return events


def echo_runtime(config: Mapping[str, Any]) -> ScriptedRuntime:
    """Factory for the default runtime (``crux.agent.scripted:echo_runtime``)."""
    delay = float(config.get("agent", {}).get("echo_delay", 0.03))
    return ScriptedRuntime(echo_script, delay=delay)
