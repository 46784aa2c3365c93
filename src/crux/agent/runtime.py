"""
Agent Runtime contract.

The runtime is an external collaborator: it owns reasoning, tool dispatch
and cancellation of its own work. The console hands it a prompt and an
AgentCallbacks set, and may call ``abort()`` while ``run()`` is pending.
"""

import importlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, runtime_checkable

from crux.agent.events import RenderEvent, ToolCallEvent, ToolResultEvent

logger = logging.getLogger(__name__)


@dataclass
class AgentCallbacks:
    """Structural callback set passed to AgentRuntime.run()."""

    on_thinking_start: Optional[Callable[[], None]] = None
    on_thinking: Optional[Callable[[str], None]] = None
    on_thinking_end: Optional[Callable[[], None]] = None
    on_output_start: Optional[Callable[[], None]] = None
    on_output: Optional[Callable[[str], None]] = None
    on_output_end: Optional[Callable[[], None]] = None
    on_tool_call: Optional[Callable[[ToolCallEvent], None]] = None
    on_tool_result: Optional[Callable[[ToolResultEvent], None]] = None
    on_complete: Optional[Callable[[str, Any], None]] = None
    on_error: Optional[Callable[[Any], None]] = None


@runtime_checkable
class AgentRuntime(Protocol):
    async def run(self, prompt: str, callbacks: AgentCallbacks) -> None: ...

    def abort(self) -> None: ...


def callbacks_for(dispatch: Callable[[RenderEvent], None]) -> AgentCallbacks:
    """Adapt the callback contract to a single tagged event stream.

    Every callback turns its arguments into a RenderEvent and hands it to
    ``dispatch`` synchronously, so events keep the runtime's order.
    """
    return AgentCallbacks(
        on_thinking_start=lambda: dispatch(RenderEvent.thinking_start()),
        on_thinking=lambda chunk: dispatch(RenderEvent.thinking_chunk(chunk)),
        on_thinking_end=lambda: dispatch(RenderEvent.thinking_end()),
        on_output_start=lambda: dispatch(RenderEvent.output_start()),
        on_output=lambda chunk: dispatch(RenderEvent.output_chunk(chunk)),
        on_output_end=lambda: dispatch(RenderEvent.output_end()),
        on_tool_call=lambda event: dispatch(
            RenderEvent.tool_call(event.id, event.name, event.args)
        ),
        on_tool_result=lambda event: dispatch(
            RenderEvent.tool_result(event.id, event.name, event.result, event.is_error)
        ),
        on_complete=lambda response, usage: dispatch(RenderEvent.complete(response, usage)),
        on_error=lambda error: dispatch(RenderEvent.error(error)),
    )


def load_runtime(factory_path: str, config: Mapping[str, Any]) -> AgentRuntime:
    """Build a runtime from a ``"package.module:factory"`` path.

    The factory is called with the loaded config and must return an object
    providing ``run`` and ``abort``.

    Raises:
        ValueError: If ``factory_path`` is malformed or the factory result is not a runtime
        ImportError / AttributeError: If the module or factory can't be found
    """
    module_name, sep, attr = factory_path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Runtime must be given as 'module:factory', got {factory_path!r}")

    module = importlib.import_module(module_name)
    factory = getattr(module, attr)
    runtime = factory(config)
    if not isinstance(runtime, AgentRuntime):
        raise ValueError(f"{factory_path} did not return an agent runtime (got {type(runtime).__name__})")
    logger.debug(f"Loaded agent runtime {type(runtime).__name__} from {factory_path}")
    return runtime
