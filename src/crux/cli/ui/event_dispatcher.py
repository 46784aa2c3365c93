"""
CLI Event Dispatcher - single entry point from the Agent Runtime to the UI.

Architecture:
    AgentRuntime.run(prompt, callbacks)
         ↓
    callbacks_for(dispatcher.dispatch)   [crux.agent.runtime]
         ↓
    CLIEventDispatcher.dispatch(RenderEvent)   [this module]
         ↓
    StreamRenderer / ToolActivityFormatter / ConsoleUI

Events are handled synchronously in arrival order. A failing handler is
logged and skipped: rendering problems must never end the session.
"""

import logging
from typing import Any, Callable, Dict, Optional, Protocol

from crux.agent.events import EventType, RenderEvent
from crux.cli.ui.console import ConsoleUI, get_console_ui
from crux.cli.ui.stream_renderer import StreamRenderer
from crux.cli.ui.tool_formatter import ToolActivityFormatter
from crux.core.common.exceptions import error_message, is_abort

logger = logging.getLogger(__name__)


class AbortAnnouncer(Protocol):
    """What the dispatcher needs to know about the cancellation bridge."""

    @property
    def signaled(self) -> bool: ...


class CLIEventDispatcher:
    """Routes RenderEvents of one run at a time to the UI components."""

    def __init__(
        self,
        renderer: StreamRenderer,
        tool_formatter: Optional[ToolActivityFormatter] = None,
        console_ui: Optional[ConsoleUI] = None,
    ):
        self.renderer = renderer
        self.tool_formatter = tool_formatter or ToolActivityFormatter()
        self.console_ui = console_ui or get_console_ui()
        self.cancellation: Optional[AbortAnnouncer] = None
        self.settled = False
        self.outcome: Optional[str] = None

        self._handlers: Dict[EventType, Callable[[Any], None]] = {
            EventType.THINKING_START: lambda _: self.renderer.on_thinking_start(),
            EventType.THINKING_CHUNK: self.renderer.on_thinking_chunk,
            EventType.THINKING_END: lambda _: self.renderer.on_thinking_end(),
            EventType.OUTPUT_START: lambda _: self.renderer.on_output_start(),
            EventType.OUTPUT_CHUNK: self.renderer.on_output_chunk,
            EventType.OUTPUT_END: lambda _: self.renderer.on_output_end(),
            EventType.TOOL_CALL: self.tool_formatter.on_tool_call,
            EventType.TOOL_RESULT: self.tool_formatter.on_tool_result,
            EventType.COMPLETE: self._handle_complete,
            EventType.ERROR: self._handle_error,
        }

    def begin_run(self, cancellation: Optional[AbortAnnouncer] = None) -> None:
        """Reset per-run state before a new run starts."""
        self.renderer.begin_run()
        self.cancellation = cancellation
        self.settled = False
        self.outcome = None

    def dispatch(self, event: RenderEvent) -> None:
        """Dispatch a single event to its handler.

        Args:
            event: The tagged event emitted by the runtime
        """
        handler = self._handlers.get(event.event_type)
        if handler is None:
            logger.warning(f"No handler for event {event.event_type!r}")
            return

        if event.event_type in (EventType.TOOL_CALL, EventType.TOOL_RESULT):
            logger.debug(f"{event.event_type.value}: {getattr(event.data, 'name', '?')}")
        elif event.event_type.is_terminal:
            logger.debug(f"{event.event_type.value} event received")

        try:
            handler(event.data)
        except Exception as e:
            # Fail-silent: UI rendering errors should not break the session
            logger.debug(f"Error handling event {event.event_type.value}: {e}", exc_info=True)

    def finish_run(self) -> None:
        """Called once run() returned; tidies output of a run that never settled."""
        if not self.settled:
            logger.debug("Run returned without a terminal event")
            self.renderer.settle_partial()
        self.cancellation = None

    def _handle_complete(self, payload: Any) -> None:
        self.settled = True
        self.outcome = "complete"
        self.renderer.on_complete(payload)

    def _handle_error(self, error: Any) -> None:
        self.settled = True
        self.renderer.settle_partial()
        if is_abort(error):
            self.outcome = "aborted"
            already_announced = self.cancellation is not None and self.cancellation.signaled
            if not already_announced:
                self.console_ui.abort_warning()
        else:
            self.outcome = "error"
            self.console_ui.run_error(error_message(error))
