"""
Conversation Loop Module

Drives the console through its read → run → render cycle:

    IDLE ──prompt──> READING ──text──> RUNNING ──settled──> IDLE
                        │
                        ├── "" / whitespace ──> IDLE (no run)
                        └── exit / quit / Ctrl+C / Ctrl+D ──> session ends

Only one run is ever in flight: the loop awaits it before prompting again.
Input ownership moves with the state. The editor listens while READING,
the cancellation bridge while RUNNING.

Contents:
- ConsoleLoop: The state machine itself
- _prompt_user_input: Read one submission and classify it
"""

import asyncio
import logging
from enum import Enum
from typing import Optional, Tuple

from crux.agent.events import RenderEvent
from crux.agent.runtime import AgentRuntime, callbacks_for
from crux.cli.config import EXIT_COMMANDS
from crux.cli.input.editor import InputClosed, RawInputEditor
from crux.cli.interrupt.handler import CancellationBridge
from crux.cli.ui.console import ConsoleUI, get_console_ui
from crux.cli.ui.event_dispatcher import CLIEventDispatcher
from crux.core.common.exceptions import AbortError, RunError, error_message

logger = logging.getLogger(__name__)


class ConsoleState(str, Enum):
    IDLE = "idle"
    READING = "reading"
    RUNNING = "running"


class ConsoleLoop:
    """The console's state machine.

    Args:
        runtime: Agent runtime that executes prompts
        editor: Source of submitted text
        dispatcher: Routes the runtime's events to the UI
        bridge: Cancellation bridge armed for the duration of each run
        console_ui: Session messages (header, farewell)
    """

    def __init__(
        self,
        runtime: AgentRuntime,
        editor: RawInputEditor,
        dispatcher: CLIEventDispatcher,
        bridge: CancellationBridge,
        console_ui: Optional[ConsoleUI] = None,
    ):
        self.runtime = runtime
        self.editor = editor
        self.dispatcher = dispatcher
        self.bridge = bridge
        self.console_ui = console_ui or get_console_ui()
        self.state = ConsoleState.IDLE
        self.runs = 0

    async def run(self) -> None:
        """Prompt and run until the operator ends the session."""
        self.console_ui.session_start()
        while True:
            self.state = ConsoleState.READING
            text, should_break = await _prompt_user_input(self.editor, self.console_ui)
            if should_break:
                self.state = ConsoleState.IDLE
                logger.debug("Conversation ended by operator")
                return
            if text is None:
                self.state = ConsoleState.IDLE
                continue
            await self.execute(text)

    async def execute(self, prompt: str) -> None:
        """Run one prompt to settlement; never raises for runtime failures."""
        self.state = ConsoleState.RUNNING
        self.runs += 1
        logger.debug(f"Run {self.runs} started ({len(prompt)} chars)")

        self.dispatcher.begin_run(self.bridge)
        callbacks = callbacks_for(self.dispatcher.dispatch)
        try:
            with self.bridge.armed():
                await self.runtime.run(prompt, callbacks)
        except asyncio.CancelledError:
            # Swallowed only when the bridge asked for the abort
            if not self.bridge.signaled:
                raise
            logger.debug("Run cancelled after abort request")
            self._settle(AbortError())
        except Exception as e:
            logger.debug(f"Runtime raised out of run(): {e}", exc_info=True)
            self._settle(RunError(error_message(e), cause=e))
        finally:
            self.dispatcher.finish_run()
            self.state = ConsoleState.IDLE
            logger.debug(f"Run {self.runs} settled: {self.dispatcher.outcome}")

    def _settle(self, error: Exception) -> None:
        if not self.dispatcher.settled:
            self.dispatcher.dispatch(RenderEvent.error(error))


async def _prompt_user_input(
    editor: RawInputEditor,
    console_ui: ConsoleUI,
) -> Tuple[Optional[str], bool]:
    """Prompt the operator for one submission.

    Returns:
        Tuple of (text, should_break)
        - text: The submission, or None when there is nothing to run
        - should_break: Whether the session should end
    """
    try:
        text = await editor.read()
    except InputClosed as e:
        console_ui.goodbye(leading_newline=e.interrupted)
        return None, True

    trimmed = text.strip()
    if not trimmed:
        return None, False

    if trimmed in EXIT_COMMANDS:
        console_ui.goodbye()
        return None, True

    return trimmed, False
