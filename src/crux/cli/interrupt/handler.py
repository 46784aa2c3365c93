"""
Cancellation Bridge - turns Ctrl+C into a runtime abort.

While a run is in flight the editor is not listening, but the terminal is
still in raw mode, so Ctrl+C arrives as a key rather than SIGINT. The
bridge attaches its own key listener for the duration of the run and asks
the runtime to abort the first time it sees Ctrl+C.

Usage:
    bridge = CancellationBridge(runtime, terminal)
    with bridge.armed():
        await runtime.run(prompt, callbacks)
"""

import asyncio
import logging
import signal
from contextlib import contextmanager
from typing import Iterator, List, Optional, Protocol

from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

from crux.cli.input.terminal import TerminalInput
from crux.cli.ui.console import ConsoleUI, get_console_ui

logger = logging.getLogger(__name__)


class Abortable(Protocol):
    def abort(self) -> None: ...


class CancellationBridge:
    """Pending cancellation for one run at a time.

    ``signaled`` is set at most once per run; later interrupts are
    ignored until the next ``armed()`` block.
    """

    def __init__(
        self,
        runtime: Abortable,
        terminal: Optional[TerminalInput] = None,
        console_ui: Optional[ConsoleUI] = None,
    ):
        self.runtime = runtime
        self.terminal = terminal
        self.console_ui = console_ui or get_console_ui()
        self._armed = False
        self._signaled = False

    @property
    def is_armed(self) -> bool:
        return self._armed

    @property
    def signaled(self) -> bool:
        return self._signaled

    @contextmanager
    def armed(self) -> Iterator["CancellationBridge"]:
        """Watch input for Ctrl+C until the block exits."""
        self._signaled = False
        self._armed = True
        try:
            if self.terminal is None:
                yield self
            elif self.terminal.is_tty:
                with self.terminal.listen(self.on_keys):
                    yield self
            else:
                # Cooked input: Ctrl+C still arrives as SIGINT
                with _sigint_handler(self.trigger):
                    yield self
        finally:
            self._armed = False

    def on_keys(self, keys: List[KeyPress]) -> None:
        """Inspect one batch of keys; anything but Ctrl+C is dropped."""
        if any(key_press.key == Keys.ControlC for key_press in keys):
            self.trigger()

    def trigger(self) -> None:
        """Request an abort, at most once per armed run."""
        if not self._armed or self._signaled:
            return

        self._signaled = True
        logger.debug("Interrupt received, aborting run")
        try:
            self.runtime.abort()
        except Exception as e:
            logger.warning(f"Runtime abort failed: {e}")
        self.console_ui.abort_warning()


@contextmanager
def _sigint_handler(callback) -> Iterator[None]:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, callback)
    except (NotImplementedError, RuntimeError):
        # Not on the main thread, or no signal support on this platform
        yield
        return
    try:
        yield
    finally:
        loop.remove_signal_handler(signal.SIGINT)
