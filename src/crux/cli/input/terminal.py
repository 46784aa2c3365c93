"""
Terminal input ownership.

Raw mode and key parsing come from prompt_toolkit's ``Input``. The session
holds the terminal in raw mode with bracketed paste enabled, and keys are
delivered through ``TerminalInput.listen()`` for the duration of a ``with``
block. Only one listener may be attached at a time: the editor owns input
while reading, the cancellation bridge owns it while a run is in flight.

An escape sequence split across two reads stays inside the parser until
the rest arrives. A lone Escape is released after ``flush_timeout``.
"""

import asyncio
import logging
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, TextIO

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress

from crux.cli.ui.state import safe_write

logger = logging.getLogger(__name__)

KeyListener = Callable[[List[KeyPress]], None]

BRACKETED_PASTE_ON = "\x1b[?2004h"
BRACKETED_PASTE_OFF = "\x1b[?2004l"

# Same default as prompt_toolkit's Application.ttimeoutlen
FLUSH_TIMEOUT = 0.5


class TerminalInput:
    """Key-level access to standard input on the asyncio loop."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        write: Callable[[str], None] = safe_write,
        flush_timeout: float = FLUSH_TIMEOUT,
    ):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.input: Input = create_input(self.stdin)
        self.flush_timeout = flush_timeout
        self._write = write
        self._listener: Optional[KeyListener] = None
        self._flush_handle: Optional[asyncio.TimerHandle] = None

    @property
    def is_tty(self) -> bool:
        try:
            return self.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    @property
    def has_listener(self) -> bool:
        return self._listener is not None

    @contextmanager
    def session(self) -> Iterator[None]:
        """Raw mode and bracketed paste for a whole console session.

        A no-op when stdin is not a TTY.
        """
        if not self.is_tty:
            yield
            return
        with self.input.raw_mode():
            self._write(BRACKETED_PASTE_ON)
            logger.debug("Terminal switched to raw mode")
            try:
                yield
            finally:
                self._write(BRACKETED_PASTE_OFF)
        logger.debug("Terminal mode restored")

    @contextmanager
    def listen(self, listener: KeyListener) -> Iterator[None]:
        """Deliver parsed keys to ``listener`` until the block exits.

        An empty list means end of input.

        Raises:
            RuntimeError: If another listener is already attached
        """
        if self._listener is not None:
            raise RuntimeError("Terminal input already has a listener attached")

        self._listener = listener
        try:
            with self.input.attach(self._on_ready):
                yield
        finally:
            self._cancel_flush()
            self._listener = None

    def _on_ready(self) -> None:
        keys = self.input.read_keys()
        if keys:
            self._deliver(keys)
        if self.input.closed:
            self._cancel_flush()
            self._deliver([])
            return

        self._cancel_flush()
        loop = asyncio.get_running_loop()
        self._flush_handle = loop.call_later(self.flush_timeout, self._flush)

    def _flush(self) -> None:
        self._flush_handle = None
        keys = self.input.flush_keys()
        if keys:
            logger.debug(f"Flushed {len(keys)} pending keys")
            self._deliver(keys)

    def _cancel_flush(self) -> None:
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None

    def _deliver(self, keys: List[KeyPress]) -> None:
        listener = self._listener
        if listener is not None:
            listener(keys)
