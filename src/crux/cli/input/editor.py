"""
Raw Input Editor - multi-line prompt driven by individual keystrokes.

Keys (as parsed by prompt_toolkit):
- printable characters are appended and echoed as typed
- Enter submits the whole buffer
- Escape then Enter (Alt+Enter), or Ctrl+J, opens a new line
- a bracketed paste is inserted whole, its line breaks become new lines
- Backspace deletes a character, or joins back into the previous line
- Ctrl+C, or Ctrl+D on an empty buffer, ends the session
- navigation and function keys are ignored

Editing only ever happens at the end of the last line, so every redraw
touches at most the current and previous terminal lines.

Keys that arrive after a submitting Enter are kept and replayed at the
start of the next prompt, so pasted lines without bracketed paste are
submitted one by one.
"""

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

from crux.cli.input.terminal import TerminalInput
from crux.cli.ui.state import safe_write
from crux.cli.ui.theme import Theme

logger = logging.getLogger(__name__)

CLEAR_LINE = "\r\033[2K"
CURSOR_UP = "\033[1A"


class InputClosed(EOFError):
    """The operator ended the session from the prompt.

    ``interrupted`` is True for Ctrl+C and False for end of input.
    """

    def __init__(self, interrupted: bool = False):
        super().__init__("interrupted" if interrupted else "end of input")
        self.interrupted = interrupted


@dataclass
class InputBuffer:
    """Lines being composed. Always holds at least one line."""

    lines: List[str] = field(default_factory=lambda: [""])
    index: int = 0

    @property
    def current(self) -> str:
        return self.lines[self.index]

    @property
    def is_empty(self) -> bool:
        return len(self.lines) == 1 and not self.lines[0]

    def insert(self, text: str) -> None:
        self.lines[self.index] += text

    def delete_char(self) -> bool:
        if not self.current:
            return False
        self.lines[self.index] = self.current[:-1]
        return True

    def new_line(self) -> None:
        self.lines.insert(self.index + 1, "")
        self.index += 1

    def remove_line(self) -> bool:
        """Drop the (empty) current line and move to the previous one."""
        if self.index == 0:
            return False
        del self.lines[self.index]
        self.index -= 1
        return True

    def text(self) -> str:
        return "\n".join(self.lines)


def _is_printable(key_press: KeyPress) -> bool:
    # Plain characters come through as str keys, everything named is a Keys member
    return not isinstance(key_press.key, Keys) and key_press.data.isprintable()


def _paste_lines(data: str) -> List[str]:
    text = data.replace("\r\n", "\n").replace("\r", "\n")
    return ["".join(c for c in line if c.isprintable() or c == "\t") for line in text.split("\n")]


class RawInputEditor:
    """Collects one submission from raw keystrokes.

    Usage:
        editor = RawInputEditor(TerminalInput())
        text = await editor.read()
    """

    def __init__(
        self,
        terminal: Optional[TerminalInput] = None,
        write: Callable[[str], None] = safe_write,
        prompt: str = f"{Theme.ACCENT}{Theme.BOLD}{Theme.PROMPT}{Theme.RESET}",
        continuation: str = f"{Theme.MUTED}{Theme.CONTINUATION}{Theme.RESET}",
    ):
        self.terminal = terminal
        self.prompt = prompt
        self.continuation = continuation
        self.buffer = InputBuffer()
        self.pending: List[KeyPress] = []
        self._write = write
        self._escaped = False

    def start(self) -> None:
        """Begin a prompt cycle with a fresh buffer."""
        self.buffer = InputBuffer()
        self._escaped = False
        self._write(self.prompt)

    def _prompt_for(self, index: int) -> str:
        return self.prompt if index == 0 else self.continuation

    def _redraw_current(self) -> None:
        self._write(CLEAR_LINE + self._prompt_for(self.buffer.index) + self.buffer.current)

    def _new_line(self) -> None:
        self.buffer.new_line()
        self._write("\n" + self.continuation)

    def _insert(self, text: str) -> None:
        if text:
            self.buffer.insert(text)
            self._write(text)

    def _paste(self, data: str) -> None:
        first, *rest = _paste_lines(data)
        self._insert(first)
        for line in rest:
            self._new_line()
            self._insert(line)

    def handle_key(self, key_press: KeyPress) -> Optional[str]:
        """Apply one key; returns the submitted text on plain Enter.

        Raises:
            InputClosed: On Ctrl+C, or Ctrl+D with nothing typed
        """
        key = key_press.key
        escaped, self._escaped = self._escaped, False

        if key == Keys.Escape:
            self._escaped = True
            return None

        if key == Keys.BracketedPaste:
            self._paste(key_press.data)
            return None

        if key == Keys.ControlM:
            if escaped:
                self._new_line()
                return None
            self._write("\n")
            return self.buffer.text()

        if key == Keys.ControlJ:
            self._new_line()
            return None

        if key == Keys.ControlH:
            if self.buffer.delete_char():
                self._redraw_current()
            elif self.buffer.remove_line():
                self._write(CLEAR_LINE + CURSOR_UP)
                self._redraw_current()
            return None

        if key == Keys.ControlC:
            raise InputClosed(interrupted=True)

        if key == Keys.ControlD:
            if self.buffer.is_empty:
                raise InputClosed()
            return None

        if _is_printable(key_press):
            self._insert(key_press.data)
        # Navigation, function and other control keys are ignored
        return None

    def feed(self, keys: List[KeyPress]) -> Optional[str]:
        """Apply keys in order; returns the submission if one completes.

        Keys after the submitting Enter are kept in ``pending``.
        """
        for i, key_press in enumerate(keys):
            result = self.handle_key(key_press)
            if result is not None:
                rest = list(keys[i + 1:])
                # A CRLF line ending submits once
                if rest and rest[0].key == Keys.ControlJ:
                    rest = rest[1:]
                self.pending = rest
                return result
        return None

    async def read(self) -> str:
        """Prompt and wait for one submission.

        Falls back to line reads when stdin is not a terminal.

        Raises:
            InputClosed: When the operator ends the session
        """
        if self.terminal is None or not self.terminal.is_tty:
            return await self._read_line()

        self.start()
        queued, self.pending = self.pending, []
        if queued:
            logger.debug(f"Replaying {len(queued)} keys typed ahead")
            result = self.feed(queued)
            if result is not None:
                return result

        loop = asyncio.get_running_loop()
        submitted: asyncio.Future = loop.create_future()

        def on_keys(keys: List[KeyPress]) -> None:
            if submitted.done():
                self.pending.extend(keys)
                return
            if not keys:
                submitted.set_exception(InputClosed())
                return
            try:
                result = self.feed(keys)
            except InputClosed as e:
                logger.debug(f"Prompt closed ({e})")
                submitted.set_exception(e)
                return
            if result is not None:
                submitted.set_result(result)

        with self.terminal.listen(on_keys):
            return await submitted

    async def _read_line(self) -> str:
        self._write(self.prompt)
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            raise InputClosed()
        return line.rstrip("\r\n")
