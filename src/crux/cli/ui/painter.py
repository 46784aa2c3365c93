"""
ANSI Painter - width-aware ANSI text helpers and markdown styling.

Two markdown paths live here:

- format_line(): line-level heuristics used while output streams in. It
  only knows headers, rules, bullets and **bold** / *dim* / `code` spans.
- render_markdown(): whole-document rendering through Rich, used for tool
  results and responses that arrive without streaming. Any Rich failure
  degrades to format_line() applied line by line.
"""

import io
import logging
import re
import shutil
import unicodedata
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from crux.cli.config import FALLBACK_COLUMNS, RULE_WIDTH
from crux.cli.ui.theme import Theme

logger = logging.getLogger(__name__)

# CSI sequences (colors, cursor movement, erase) - anything ESC [ ... final
ANSI_PATTERN = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")

_HEADER = re.compile(r"^(#{1,3}) (.*)$")
_RULE = re.compile(r"^(-{3,}|\*{3,})$")
_BULLET = re.compile(r"^(\s*)[-*] ")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"(?<!\*)\*([^*]+)\*(?!\*)")
_CODE = re.compile(r"`([^`]+)`")
_TRAILING_BLANK = re.compile(r"[ \t]+((?:\x1b\[[0-?]*[ -/]*[@-~])*)$")


def terminal_columns() -> int:
    """Current terminal width, or FALLBACK_COLUMNS when it can't be queried."""
    try:
        columns = shutil.get_terminal_size((FALLBACK_COLUMNS, 24)).columns
    except (OSError, ValueError):
        return FALLBACK_COLUMNS
    return columns if columns > 0 else FALLBACK_COLUMNS


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_PATTERN.sub("", text)


def _char_width(char: str) -> int:
    if unicodedata.combining(char):
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


def visible_width(text: str) -> int:
    """Number of terminal columns the text occupies once escapes are removed."""
    return sum(_char_width(c) for c in strip_ansi(text))


def pad_visible(text: str, width: int) -> str:
    """Right-pad the original (escaped) text to ``width`` visible columns."""
    return text + " " * max(0, width - visible_width(text))


def truncate_visible(text: str, width: int) -> str:
    """Cut text to at most ``width`` visible columns, keeping escapes intact.

    If anything was cut and the text carried escapes, a RESET is appended
    so the remainder of the terminal line isn't left styled.
    """
    if visible_width(text) <= width:
        return text

    out = []
    used = 0
    pos = 0
    saw_escape = False
    while pos < len(text):
        match = ANSI_PATTERN.match(text, pos)
        if match:
            out.append(match.group(0))
            saw_escape = True
            pos = match.end()
            continue
        w = _char_width(text[pos])
        if used + w > width:
            break
        out.append(text[pos])
        used += w
        pos += 1
    if saw_escape:
        out.append(Theme.RESET)
    return "".join(out)


def highlight_inline(text: str) -> str:
    """Style **bold**, *emphasis* (dimmed) and `code` spans, non-greedily."""
    text = _BOLD.sub(f"{Theme.BOLD}\\1{Theme.NORMAL_INTENSITY}", text)
    text = _ITALIC.sub(f"{Theme.DIM}\\1{Theme.NORMAL_INTENSITY}", text)
    text = _CODE.sub(f"{Theme.INLINE_CODE}\\1{Theme.DEFAULT_FG}", text)
    return text


def format_line(line: str) -> str:
    """Apply line-level markdown styling to one complete output line.

    First match wins: header, horizontal rule, then bullet + inline spans.
    Code fences are not handled here; the stream renderer owns fence state.
    """
    header = _HEADER.match(line)
    if header:
        return f"{Theme.BOLD}{Theme.HEADING}{header.group(2)}{Theme.RESET}"

    if _RULE.match(line.strip()):
        return f"{Theme.DIM}{Theme.HORIZONTAL * RULE_WIDTH}{Theme.RESET}"

    line = _BULLET.sub(f"\\1{Theme.BULLET} ", line, count=1)
    return highlight_inline(line)


def _rstrip_visible(line: str) -> str:
    return _TRAILING_BLANK.sub(r"\1", line)


def render_markdown(text: str, width: Optional[int] = None) -> str:
    """Render a markdown document to an ANSI string.

    Args:
        text: Markdown source
        width: Wrap width in columns (default: terminal width - 4)

    Returns:
        ANSI-styled text without trailing blank lines; runs of blank lines
        are collapsed to one
    """
    if not text:
        return ""
    width = width or terminal_columns() - 4
    try:
        buffer = io.StringIO()
        rich_console = Console(
            file=buffer,
            force_terminal=True,
            color_system="256",
            width=max(20, width),
            legacy_windows=False,
        )
        rich_console.print(Markdown(text, hyperlinks=False))
        rendered = buffer.getvalue()
    except Exception as e:
        logger.debug(f"Markdown rendering failed, using line heuristics: {e}", exc_info=True)
        return "\n".join(format_line(line) for line in text.split("\n"))

    lines = [_rstrip_visible(line) for line in rendered.split("\n")]
    rendered = re.sub(r"\n{3,}", "\n\n", "\n".join(lines))
    return rendered.rstrip("\n")


__all__ = [
    "ANSI_PATTERN",
    "format_line",
    "highlight_inline",
    "pad_visible",
    "render_markdown",
    "strip_ansi",
    "terminal_columns",
    "truncate_visible",
    "visible_width",
]
