"""
Theme and Styling Configuration for the Crux CLI

This module defines the colors and glyphs used throughout the console.
All colors are 256-color foreground escapes so they render the same on
every modern terminal.
"""

from dataclasses import dataclass


def fg(code: int) -> str:
    """256-color foreground escape."""
    return f"\033[38;5;{code}m"


class Theme:
    """Violet ops-console palette"""

    # ANSI escape codes
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    ITALIC = "\033[3m"
    NORMAL_INTENSITY = "\033[22m"   # Ends BOLD / DIM only
    DEFAULT_FG = "\033[39m"         # Ends a foreground color only

    # Primary colors
    ACCENT = fg(98)         # Violet
    TEXT = fg(252)          # Light gray
    MUTED_TEXT = fg(244)    # Medium gray
    MUTED = fg(240)         # Dark gray
    USER = fg(117)          # Sky blue
    SUCCESS = fg(42)        # Green
    WARNING = fg(214)       # Amber
    ERROR = fg(196)         # Red

    # Semantic colors
    THINKING = fg(244)      # Reasoning text
    HEADING = fg(117)       # Markdown headers
    INLINE_CODE = fg(222)   # `code` spans
    TOOL_NAME = fg(244)
    BORDER = fg(244)        # Box borders

    # Glyphs
    PROMPT = "❯ "
    CONTINUATION = "· "
    BULLET = "•"
    TOOL_DOT = "●"
    ELLIPSIS = "…"
    CROSS = "✗"
    WARN = "⚠"
    BOLT = "⚡"
    HORIZONTAL = "─"

    # Box drawing characters
    BOX_TOP_LEFT = "╭"
    BOX_TOP_RIGHT = "╮"
    BOX_BOTTOM_LEFT = "╰"
    BOX_BOTTOM_RIGHT = "╯"
    BOX_HORIZONTAL = "─"
    BOX_VERTICAL = "│"


@dataclass
class BoxStyle:
    """Box drawing style configuration"""
    padding: int = 1
    border_color: str = Theme.BORDER
    margin: int = 4  # Columns reserved outside the box content
