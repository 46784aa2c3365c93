"""
Box Drawer - bordered boxes around ANSI-styled lines.

Width is measured on the visible text (escapes stripped, wide characters
counted twice) while padding is applied to the original string, so colored
lines of different escape lengths still line up on the right border.
"""

from typing import List, Optional, Sequence

from crux.cli.ui.painter import pad_visible, terminal_columns, truncate_visible
from crux.cli.ui.theme import BoxStyle, Theme


def box_content_width(columns: Optional[int] = None, style: Optional[BoxStyle] = None) -> int:
    """Visible columns available for content inside a box."""
    style = style or BoxStyle()
    columns = columns or terminal_columns()
    return max(1, columns - style.margin)


def draw_box(
    lines: Sequence[str],
    border_color: Optional[str] = None,
    columns: Optional[int] = None,
    style: Optional[BoxStyle] = None,
) -> str:
    """Draw a rounded box around ``lines``.

    Args:
        lines: Content lines, may contain ANSI escapes
        border_color: Escape used for the border (default: style color)
        columns: Terminal width (default: queried)
        style: Box style (padding, margin)

    Returns:
        The box as a single string, lines joined with newlines
    """
    style = style or BoxStyle()
    color = border_color or style.border_color
    width = box_content_width(columns, style)
    pad = " " * style.padding
    horizontal = Theme.BOX_HORIZONTAL * (width + 2 * style.padding)

    out: List[str] = [f"{color}{Theme.BOX_TOP_LEFT}{horizontal}{Theme.BOX_TOP_RIGHT}{Theme.RESET}"]
    for line in lines:
        content = pad_visible(truncate_visible(line, width), width)
        out.append(
            f"{color}{Theme.BOX_VERTICAL}{Theme.RESET}{pad}{content}{pad}"
            f"{color}{Theme.BOX_VERTICAL}{Theme.RESET}"
        )
    out.append(f"{color}{Theme.BOX_BOTTOM_LEFT}{horizontal}{Theme.BOX_BOTTOM_RIGHT}{Theme.RESET}")
    return "\n".join(out)
