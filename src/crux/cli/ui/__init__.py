"""Terminal rendering for the Crux console."""

from crux.cli.ui.box import draw_box
from crux.cli.ui.console import ConsoleUI
from crux.cli.ui.event_dispatcher import CLIEventDispatcher
from crux.cli.ui.stream_renderer import RenderState, StreamRenderer
from crux.cli.ui.theme import Theme
from crux.cli.ui.tool_formatter import ShellResultPayload, ToolActivityFormatter

__all__ = [
    "CLIEventDispatcher",
    "ConsoleUI",
    "RenderState",
    "ShellResultPayload",
    "StreamRenderer",
    "Theme",
    "ToolActivityFormatter",
    "draw_box",
]
