"""
Tool Activity Formatter - renders tool calls and tool results.

The shell tool gets a terminal-like rendering: its call shows as
``$ <command>`` and its result is parsed as a ShellResultPayload whose
streams are printed directly. Every other tool, and any shell result that
can't be parsed, is shown as markdown inside a bordered box.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

from crux.agent.events import ToolCallEvent, ToolResultEvent
from crux.cli.config import (
    MAX_RESULT_BOX_LINES,
    MAX_RESULT_CHARS,
    MAX_SHELL_LINES,
    SHELL_TOOL,
)
from crux.cli.ui.box import box_content_width, draw_box
from crux.cli.ui.painter import render_markdown, terminal_columns
from crux.cli.ui.state import safe_write
from crux.cli.ui.theme import Theme
from crux.core.common.exceptions import RenderParseError

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = f"\n{Theme.ELLIPSIS} (truncated)"


@dataclass(frozen=True)
class ShellResultPayload:
    """Result of the shell tool. Every field is optional."""

    exit_code: Optional[int] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    timed_out: bool = False
    error: Optional[str] = None

    @classmethod
    def parse(cls, result: Any) -> "ShellResultPayload":
        """Interpret a shell tool result (JSON text or an already decoded mapping).

        Raises:
            RenderParseError: If the result isn't a JSON object or a known
                field has the wrong type
        """
        data = result
        if isinstance(result, (str, bytes)):
            try:
                data = json.loads(result)
            except ValueError as e:
                raise RenderParseError(f"Shell result is not JSON: {e}", SHELL_TOOL) from e
        if not isinstance(data, Mapping):
            raise RenderParseError("Shell result is not an object", SHELL_TOOL)

        exit_code = data.get("exitCode")
        if isinstance(exit_code, float) and exit_code.is_integer():
            exit_code = int(exit_code)
        if exit_code is not None and (isinstance(exit_code, bool) or not isinstance(exit_code, int)):
            raise RenderParseError(f"exitCode must be an integer, got {exit_code!r}", SHELL_TOOL)

        streams = {}
        for key in ("stdout", "stderr"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise RenderParseError(f"{key} must be a string", SHELL_TOOL)
            streams[key] = value

        timed_out = data.get("timedOut")
        if timed_out is None:
            timed_out = False
        elif not isinstance(timed_out, bool):
            raise RenderParseError("timedOut must be a boolean", SHELL_TOOL)

        error = data.get("error")
        return cls(
            exit_code=exit_code,
            stdout=streams["stdout"],
            stderr=streams["stderr"],
            timed_out=timed_out,
            error=str(error) if error is not None else None,
        )


def compact_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"), default=str)


def tint(line: str, color: str) -> str:
    """Color a rendered line, restoring the color after each embedded reset."""
    return f"{color}{line.replace(Theme.RESET, Theme.RESET + color)}{Theme.RESET}"


class ToolActivityFormatter:
    """Prints tool-call and tool-result events."""

    def __init__(
        self,
        write: Callable[[str], None] = safe_write,
        columns: Callable[[], int] = terminal_columns,
        shell_tool: str = SHELL_TOOL,
    ):
        self._write = write
        self._columns = columns
        self.shell_tool = shell_tool

    # ── Tool Call ───────────────────────────────────────────────

    def on_tool_call(self, event: ToolCallEvent) -> None:
        if event.name == self.shell_tool:
            command = event.args.get("command")
            detail = f"{Theme.MUTED}$ {Theme.TEXT}{'' if command is None else command}{Theme.RESET}"
        else:
            detail = f"{Theme.MUTED_TEXT}{compact_json(event.args)}{Theme.RESET}"

        self._write(
            f"\n  {Theme.ACCENT}{Theme.TOOL_DOT}{Theme.RESET} "
            f"{Theme.TOOL_NAME}{event.name}{Theme.RESET}  {detail}\n"
        )

    # ── Tool Result ─────────────────────────────────────────────

    def on_tool_result(self, event: ToolResultEvent) -> None:
        if event.name == self.shell_tool:
            try:
                payload = ShellResultPayload.parse(event.result)
            except RenderParseError as e:
                logger.debug(f"Falling back to generic rendering for {event.name}: {e.message}")
            else:
                self._write("".join(line + "\n" for line in self.format_shell_result(payload)))
                return

        self._write(self.format_generic_result(event) + "\n")

    def format_shell_result(self, payload: ShellResultPayload) -> List[str]:
        lines: List[str] = []
        if payload.stdout and payload.stdout.strip():
            lines.extend(self._capped(payload.stdout.strip(), Theme.TEXT))
        if payload.stderr and payload.stderr.strip():
            lines.extend(self._capped(payload.stderr.strip(), Theme.ERROR))
        if payload.error:
            lines.append(f"  {Theme.ERROR}{payload.error}{Theme.RESET}")
        if payload.timed_out:
            lines.append(f"  {Theme.WARNING}{Theme.WARN} timed out{Theme.RESET}")
        if payload.exit_code is not None and payload.exit_code != 0:
            lines.append(f"  {Theme.ERROR}{Theme.BOLD}{Theme.CROSS} exit {payload.exit_code}{Theme.RESET}")
        return lines

    def _capped(self, text: str, color: str) -> List[str]:
        source = text.split("\n")
        lines = [f"  {color}{line}{Theme.RESET}" for line in source[:MAX_SHELL_LINES]]
        if len(source) > MAX_SHELL_LINES:
            hidden = len(source) - MAX_SHELL_LINES
            lines.append(f"  {Theme.MUTED}{Theme.ELLIPSIS} {hidden} more lines{Theme.RESET}")
        return lines

    def format_generic_result(self, event: ToolResultEvent) -> str:
        result = event.result
        if isinstance(result, str):
            text = result
        else:
            text = json.dumps(result, indent=2, ensure_ascii=False, default=str)
        if len(text) > MAX_RESULT_CHARS:
            text = text[:MAX_RESULT_CHARS] + TRUNCATION_MARKER

        columns = self._columns()
        color = Theme.ERROR if event.is_error else Theme.MUTED_TEXT
        rendered = render_markdown(text, width=box_content_width(columns) - 2)
        result_lines = ["  " + tint(line, color) for line in rendered.split("\n")]

        box_lines = result_lines[:MAX_RESULT_BOX_LINES]
        if len(result_lines) > MAX_RESULT_BOX_LINES:
            hidden = len(result_lines) - MAX_RESULT_BOX_LINES
            box_lines.append(f"  {Theme.MUTED}{Theme.ELLIPSIS} ({hidden} more lines){Theme.RESET}")

        border = Theme.ERROR if event.is_error else Theme.BORDER
        return draw_box(box_lines, border_color=border, columns=columns)
