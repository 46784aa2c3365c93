"""
Stream Renderer - incremental ANSI rendering of agent reasoning and output.

Thinking chunks are echoed as they arrive in a dimmed color. Output chunks
are line-buffered: nothing is printed until a newline completes a line,
which is then styled with the line-level markdown heuristics. The partial
tail stays in RenderState.pending until the next chunk or output end.

Usage:
    renderer = StreamRenderer(model_name="gpt-4o")
    renderer.begin_run()
    renderer.on_output_start()
    renderer.on_output_chunk("Hel")
    renderer.on_output_chunk("lo\\n")   # prints "Hello"
    renderer.on_output_end()
"""

from dataclasses import dataclass
from typing import Callable, Optional

from crux.agent.events import CompletePayload
from crux.cli.config import RULE_WIDTH
from crux.cli.ui.painter import format_line, render_markdown, terminal_columns
from crux.cli.ui.state import safe_write
from crux.cli.ui.theme import Theme

FENCE = "```"


@dataclass
class RenderState:
    """Per-run rendering state. ``pending`` never holds a newline."""

    in_code_block: bool = False
    pending: str = ""
    output_started: bool = False

    def reset(self) -> None:
        self.in_code_block = False
        self.pending = ""
        self.output_started = False


@dataclass
class SessionStats:
    """Counters that survive across runs of one console session."""

    steps: int = 0
    total_tokens: int = 0


class StreamRenderer:
    """Renders the thinking/output phases of a run.

    One instance lives for the whole console session; ``begin_run()``
    resets its RenderState before each run while SessionStats accumulate.
    """

    def __init__(
        self,
        model_name: str = "",
        write: Callable[[str], None] = safe_write,
        columns: Callable[[], int] = terminal_columns,
    ):
        self.model_name = model_name
        self.state = RenderState()
        self.stats = SessionStats()
        self._write = write
        self._columns = columns

    def begin_run(self) -> None:
        self.state.reset()

    # ── Thinking ────────────────────────────────────────────────

    def on_thinking_start(self) -> None:
        # The first chunk starts printing
        pass

    def on_thinking_chunk(self, text: str) -> None:
        if text:
            self._write(f"{Theme.THINKING}{Theme.DIM}{text}{Theme.RESET}")

    def on_thinking_end(self) -> None:
        self._write("\n")

    # ── Output ──────────────────────────────────────────────────

    def on_output_start(self) -> None:
        self.state.output_started = True
        self._write("\n")

    def on_output_chunk(self, text: str) -> None:
        self.state.output_started = True
        self.state.pending += text

        while "\n" in self.state.pending:
            line, self.state.pending = self.state.pending.split("\n", 1)
            self._write(self._render_line(line) + "\n")

    def on_output_end(self) -> None:
        self._flush_pending()
        self.state.in_code_block = False
        if self.state.output_started:
            self._write("\n")

    def _flush_pending(self) -> None:
        """Print the unterminated tail, styled like a full line, no newline."""
        if self.state.pending:
            self._write(self._render_line(self.state.pending))
            self.state.pending = ""

    def _render_line(self, line: str) -> str:
        if line.startswith(FENCE):
            self.state.in_code_block = not self.state.in_code_block
            width = min(RULE_WIDTH, self._columns() - 2)
            return f"{Theme.MUTED_TEXT}{Theme.HORIZONTAL * max(0, width)}{Theme.RESET}"
        if self.state.in_code_block:
            return f"{Theme.MUTED_TEXT}{Theme.DIM}  {line}{Theme.RESET}"
        return format_line(line)

    # ── Settlement ──────────────────────────────────────────────

    def on_complete(self, payload: CompletePayload) -> None:
        """Print the unstreamed response (if any) and the session status line."""
        if self.state.pending:
            self._flush_pending()
            self._write("\n")

        if not self.state.output_started and payload.response:
            self._write(render_markdown(payload.response) + "\n")

        self.stats.steps += 1
        self.stats.total_tokens = payload.usage.total_tokens
        self._write(self.status_line() + "\n")

    def settle_partial(self) -> None:
        """Flush output cut short by an error so it isn't silently dropped."""
        if self.state.pending:
            self._flush_pending()
            self._write("\n")
        self.state.in_code_block = False

    def status_line(self) -> str:
        parts = []
        if self.model_name:
            parts.append(self.model_name)
        parts.append(f"{self.stats.steps} steps")
        parts.append(f"{self.stats.total_tokens} tokens")
        return f" {Theme.MUTED}{' · '.join(parts)}{Theme.RESET}"


def create_stream_renderer(model_name: Optional[str] = None) -> StreamRenderer:
    """Create a session renderer writing to stdout."""
    return StreamRenderer(model_name=model_name or "")
