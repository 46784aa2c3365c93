"""
Console UI Module - one-line session messages for the Crux console.

Session header, farewell, and the two settlement lines a run can end with:
a bold error line for runtime failures and a warning line for aborts.
"""

from typing import Callable, Optional

from crux.cli.ui.state import safe_write
from crux.cli.ui.theme import Theme


class ConsoleUI:
    """Renders session-level messages"""

    def __init__(self, write: Callable[[str], None] = safe_write):
        self._write = write

    def session_start(self, title: str = "crux", subtitle: str = "ops agent") -> None:
        self._write(
            f"\n {Theme.ACCENT}{Theme.BOLD}{Theme.BOLT} {title}{Theme.RESET}"
            f" {Theme.MUTED}— {subtitle}{Theme.RESET}\n\n"
        )

    def goodbye(self, leading_newline: bool = False) -> None:
        prefix = "\n" if leading_newline else ""
        self._write(f"{prefix}{Theme.MUTED} Goodbye.{Theme.RESET}\n")

    def run_error(self, message: str) -> None:
        self._write(f"{Theme.ERROR}{Theme.BOLD} {Theme.CROSS} {message}{Theme.RESET}\n")

    def abort_warning(self, message: str = "Aborted") -> None:
        self._write(f"\n{Theme.WARNING} {Theme.WARN} {message}{Theme.RESET}\n")


_console_ui: Optional[ConsoleUI] = None


def get_console_ui() -> ConsoleUI:
    """Get or create the global ConsoleUI instance"""
    global _console_ui
    if _console_ui is None:
        _console_ui = ConsoleUI()
    return _console_ui


def set_console_ui(ui: Optional[ConsoleUI]) -> None:
    """Replace the global ConsoleUI instance (None restores the default)"""
    global _console_ui
    _console_ui = ui


def console_session_start() -> None:
    get_console_ui().session_start()


def console_session_end(leading_newline: bool = False) -> None:
    get_console_ui().goodbye(leading_newline)
