"""
Error handling utilities for the Crux CLI runner.

Covers failures that happen before or around the interactive session
(config, runtime loading). Failures inside a run never get here; the
conversation loop renders those as error lines and keeps going.

Functions:
    - handle_startup_error: User-friendly output for a fatal startup error
    - extract_root_cause: The innermost CruxException behind an exception chain
"""

import logging
import traceback
from typing import Iterator, Optional

from crux.core.common.exceptions import CruxException
from crux.core.logging.logger import console, get_log_path
from crux.cli.ui.theme import Theme

logger = logging.getLogger(__name__)


def handle_startup_error(e: BaseException, debug: bool = False) -> None:
    """Print a fatal startup error.

    Known CruxException types get a concise ``[CODE] message`` line; any
    other exception shows its type and text. With ``debug`` the full
    traceback follows.

    Args:
        e: The exception that stopped startup
        debug: Whether --debug was given
    """
    logger.error(f"Startup failed: {e}", exc_info=e)
    root_cause = extract_root_cause(e)

    if isinstance(root_cause, CruxException):
        console(f"{Theme.ERROR}{Theme.BOLD} {Theme.CROSS} Error [{root_cause.code}]: {root_cause.message}{Theme.RESET}")
    else:
        console(f"{Theme.ERROR}{Theme.BOLD} {Theme.CROSS} {type(e).__name__}: {e}{Theme.RESET}")

    if debug:
        console("\n--- Full Traceback (debug mode) ---")
        console("".join(traceback.format_exception(type(e), e, e.__traceback__)).rstrip())
        log_path = get_log_path()
        if log_path:
            console(f"{Theme.MUTED} Debug log: {log_path}{Theme.RESET}")
    else:
        console(f"{Theme.MUTED} Run with --debug for the full traceback{Theme.RESET}")


def _exception_chain(e: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = e
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def extract_root_cause(e: BaseException) -> BaseException:
    """The innermost CruxException behind ``e``, otherwise ``e`` itself.

    Runtime factories often wrap our errors (a ``RuntimeError`` around a
    RunError, say); the innermost one has the most specific message.
    """
    found = [exc for exc in _exception_chain(e) if isinstance(exc, CruxException)]
    return found[-1] if found else e
