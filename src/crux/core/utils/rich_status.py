"""Opt-in Rich status spinner for slow startup steps.

Rich's live status takes over the cursor, which is unsafe once the console
owns the terminal in raw mode and pointless when output is piped. The
spinner is therefore only shown before the session starts, on a terminal,
and only when ``CRUX_ENABLE_RICH_STATUS=1``.

The spinner itself never raises: a failure to start, update or stop it is
logged at debug and the startup step carries on without it. Errors raised
by the wrapped block still propagate.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol

from rich.console import Console
from rich.status import Status

logger = logging.getLogger(__name__)

ENABLE_ENV_VAR = "CRUX_ENABLE_RICH_STATUS"


class StatusLike(Protocol):
    """The part of Rich's Status object that callers use."""

    def update(self, *_args: Any, **_kwargs: Any) -> None: ...


class _NoopStatus:
    def update(self, *_args: Any, **_kwargs: Any) -> None:
        return


class _GuardedStatus:
    """A started Rich status whose updates can't fail the caller."""

    def __init__(self, status: Status):
        self._status = status

    def update(self, *args: Any, **kwargs: Any) -> None:
        try:
            self._status.update(*args, **kwargs)
        except Exception as e:
            logger.debug(f"Status update failed: {e}")

    def stop(self) -> None:
        try:
            self._status.stop()
        except Exception as e:
            logger.debug(f"Status stop failed: {e}")


def _start_status(message: str, console: Optional[Console]) -> Optional[_GuardedStatus]:
    try:
        active_console = console or Console()
        if not getattr(active_console, "is_terminal", False):
            return None
        status = active_console.status(message)
        status.start()
    except Exception as e:
        logger.debug(f"Status spinner unavailable: {e}", exc_info=True)
        return None
    return _GuardedStatus(status)


@contextmanager
def safe_rich_status(
    message: str,
    *,
    console: Optional[Console] = None,
    enable_env_var: str = ENABLE_ENV_VAR,
) -> Iterator[StatusLike]:
    """Yield a running spinner when enabled and possible, else a no-op."""
    status = None
    if os.environ.get(enable_env_var) == "1":
        status = _start_status(message, console)
    if status is None:
        yield _NoopStatus()
        return

    try:
        yield status
    finally:
        status.stop()
