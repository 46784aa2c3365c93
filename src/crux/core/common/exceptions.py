"""
Exception hierarchy for the Crux console.

Every error the console reasons about derives from CruxException, which
carries a stable ``code`` and a human readable ``message``:

- RenderParseError: a tool payload that doesn't fit its specialized renderer
- RunError: a failure reported by the agent runtime
- AbortError: the run ended because the operator cancelled it
"""

import asyncio
from datetime import datetime
from typing import Any, Optional


class CruxException(Exception):
    """Base class for all Crux errors."""

    default_code = "CRUX_ERROR"
    default_message = "Crux error"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.message}"


class RenderParseError(CruxException):
    """A tool result does not have the shape its specialized renderer expects."""

    default_code = "RENDER_PARSE_ERROR"
    default_message = "Tool result could not be interpreted"

    def __init__(self, message: Optional[str] = None, tool_name: str = ""):
        super().__init__(message)
        self.tool_name = tool_name


class RunError(CruxException):
    """The agent runtime reported a failure for the current run."""

    default_code = "RUN_ERROR"
    default_message = "Agent run failed"

    def __init__(self, message: Optional[str] = None, cause: Any = None):
        super().__init__(message)
        self.cause = cause


class AbortError(CruxException):
    """The current run was cancelled by the operator."""

    default_code = "ABORTED"
    default_message = "Aborted"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message)
        self.aborted_at = datetime.now()


def is_abort(error: Any) -> bool:
    """Tell whether a runtime error value means the run was cancelled.

    Runtimes written against the callback contract report cancellation in
    different ways: a dedicated AbortError, a cancelled asyncio task, or a
    plain error whose message is ``Aborted``.
    """
    if isinstance(error, (AbortError, asyncio.CancelledError)):
        return True
    message = getattr(error, "message", None)
    if message is None:
        message = str(error) if error is not None else ""
    return str(message).strip() == AbortError.default_message


def error_message(error: Any) -> str:
    """Return the user facing text of a runtime error value."""
    if isinstance(error, CruxException):
        return error.message
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    if error is None:
        return "Unknown error"
    return str(error)
