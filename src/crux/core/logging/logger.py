"""
Logging setup for the Crux console.

The terminal belongs to the interactive UI, so log records never go to
stdout. With ``--debug`` they are appended to a dated file under
``<crux home>/logs``; otherwise they are discarded.
"""

import datetime
import logging
import os
from typing import Optional

from crux.config.paths import crux_home

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_log_path: Optional[str] = None


def get_log_path() -> Optional[str]:
    """Return the active debug log file, or None when debug logging is off."""
    return _log_path


def setup_logging(debug: bool = False, log_dir: Optional[str] = None) -> Optional[str]:
    """Configure the ``crux`` logger tree.

    Args:
        debug: Write DEBUG records to ``debug-YYYY-MM-DD.log``
        log_dir: Directory for the log file (default: ``<crux home>/logs``)

    Returns:
        Path of the log file, or None if debug logging is disabled
    """
    global _log_path

    root = logging.getLogger("crux")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = False

    if not debug:
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.WARNING)
        _log_path = None
        return None

    log_dir = log_dir or crux_home("logs")
    os.makedirs(log_dir, exist_ok=True)
    date = datetime.date.today().isoformat()
    _log_path = os.path.join(log_dir, f"debug-{date}.log")

    handler = logging.FileHandler(_log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    return _log_path


def console(message: str = "", verbose: bool = True) -> None:
    """Print a user-facing one-liner through the shared stdout lock."""
    if not verbose:
        return
    from crux.cli.ui.state import safe_print

    safe_print(message)
