"""
Shared stdout access for UI components.

All console output goes through safe_write / safe_print so that the
editor, the renderer and the cancellation bridge never interleave partial
writes. The lock is reentrant because handlers may print from inside other
output helpers.
"""

import sys
import threading

_stdout_lock = threading.RLock()


def safe_write(text: str, flush: bool = True) -> None:
    """Write raw text (no newline added) to stdout.

    Args:
        text: Text to write, ANSI escapes included
        flush: Whether to flush after writing
    """
    with _stdout_lock:
        sys.stdout.write(text)
        if flush:
            sys.stdout.flush()


def safe_print(*args, **kwargs) -> None:
    """print() under the stdout lock, always flushed."""
    kwargs.setdefault("flush", True)
    with _stdout_lock:
        print(*args, **kwargs)


__all__ = [
    "_stdout_lock",
    "safe_print",
    "safe_write",
]
