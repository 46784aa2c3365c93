"""Platform-aware location of the Crux home directory."""

import os
import sys


def crux_home(*segments: str) -> str:
    """Return the Crux base directory, optionally joined with ``segments``.

    ``CRUX_HOME`` wins when set; otherwise ``%APPDATA%\\crux`` on Windows
    and ``~/.crux`` everywhere else.
    """
    base = os.environ.get("CRUX_HOME")
    if not base:
        if sys.platform == "win32":
            appdata = os.environ.get("APPDATA") or os.path.join(
                os.path.expanduser("~"), "AppData", "Roaming"
            )
            base = os.path.join(appdata, "crux")
        else:
            base = os.path.join(os.path.expanduser("~"), ".crux")
    return os.path.join(base, *segments) if segments else base
