"""
Crux command line entry point.

Usage:
    crux [--config PATH] [--runtime MODULE:FACTORY] [--model NAME] [--debug]
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from crux import __version__
from crux.cli.runner.runner import run_console
from crux.cli.ui.console import console_session_end


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crux",
        description="Interactive terminal console for the Crux ops agent.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Config file (default: <crux home>/config.yaml)",
    )
    parser.add_argument(
        "--runtime",
        metavar="MODULE:FACTORY",
        help="Agent runtime factory, overrides the 'runtime' config key",
    )
    parser.add_argument(
        "--model",
        metavar="NAME",
        help="Model name, overrides 'model.model' from the config",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Write a debug log to <crux home>/logs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run_console(args))
    except KeyboardInterrupt:
        # SIGINT at a cooked-mode prompt
        console_session_end(leading_newline=True)
        return 0


if __name__ == "__main__":
    sys.exit(main())
