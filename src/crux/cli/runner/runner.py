"""
Crux Console Runner

Startup and teardown around the conversation loop:

1. Logging setup (file only, and only with --debug)
2. Configuration loading and command-line overrides
3. Agent runtime loading
4. The interactive session, with the terminal in raw mode throughout
"""

import argparse
import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from rich.console import Console as RichConsole

from crux.agent.runtime import AgentRuntime, load_runtime
from crux.cli.input.editor import RawInputEditor
from crux.cli.input.terminal import TerminalInput
from crux.cli.interrupt.handler import CancellationBridge
from crux.cli.runner.modules.conversation import ConsoleLoop
from crux.cli.runner.modules.errors import handle_startup_error
from crux.cli.ui.console import ConsoleUI, get_console_ui
from crux.cli.ui.event_dispatcher import CLIEventDispatcher
from crux.cli.ui.stream_renderer import create_stream_renderer
from crux.cli.ui.tool_formatter import ToolActivityFormatter
from crux.config import load_config
from crux.config.defaults import DEFAULT_RUNTIME
from crux.core.logging.logger import setup_logging
from crux.core.utils.rich_status import safe_rich_status

logger = logging.getLogger(__name__)


def _apply_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    if getattr(args, "model", None):
        model = config.get("model")
        if not isinstance(model, Mapping):
            model = {}
        config["model"] = {**model, "model": args.model}
    if getattr(args, "runtime", None):
        config["runtime"] = args.runtime
    return config


def model_name(config: Mapping) -> str:
    """Model label shown in the status line after each run."""
    model = config.get("model")
    if isinstance(model, Mapping):
        return str(model.get("model") or "")
    return str(model or "")


def build_session(
    runtime: AgentRuntime,
    config: Mapping,
    terminal: Optional[TerminalInput] = None,
    console_ui: Optional[ConsoleUI] = None,
) -> ConsoleLoop:
    """Wire editor, renderer, formatter and bridge around ``runtime``."""
    console_ui = console_ui or get_console_ui()
    dispatcher = CLIEventDispatcher(
        create_stream_renderer(model_name(config)),
        ToolActivityFormatter(),
        console_ui,
    )
    return ConsoleLoop(
        runtime,
        RawInputEditor(terminal),
        dispatcher,
        CancellationBridge(runtime, terminal, console_ui),
        console_ui,
    )


async def _load(args: argparse.Namespace) -> Tuple[Dict[str, Any], AgentRuntime]:
    with safe_rich_status(
        "[bold green]Starting crux...",
        console=RichConsole(),
    ) as status:
        status.update("[bold blue]Loading configuration...[/]")
        config = _apply_overrides(load_config(getattr(args, "config", None)), args)

        factory_path = config.get("runtime") or DEFAULT_RUNTIME
        status.update(f"[bold blue]Loading runtime:[/][white] {factory_path}[/]")
        runtime = load_runtime(factory_path, config)

        status.update("[bold green]Ready![/]")
    return config, runtime


async def run_console(args: argparse.Namespace) -> int:
    """Run the Crux console until the operator exits.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    debug = bool(getattr(args, "debug", False))
    log_path = setup_logging(debug=debug)
    if log_path:
        logger.debug(f"Debug logging to {log_path}")

    try:
        config, runtime = await _load(args)
    except Exception as e:
        handle_startup_error(e, debug=debug)
        return 1

    terminal = TerminalInput()
    session = build_session(runtime, config, terminal)
    with terminal.session():
        await session.run()
    logger.debug(f"Session finished after {session.runs} runs")
    return 0
