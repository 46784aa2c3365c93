from crux.cli.runner.runner import build_session, run_console

__all__ = ["build_session", "run_console"]
