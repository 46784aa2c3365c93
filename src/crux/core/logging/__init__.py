from crux.core.logging.logger import console, get_log_path, setup_logging

__all__ = ["console", "get_log_path", "setup_logging"]
