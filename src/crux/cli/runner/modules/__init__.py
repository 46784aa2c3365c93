"""
Runner Modules for the Crux CLI

Conversation loop and error handling used by ``crux.cli.runner.runner``.
"""

# Conversation loop
from crux.cli.runner.modules.conversation import (
    ConsoleLoop,
    ConsoleState,
    _prompt_user_input,
)

# Error handling
from crux.cli.runner.modules.errors import (
    handle_startup_error,
    extract_root_cause,
)

__all__ = [
    # Conversation
    'ConsoleLoop',
    'ConsoleState',
    '_prompt_user_input',
    # Errors
    'handle_startup_error',
    'extract_root_cause',
]
