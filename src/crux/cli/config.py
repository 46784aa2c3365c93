"""
CLI Configuration Module

Constants for the console layer: which tool gets the shell-style rendering
and how much tool output is shown before it is elided.
"""

from typing import FrozenSet

# ========================================================================
# Tool Rendering
# ========================================================================

# Tool whose calls render as "$ <command>" and whose results are parsed as
# {exitCode, stdout, stderr, timedOut, error}
SHELL_TOOL = "exec_command"

# Maximum stdout / stderr lines shown for a shell result (each stream)
MAX_SHELL_LINES = 10

# Generic tool results are cut to this many characters before rendering
MAX_RESULT_CHARS = 500

# Maximum rendered lines inside a generic tool result box
MAX_RESULT_BOX_LINES = 15


# ========================================================================
# Stream Rendering
# ========================================================================

# Width of horizontal rules and code fence separators
RULE_WIDTH = 40

# Used when the terminal width can't be queried
FALLBACK_COLUMNS = 80


# ========================================================================
# Conversation Loop
# ========================================================================

# Inputs (after trimming) that end the session without starting a run
EXIT_COMMANDS: FrozenSet[str] = frozenset({"exit", "quit"})
