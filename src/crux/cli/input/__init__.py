from crux.cli.input.editor import InputBuffer, InputClosed, RawInputEditor
from crux.cli.input.terminal import TerminalInput

__all__ = [
    "InputBuffer",
    "InputClosed",
    "RawInputEditor",
    "TerminalInput",
]
