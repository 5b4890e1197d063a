"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    QuietConsole,
    RichConsole,
    Style,
)
from .errors import bin_error_exit_code, print_bin_error

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "QuietConsole",
    "RichConsole",
    "Style",
    "bin_error_exit_code",
    "print_bin_error",
]
