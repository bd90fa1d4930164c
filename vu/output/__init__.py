"""Output: console abstraction, result writer and run summary."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .summary import RunSummary, print_summary
from .writer import OutputError, OutputFormat, render, write_output

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputError",
    "OutputFormat",
    "RichConsole",
    "RunSummary",
    "Style",
    "print_summary",
    "render",
    "write_output",
]
