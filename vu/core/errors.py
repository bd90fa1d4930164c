"""Exit codes for the vu command.

The numeric values are part of the CLI contract and should remain stable:
- 0: Success
- 2: Usage error (unknown option, missing --output); raised by typer itself
- 3: Service error (one or more services failed, only with --strict)
- 4: Configuration error (invalid config, missing token)
- 5: I/O error (output could not be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes set by vu. Usage errors keep typer's own status 2."""

    OK = 0
    SERVICE_ERROR = 3
    CONFIG_ERROR = 4
    IO_ERROR = 5
