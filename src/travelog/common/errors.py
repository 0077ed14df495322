"""Error types for the travel-log sync.

Nothing is translated into structured codes: errors propagate to the CLI,
which maps the class to a process exit code.
"""

from __future__ import annotations


class TravelogError(Exception):
    """Base class for all sync errors."""


class InputError(TravelogError):
    """Local input is missing or unreadable (CLI args, input file, spreadsheetId)."""


class ParseError(TravelogError):
    """The input file cannot be interpreted at all.

    Never raised for column-count mismatches between a row and the header.
    """


class RemoteError(TravelogError):
    def __init__(self, operation: str, message: str, *, status: int | None = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status = status
