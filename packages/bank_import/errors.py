"""Exception types raised by the import pipeline.

``CsvParseError`` subclasses ``ValueError`` so callers that only care about
"bad input" can catch the builtin; the other types signal conditions at the
import-service boundary.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path


class BankImportError(Exception):
    """Base class for bank_import errors."""


class CsvParseError(BankImportError, ValueError):
    """A row or file could not be parsed.

    ``field`` names the offending value (``"date"``, ``"amount"``,
    ``"description"``, ``"columns"``, ``"balance"`` or ``"file"``) and
    ``line_number`` is 1-based with the header on line 1.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str,
        line_number: int | None = None,
        file_name: str | None = None,
    ) -> None:
        self.message = message
        self.field = field
        self.line_number = line_number
        self.file_name = file_name
        where = []
        if file_name:
            where.append(f"file {file_name}")
        if line_number is not None:
            where.append(f"line {line_number}")
        super().__init__(f"{message} ({', '.join(where)})" if where else message)


class UnknownFormatError(BankImportError):
    """No registered bank parser recognizes the file's header row."""

    def __init__(self, path: str | PathLike[str] | None = None) -> None:
        self.file_name = Path(path).name if path is not None else None
        super().__init__(
            "Unknown CSV format. Please check the file format or use manual column mapping."
        )


class FileTooLargeError(BankImportError):
    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"File too large: {size} bytes exceeds the maximum of {limit} bytes"
        )


class UndoNotAllowedError(BankImportError):
    """An import cannot be undone (already undone or outside the undo window)."""


__all__ = [
    "BankImportError",
    "CsvParseError",
    "FileTooLargeError",
    "UndoNotAllowedError",
    "UnknownFormatError",
]
