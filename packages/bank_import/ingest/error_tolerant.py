"""Row-by-row parsing that collects failures instead of aborting.

``ErrorTolerantCsvParser`` wraps any :class:`BankCsvParser` and drives the
same row iterator and row parser the strict ``parse`` uses, catching
per-row errors. File-level problems (unreadable file, wrong encoding) still
raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

from ..logging_setup import get_logger
from ..models import NormalizedTransaction
from .adapters.base import BankCsvParser

_logger = get_logger("bank_import.ingest.error_tolerant")


@dataclass(frozen=True, slots=True)
class CsvRowError:
    """A data row that failed to parse, with its 1-based line number."""

    line_number: int
    raw_line: str
    message: str

    def to_dict(self) -> dict[str, object]:
        return {"line_number": self.line_number, "raw_line": self.raw_line, "message": self.message}


@dataclass(frozen=True, slots=True)
class CsvParseResult:
    transactions: list[NormalizedTransaction] = field(default_factory=list)
    errors: list[CsvRowError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def success_count(self) -> int:
        return len(self.transactions)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def total_rows_processed(self) -> int:
        return self.success_count + self.error_count


class ErrorTolerantCsvParser:
    def __init__(self, parser: BankCsvParser) -> None:
        self.parser = parser

    def get_bank_name(self) -> str:
        return self.parser.get_bank_name()

    def parse(self, path: str | PathLike[str], encoding: str = "utf-8") -> CsvParseResult:
        file_name = Path(path).name
        result = CsvParseResult()
        parser = self.parser.for_file(path, encoding)
        for line_number, raw, fields in parser.iter_rows(path, encoding):
            try:
                tx = parser.parse_row(fields, line_number=line_number, file_name=file_name)
            except ValueError as exc:
                # CsvParseError carries the bare message; other ValueErrors only str()
                message = getattr(exc, "message", None) or str(exc)
                _logger.warning("Skipping line %d of %s: %s", line_number, file_name, message)
                result.errors.append(CsvRowError(line_number, raw, message))
                continue
            if tx is not None:
                result.transactions.append(tx)
        return result


__all__ = ["CsvParseResult", "CsvRowError", "ErrorTolerantCsvParser"]
