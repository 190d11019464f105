"""Bank CSV format detection.

Detection reads only the header row and asks each registered adapter, in
registry order, whether it recognizes it. The registry is a static tuple;
adding a bank means adding its adapter here.
"""

from __future__ import annotations

from collections.abc import Sequence
from os import PathLike
from pathlib import Path

from ..logging_setup import get_logger
from .adapters import (
    BankCsvParser,
    BarclaysCsvParser,
    HsbcCsvParser,
    LloydsCsvParser,
    MetroBankCsvParser,
    MonzoCsvParser,
    NationwideCsvParser,
    RevolutCsvParser,
    SantanderCsvParser,
    StarlingCsvParser,
)
from .utils import read_header_cells

_logger = get_logger("bank_import.ingest.detector")

DEFAULT_PARSERS: tuple[type[BankCsvParser], ...] = (
    BarclaysCsvParser,
    HsbcCsvParser,
    LloydsCsvParser,
    NationwideCsvParser,
    StarlingCsvParser,
    MonzoCsvParser,
    RevolutCsvParser,
    SantanderCsvParser,
    MetroBankCsvParser,
)


class BankFormatDetector:
    def __init__(self, parsers: Sequence[BankCsvParser] | None = None) -> None:
        self._parsers: tuple[BankCsvParser, ...] = (
            tuple(parsers) if parsers is not None else tuple(cls() for cls in DEFAULT_PARSERS)
        )

    @property
    def parsers(self) -> tuple[BankCsvParser, ...]:
        return self._parsers

    @staticmethod
    def extract_headers(path: str | PathLike[str], encoding: str = "utf-8") -> list[str]:
        """Return the trimmed header cells of ``path``; ``[]`` for an empty file.

        Raises ``CsvParseError`` (field ``"file"``) when the leading bytes do not
        decode with ``encoding``.
        """

        return read_header_cells(path, encoding)

    def detect_format(
        self, path: str | PathLike[str], encoding: str = "utf-8"
    ) -> BankCsvParser | None:
        headers = self.extract_headers(path, encoding)
        if not headers:
            return None
        for parser in self._parsers:
            if parser.can_parse(headers):
                _logger.info("Detected %s format for %s", parser.get_bank_name(), Path(path).name)
                return parser
        _logger.info("No bank format matched headers %s", headers)
        return None

    def available_bank_names(self) -> list[str]:
        return [p.get_bank_name() for p in self._parsers]


_DEFAULT_DETECTOR: BankFormatDetector | None = None


def _default_detector() -> BankFormatDetector:
    global _DEFAULT_DETECTOR
    if _DEFAULT_DETECTOR is None:
        _DEFAULT_DETECTOR = BankFormatDetector()
    return _DEFAULT_DETECTOR


def detect_format(path: str | PathLike[str], encoding: str = "utf-8") -> BankCsvParser | None:
    """Module-level convenience over the default detector."""

    return _default_detector().detect_format(path, encoding)


def get_available_bank_names() -> list[str]:
    return _default_detector().available_bank_names()


__all__ = [
    "DEFAULT_PARSERS",
    "BankFormatDetector",
    "detect_format",
    "get_available_bank_names",
]
