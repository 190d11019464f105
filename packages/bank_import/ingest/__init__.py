"""CSV ingestion: bank adapters, format detection and tolerant parsing."""

from __future__ import annotations

from .adapters import BankCsvParser
from .detector import (
    DEFAULT_PARSERS,
    BankFormatDetector,
    detect_format,
    get_available_bank_names,
)
from .error_tolerant import CsvParseResult, CsvRowError, ErrorTolerantCsvParser
from .manual_mapping import ColumnMapping, ManualMappingParser

__all__ = [
    "DEFAULT_PARSERS",
    "BankCsvParser",
    "BankFormatDetector",
    "ColumnMapping",
    "CsvParseResult",
    "CsvRowError",
    "ErrorTolerantCsvParser",
    "ManualMappingParser",
    "detect_format",
    "get_available_bank_names",
]
