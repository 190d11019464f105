"""Per-bank CSV adapters, one module per dialect."""

from __future__ import annotations

from .barclays import BarclaysCsvParser
from .base import BankCsvParser, RowContext
from .hsbc import HsbcCsvParser
from .lloyds import LloydsCsvParser, LloydsFullCsvParser
from .metro_bank import MetroBankCsvParser
from .monzo import MonzoCsvParser
from .nationwide import NationwideCsvParser
from .revolut import RevolutCsvParser
from .santander import SantanderCsvParser
from .starling import StarlingCsvParser

__all__ = [
    "BankCsvParser",
    "BarclaysCsvParser",
    "HsbcCsvParser",
    "LloydsCsvParser",
    "LloydsFullCsvParser",
    "MetroBankCsvParser",
    "MonzoCsvParser",
    "NationwideCsvParser",
    "RevolutCsvParser",
    "RowContext",
    "SantanderCsvParser",
    "StarlingCsvParser",
]
