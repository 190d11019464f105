"""Public interface for the ``bank_import`` package.

Symbol re-exports only; see the individual modules for behavior.
"""

from .classification import (
    CategorizationEngine,
    CategorizationRecommendation,
    ClassificationResult,
    TransactionClassificationService,
)
from .categorizer import CategorySuggestion, DescriptionCategorizer
from .duplicates import DuplicateCheckResult, DuplicateDetector
from .errors import (
    BankImportError,
    CsvParseError,
    FileTooLargeError,
    UndoNotAllowedError,
    UnknownFormatError,
)
from .exclusions import ExclusionResult, ExclusionRulesEngine
from .importer import MAX_FILE_SIZE_BYTES, BankStatementImportService, ImportPreview, ImportResult
from .ingest import (
    BankCsvParser,
    BankFormatDetector,
    ColumnMapping,
    CsvParseResult,
    CsvRowError,
    ErrorTolerantCsvParser,
    ManualMappingParser,
    detect_format,
    get_available_bank_names,
)
from .models import (
    ConfidenceLevel,
    ExclusionReason,
    ExpenseCategory,
    IncomeCategory,
    NormalizedTransaction,
    ReviewStatus,
)
from .staging import BankTransaction, ImportAudit

__all__ = [
    # Services
    "BankStatementImportService",
    "CategorizationEngine",
    "DuplicateDetector",
    "ExclusionRulesEngine",
    "DescriptionCategorizer",
    "TransactionClassificationService",
    # Parsing
    "BankCsvParser",
    "BankFormatDetector",
    "ColumnMapping",
    "ErrorTolerantCsvParser",
    "ManualMappingParser",
    "detect_format",
    "get_available_bank_names",
    # Values
    "BankTransaction",
    "CategorizationRecommendation",
    "CategorySuggestion",
    "ClassificationResult",
    "ConfidenceLevel",
    "CsvParseResult",
    "CsvRowError",
    "DuplicateCheckResult",
    "ExclusionReason",
    "ExclusionResult",
    "ExpenseCategory",
    "ImportAudit",
    "ImportPreview",
    "ImportResult",
    "IncomeCategory",
    "NormalizedTransaction",
    "ReviewStatus",
    # Errors / constants
    "BankImportError",
    "CsvParseError",
    "FileTooLargeError",
    "MAX_FILE_SIZE_BYTES",
    "UndoNotAllowedError",
    "UnknownFormatError",
]
