"""Bank statement import: the single entry point that writes to storage.

``BankStatementImportService.import_bank_statement`` runs the whole pipeline
for one CSV file:

1. admission: the file must exist and be at most ``MAX_FILE_SIZE_BYTES``;
2. detection of the bank dialect (``UnknownFormatError`` when none matches);
3. parsing, strict by default or error-tolerant on request;
4. duplicate detection against staged rows, income/expense history and the
   batch itself;
5. one transactional scope that saves exactly one ``ImportAudit`` and every
   non-duplicate row as a PENDING ``BankTransaction``.

If anything fails inside step 5 the scope rolls back, so an audit never exists
without its rows or vice versa.
"""

from __future__ import annotations

import hashlib
import os
import re
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from os import PathLike
from pathlib import Path
from uuid import UUID

from .classification import CategorizationEngine
from .contracts import StoreScope
from .duplicates import DuplicateDetector
from .errors import FileTooLargeError, UnknownFormatError
from .ingest.adapters.base import BankCsvParser
from .ingest.detector import BankFormatDetector
from .ingest.error_tolerant import CsvRowError, ErrorTolerantCsvParser
from .ingest.manual_mapping import ColumnMapping, ManualMappingParser
from .logging_setup import get_logger
from .models import NormalizedTransaction, ReviewStatus
from .staging import DEFAULT_ACTOR, BankTransaction, ImportAudit

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
ACTOR_ENV_VAR = "BANK_IMPORT_USER"

_logger = get_logger("bank_import.importer")

type Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def resolve_actor(actor: str | None = None) -> str:
    return actor or os.getenv(ACTOR_ENV_VAR) or DEFAULT_ACTOR


def source_format_id(bank_name: str) -> str:
    """``"csv-"`` plus the lower-cased bank name, whitespace as hyphens."""

    return "csv-" + re.sub(r"\s+", "-", bank_name.strip().lower())


@dataclass(frozen=True, slots=True)
class ImportResult:
    audit_id: UUID
    bank_name: str
    total_records: int
    imported_count: int
    duplicate_count: int
    imported_ids: tuple[UUID, ...] = ()
    errors: tuple[CsvRowError, ...] = ()
    excluded_count: int = 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True, slots=True)
class ImportPreview:
    """What an import would do, computed without writing anything."""

    bank_name: str
    unique: list[NormalizedTransaction] = field(default_factory=list)
    duplicates: list[NormalizedTransaction] = field(default_factory=list)
    errors: tuple[CsvRowError, ...] = ()

    @property
    def total_records(self) -> int:
        return len(self.unique) + len(self.duplicates) + len(self.errors)


class BankStatementImportService:
    """Import bank CSV exports into staged ``BankTransaction`` rows.

    Parameters
    ----------
    store_scope:
        Factory for a transactional ``ImportStore`` (see ``contracts``);
        ``persistence.sql_store_scope()`` in production.
    detector:
        Format detector; defaults to the built-in bank registry.
    clock:
        Time source for audit and row timestamps.
    engine:
        Categorization engine used when ``auto_categorize=True``.
    actor:
        Recorded as ``imported_by``; defaults to ``$BANK_IMPORT_USER`` or
        ``"local-user"``.
    """

    def __init__(
        self,
        store_scope: StoreScope,
        *,
        detector: BankFormatDetector | None = None,
        clock: Clock = utc_now,
        engine: CategorizationEngine | None = None,
        actor: str | None = None,
    ) -> None:
        self.store_scope = store_scope
        self.detector = detector or BankFormatDetector()
        self.clock = clock
        self.engine = engine or CategorizationEngine()
        self.actor = resolve_actor(actor)

    # ---- public operations ---------------------------------------------

    def import_bank_statement(
        self,
        business_id: UUID,
        path: str | PathLike[str],
        encoding: str = "utf-8",
        *,
        tolerant: bool = False,
        auto_categorize: bool = False,
    ) -> ImportResult:
        p = Path(path)
        self._admit(p)
        parser = self._detect(p, encoding)
        return self._import(business_id, p, parser, encoding, tolerant, auto_categorize)

    def import_with_mapping(
        self,
        business_id: UUID,
        path: str | PathLike[str],
        mapping: ColumnMapping,
        encoding: str = "utf-8",
        *,
        tolerant: bool = False,
        auto_categorize: bool = False,
    ) -> ImportResult:
        """Import a file whose columns were mapped by hand."""

        p = Path(path)
        self._admit(p)
        parser = ManualMappingParser(mapping)
        return self._import(business_id, p, parser, encoding, tolerant, auto_categorize)

    def preview_import(
        self,
        business_id: UUID,
        path: str | PathLike[str],
        encoding: str = "utf-8",
        *,
        mapping: ColumnMapping | None = None,
    ) -> ImportPreview:
        """Parse tolerantly and classify duplicates without persisting."""

        p = Path(path)
        self._admit(p)
        parser = ManualMappingParser(mapping) if mapping is not None else self._detect(p, encoding)
        transactions, errors = self._parse(parser, p, encoding, tolerant=True)
        with self.store_scope() as store:
            check = DuplicateDetector(store.history, store.transactions).check_duplicates(
                business_id, transactions
            )
        return ImportPreview(
            bank_name=parser.get_bank_name(),
            unique=check.unique,
            duplicates=check.duplicates,
            errors=errors,
        )

    # ---- pipeline steps --------------------------------------------------

    @staticmethod
    def _admit(p: Path) -> int:
        size = p.stat().st_size
        if size > MAX_FILE_SIZE_BYTES:
            raise FileTooLargeError(size, MAX_FILE_SIZE_BYTES)
        return size

    def _detect(self, p: Path, encoding: str) -> BankCsvParser:
        parser = self.detector.detect_format(p, encoding)
        if parser is None:
            raise UnknownFormatError(p)
        return parser

    @staticmethod
    def _parse(
        parser: BankCsvParser, p: Path, encoding: str, *, tolerant: bool
    ) -> tuple[list[NormalizedTransaction], tuple[CsvRowError, ...]]:
        if not tolerant:
            return parser.parse(p, encoding), ()
        result = ErrorTolerantCsvParser(parser).parse(p, encoding)
        return result.transactions, tuple(result.errors)

    def _stage(
        self,
        business_id: UUID,
        audit_id: UUID,
        bank_name: str,
        unique: Sequence[NormalizedTransaction],
        now: datetime,
        auto_categorize: bool,
    ) -> list[BankTransaction]:
        fmt = source_format_id(bank_name)
        staged = [
            BankTransaction.create(
                business_id=business_id,
                import_audit_id=audit_id,
                transaction=tx,
                now=now,
                source_format_id=fmt,
            )
            for tx in unique
        ]
        if auto_categorize:
            staged = [self.engine.apply_recommendation(tx, now) for tx in staged]
        return staged

    def _import(
        self,
        business_id: UUID,
        p: Path,
        parser: BankCsvParser,
        encoding: str,
        tolerant: bool,
        auto_categorize: bool,
    ) -> ImportResult:
        bank_name = parser.get_bank_name()
        _logger.info("Importing %s as %s for business %s", p.name, bank_name, business_id)
        transactions, errors = self._parse(parser, p, encoding, tolerant=tolerant)
        file_hash = hashlib.sha256(p.read_bytes()).hexdigest()
        now = self.clock()
        audit_id = uuid.uuid4()

        with self.store_scope() as store:
            check = DuplicateDetector(store.history, store.transactions).check_duplicates(
                business_id, transactions
            )
            staged = self._stage(business_id, audit_id, bank_name, check.unique, now, auto_categorize)
            audit = ImportAudit.create(
                audit_id=audit_id,
                business_id=business_id,
                now=now,
                file_name=p.name,
                file_hash=file_hash,
                total_records=len(transactions) + len(errors),
                imported_count=len(staged),
                skipped_count=check.duplicate_count,
                record_ids=tuple(tx.id for tx in staged),
                errors=errors,
                original_file_path=str(p.resolve()),
                imported_by=self.actor,
            )
            store.audits.save_audit(audit)
            for tx in staged:
                store.transactions.save(tx)

        excluded = sum(1 for tx in staged if tx.review_status is ReviewStatus.EXCLUDED)
        _logger.info(
            "Imported %d of %d rows from %s (%d duplicates, %d errors, %d excluded)",
            len(staged),
            audit.total_records,
            p.name,
            check.duplicate_count,
            len(errors),
            excluded,
        )
        return ImportResult(
            audit_id=audit_id,
            bank_name=bank_name,
            total_records=audit.total_records,
            imported_count=len(staged),
            duplicate_count=check.duplicate_count,
            imported_ids=audit.record_ids,
            errors=errors,
            excluded_count=excluded,
        )


__all__ = [
    "MAX_FILE_SIZE_BYTES",
    "BankStatementImportService",
    "ImportPreview",
    "ImportResult",
    "resolve_actor",
    "source_format_id",
    "utc_now",
]
