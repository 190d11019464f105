# ruff: noqa: I001
"""SQLAlchemy implementation of the storage contracts.

Stores here read and write the tables owned by ``libs/db`` through a session
supplied by the caller; they never commit. ``sql_store_scope`` bundles them
behind one ``db.client.session_scope`` so an import's audit row and its bank
transactions commit (or roll back) together.

Scope:
- ``bank_transactions``: staged rows, soft-delete aware.
- ``import_audits``: one row per import attempt.
- ``incomes`` / ``expenses``: read-only history used for duplicate checks.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import fields
from datetime import UTC, date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.client import session_scope
from db.models.bank_import import BankTransactionRow, ExpenseRow, ImportAuditRow, IncomeRow

from .contracts import HistoricalRecord, StoreScope
from .ingest.error_tolerant import CsvRowError
from .models import AuditStatus, ImportType, ReviewStatus
from .staging import BankTransaction, ImportAudit

_BANK_TX_FIELDS = tuple(f.name for f in fields(BankTransaction))


def _aware(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything is written as UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _to_decimal_2(value: Decimal | None) -> Decimal | None:
    if value is None:
        return None
    return Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


# ---------------------------------------------------------------------------
# Row <-> value mapping
# ---------------------------------------------------------------------------


def _bank_tx_values(tx: BankTransaction) -> dict[str, Any]:
    values = {name: getattr(tx, name) for name in _BANK_TX_FIELDS}
    values["review_status"] = tx.review_status.value
    return values


def _bank_tx_from_row(row: BankTransactionRow) -> BankTransaction:
    values = {name: getattr(row, name) for name in _BANK_TX_FIELDS}
    values.update(
        review_status=ReviewStatus(row.review_status),
        amount=_to_decimal_2(row.amount),
        confidence_score=Decimal(row.confidence_score) if row.confidence_score is not None else None,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        deleted_at=_aware(row.deleted_at),
    )
    return BankTransaction(**values)


def _audit_values(audit: ImportAudit) -> dict[str, Any]:
    return {
        "id": audit.id,
        "business_id": audit.business_id,
        "import_timestamp": audit.import_timestamp,
        "file_name": audit.file_name,
        "file_hash": audit.file_hash,
        "import_type": audit.import_type.value,
        "total_records": audit.total_records,
        "imported_count": audit.imported_count,
        "skipped_count": audit.skipped_count,
        "record_ids": [str(rid) for rid in audit.record_ids],
        "errors": [e.to_dict() for e in audit.errors],
        "status": audit.status.value,
        "undone_at": audit.undone_at,
        "undone_by": audit.undone_by,
        "original_file_path": audit.original_file_path,
        "retention_until": audit.retention_until,
        "imported_by": audit.imported_by,
    }


def _audit_from_row(row: ImportAuditRow) -> ImportAudit:
    return ImportAudit(
        id=row.id,
        business_id=row.business_id,
        import_timestamp=_aware(row.import_timestamp),  # type: ignore[arg-type]
        file_name=row.file_name,
        file_hash=row.file_hash,
        total_records=row.total_records,
        imported_count=row.imported_count,
        skipped_count=row.skipped_count,
        import_type=ImportType(row.import_type),
        record_ids=tuple(UUID(rid) for rid in row.record_ids or ()),
        errors=tuple(
            CsvRowError(int(e["line_number"]), str(e["raw_line"]), str(e["message"]))
            for e in row.errors or ()
        ),
        status=AuditStatus(row.status),
        undone_at=_aware(row.undone_at),
        undone_by=row.undone_by,
        original_file_path=row.original_file_path,
        retention_until=row.retention_until,
        imported_by=row.imported_by,
    )


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


class SqlBankTransactionStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def exists_by_hash(self, business_id: UUID, transaction_hash: str) -> bool:
        stmt = (
            select(BankTransactionRow.id)
            .where(
                BankTransactionRow.business_id == business_id,
                BankTransactionRow.transaction_hash == transaction_hash,
                BankTransactionRow.deleted_at.is_(None),
            )
            .limit(1)
        )
        return self.session.scalar(stmt) is not None

    def save(self, transaction: BankTransaction) -> BankTransaction:
        self.session.add(BankTransactionRow(**_bank_tx_values(transaction)))
        self.session.flush()
        return transaction

    def update(self, transaction: BankTransaction) -> BankTransaction:
        row = self.session.get(BankTransactionRow, transaction.id)
        if row is None:
            raise KeyError(f"Bank transaction not found: {transaction.id}")
        for name, value in _bank_tx_values(transaction).items():
            setattr(row, name, value)
        self.session.flush()
        return transaction

    def find_by_id(self, transaction_id: UUID) -> BankTransaction | None:
        row = self.session.get(BankTransactionRow, transaction_id)
        if row is None or row.deleted_at is not None:
            return None
        return _bank_tx_from_row(row)

    def _find_active(self, *criteria: Any) -> list[BankTransaction]:
        stmt = (
            select(BankTransactionRow)
            .where(BankTransactionRow.deleted_at.is_(None), *criteria)
            .order_by(BankTransactionRow.date, BankTransactionRow.created_at)
        )
        return [_bank_tx_from_row(r) for r in self.session.scalars(stmt)]

    def find_by_owner_id(self, business_id: UUID) -> list[BankTransaction]:
        return self._find_active(BankTransactionRow.business_id == business_id)

    def find_by_audit_id(self, audit_id: UUID) -> list[BankTransaction]:
        return self._find_active(BankTransactionRow.import_audit_id == audit_id)


class SqlImportAuditStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def save_audit(self, audit: ImportAudit) -> ImportAudit:
        self.session.add(ImportAuditRow(**_audit_values(audit)))
        self.session.flush()
        return audit

    def update_audit(self, audit: ImportAudit) -> ImportAudit:
        row = self.session.get(ImportAuditRow, audit.id)
        if row is None:
            raise KeyError(f"Import audit not found: {audit.id}")
        for name, value in _audit_values(audit).items():
            setattr(row, name, value)
        self.session.flush()
        return audit

    def find_audit(self, audit_id: UUID) -> ImportAudit | None:
        row = self.session.get(ImportAuditRow, audit_id)
        return _audit_from_row(row) if row is not None else None

    def find_audits_by_owner_id(self, business_id: UUID) -> list[ImportAudit]:
        stmt = (
            select(ImportAuditRow)
            .where(ImportAuditRow.business_id == business_id)
            .order_by(ImportAuditRow.import_timestamp.desc())
        )
        return [_audit_from_row(r) for r in self.session.scalars(stmt)]


class SqlTransactionHistoryStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _history(
        self, model: type[IncomeRow] | type[ExpenseRow], business_id: UUID, start: date, end: date
    ) -> list[HistoricalRecord]:
        stmt = (
            select(model.date, model.amount, model.description)
            .where(model.business_id == business_id, model.date.between(start, end))
            .order_by(model.date)
        )
        return [
            HistoricalRecord(d, _to_decimal_2(a) or Decimal("0"), desc)
            for d, a, desc in self.session.execute(stmt)
        ]

    def find_incomes_by_date_range(
        self, business_id: UUID, start: date, end: date
    ) -> list[HistoricalRecord]:
        return self._history(IncomeRow, business_id, start, end)

    def find_expenses_by_date_range(
        self, business_id: UUID, start: date, end: date
    ) -> list[HistoricalRecord]:
        return self._history(ExpenseRow, business_id, start, end)


class SqlImportStore:
    """All SQL stores sharing one session (one unit of work)."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.transactions = SqlBankTransactionStore(session)
        self.audits = SqlImportAuditStore(session)
        self.history = SqlTransactionHistoryStore(session)


def sql_store_scope(database_url: str | None = None) -> StoreScope:
    """Return a ``StoreScope`` opening a ``session_scope`` per call.

    ``database_url`` defaults to the ``DATABASE_URL`` environment variable,
    resolved when the scope is entered.
    """

    @contextmanager
    def _scope() -> Iterator[SqlImportStore]:
        with session_scope(database_url=database_url) as session:
            yield SqlImportStore(session)

    return _scope


__all__ = [
    "SqlBankTransactionStore",
    "SqlImportAuditStore",
    "SqlImportStore",
    "SqlTransactionHistoryStore",
    "sql_store_scope",
]
