"""Storage contracts consumed by the import services.

The services depend only on these protocols. ``persistence.py`` provides the
SQLAlchemy implementation; tests may substitute in-memory fakes.

Owner ids are the owning business's UUID. "Active" means not soft-deleted.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from .staging import BankTransaction, ImportAudit


@dataclass(frozen=True, slots=True)
class HistoricalRecord:
    """A previously recorded income or expense, amount stored as a positive value."""

    date: date
    amount: Decimal
    description: str


class BankTransactionStore(Protocol):
    def exists_by_hash(self, business_id: UUID, transaction_hash: str) -> bool: ...

    def save(self, transaction: BankTransaction) -> BankTransaction: ...

    def update(self, transaction: BankTransaction) -> BankTransaction: ...

    def find_by_id(self, transaction_id: UUID) -> BankTransaction | None: ...

    def find_by_owner_id(self, business_id: UUID) -> list[BankTransaction]: ...

    def find_by_audit_id(self, audit_id: UUID) -> list[BankTransaction]: ...


class ImportAuditStore(Protocol):
    def save_audit(self, audit: ImportAudit) -> ImportAudit: ...

    def update_audit(self, audit: ImportAudit) -> ImportAudit: ...

    def find_audit(self, audit_id: UUID) -> ImportAudit | None: ...


class TransactionHistoryStore(Protocol):
    def find_incomes_by_date_range(
        self, business_id: UUID, start: date, end: date
    ) -> Sequence[HistoricalRecord]: ...

    def find_expenses_by_date_range(
        self, business_id: UUID, start: date, end: date
    ) -> Sequence[HistoricalRecord]: ...


class ImportStore(Protocol):
    """All stores bound to one unit of work."""

    @property
    def transactions(self) -> BankTransactionStore: ...

    @property
    def audits(self) -> ImportAuditStore: ...

    @property
    def history(self) -> TransactionHistoryStore: ...


type StoreScope = Callable[[], AbstractContextManager[ImportStore]]
"""Opens a transactional scope: commits on clean exit, rolls back on error."""


__all__ = [
    "BankTransactionStore",
    "HistoricalRecord",
    "ImportAuditStore",
    "ImportStore",
    "StoreScope",
    "TransactionHistoryStore",
]
