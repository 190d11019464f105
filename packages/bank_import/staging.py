"""Persisted-shape records written by the import pipeline.

``BankTransaction`` is a staged bank row awaiting review; ``ImportAudit`` is
the one-per-import summary record. Both are frozen: every update returns a new
value via ``dataclasses.replace`` so callers can compare before/after state.

Review status lifecycle::

    PENDING --(exclusion)--> EXCLUDED
    PENDING --(confirm as expense / income)--> CATEGORIZED

The business/personal flag and suggestions change independently of status.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date as Date
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from .ingest.error_tolerant import CsvRowError
from .models import AuditStatus, ImportType, NormalizedTransaction, ReviewStatus

RETENTION_YEARS = 6
DEFAULT_ACTOR = "local-user"


def _add_years(d: Date, years: int) -> Date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return d.replace(year=d.year + years, day=28)


@dataclass(frozen=True, slots=True)
class BankTransaction:
    id: UUID
    business_id: UUID
    import_audit_id: UUID
    date: Date
    amount: Decimal
    description: str
    transaction_hash: str
    created_at: datetime
    updated_at: datetime
    source_format_id: str | None = None
    account_last_four: str | None = None
    bank_transaction_id: str | None = None
    review_status: ReviewStatus = ReviewStatus.PENDING
    income_id: UUID | None = None
    expense_id: UUID | None = None
    exclusion_reason: str | None = None
    # None = not yet flagged, True = business, False = personal
    is_business: bool | None = None
    confidence_score: Decimal | None = None
    suggested_category: str | None = None
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    deletion_reason: str | None = None

    def __post_init__(self) -> None:
        if self.income_id is not None and self.expense_id is not None:
            raise ValueError("A bank transaction cannot link to both an income and an expense")

    @classmethod
    def create(
        cls,
        *,
        business_id: UUID,
        import_audit_id: UUID,
        transaction: NormalizedTransaction,
        now: datetime,
        source_format_id: str | None = None,
        account_last_four: str | None = None,
    ) -> BankTransaction:
        """Stage a parsed row as a new PENDING record."""

        return cls(
            id=uuid.uuid4(),
            business_id=business_id,
            import_audit_id=import_audit_id,
            date=transaction.date,
            amount=transaction.amount,
            description=transaction.description,
            transaction_hash=transaction.transaction_hash,
            created_at=now,
            updated_at=now,
            source_format_id=source_format_id,
            account_last_four=account_last_four,
            bank_transaction_id=transaction.reference,
        )

    # ---- derived state --------------------------------------------------

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount <= 0

    @property
    def is_pending(self) -> bool:
        return self.review_status is ReviewStatus.PENDING

    @property
    def is_categorized(self) -> bool:
        return self.review_status is ReviewStatus.CATEGORIZED

    @property
    def is_excluded(self) -> bool:
        return self.review_status is ReviewStatus.EXCLUDED

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    # ---- immutable updates ---------------------------------------------

    def _require_status(self, action: str, *allowed: ReviewStatus) -> None:
        if self.review_status not in allowed:
            raise ValueError(
                f"Cannot {action}: transaction {self.id} is {self.review_status.value}"
            )

    def with_exclusion(self, reason: str, now: datetime) -> BankTransaction:
        self._require_status("exclude", ReviewStatus.PENDING, ReviewStatus.EXCLUDED)
        return replace(
            self,
            review_status=ReviewStatus.EXCLUDED,
            exclusion_reason=reason,
            updated_at=now,
        )

    def with_suggestion(
        self, category: str | None, score: Decimal | None, now: datetime
    ) -> BankTransaction:
        return replace(
            self, suggested_category=category, confidence_score=score, updated_at=now
        )

    def with_business_flag(self, is_business: bool | None, now: datetime) -> BankTransaction:
        return replace(self, is_business=is_business, updated_at=now)

    def confirmed_as_expense(self, expense_id: UUID, now: datetime) -> BankTransaction:
        self._require_status("confirm as expense", ReviewStatus.PENDING)
        return replace(
            self,
            review_status=ReviewStatus.CATEGORIZED,
            expense_id=expense_id,
            income_id=None,
            updated_at=now,
        )

    def confirmed_as_income(self, income_id: UUID, now: datetime) -> BankTransaction:
        self._require_status("confirm as income", ReviewStatus.PENDING)
        return replace(
            self,
            review_status=ReviewStatus.CATEGORIZED,
            income_id=income_id,
            expense_id=None,
            updated_at=now,
        )

    def soft_deleted(self, deleted_by: str, reason: str, now: datetime) -> BankTransaction:
        return replace(
            self,
            deleted_at=now,
            deleted_by=deleted_by,
            deletion_reason=reason,
            updated_at=now,
        )


@dataclass(frozen=True, slots=True)
class ImportAudit:
    """Summary of one import attempt; written even when nothing was imported."""

    id: UUID
    business_id: UUID
    import_timestamp: datetime
    file_name: str
    file_hash: str
    total_records: int
    imported_count: int
    skipped_count: int
    import_type: ImportType = ImportType.BANK_CSV
    record_ids: tuple[UUID, ...] = ()
    errors: tuple[CsvRowError, ...] = field(default=())
    status: AuditStatus = AuditStatus.ACTIVE
    undone_at: datetime | None = None
    undone_by: str | None = None
    original_file_path: str | None = None
    retention_until: Date | None = None
    imported_by: str = DEFAULT_ACTOR

    @classmethod
    def create(
        cls,
        *,
        audit_id: UUID,
        business_id: UUID,
        now: datetime,
        file_name: str,
        file_hash: str,
        total_records: int,
        imported_count: int,
        skipped_count: int,
        record_ids: tuple[UUID, ...] = (),
        errors: tuple[CsvRowError, ...] = (),
        original_file_path: str | None = None,
        imported_by: str = DEFAULT_ACTOR,
    ) -> ImportAudit:
        return cls(
            id=audit_id,
            business_id=business_id,
            import_timestamp=now,
            file_name=file_name,
            file_hash=file_hash,
            total_records=total_records,
            imported_count=imported_count,
            skipped_count=skipped_count,
            record_ids=record_ids,
            errors=errors,
            original_file_path=original_file_path,
            retention_until=_add_years(now.date(), RETENTION_YEARS),
            imported_by=imported_by,
        )

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def is_undone(self) -> bool:
        return self.status is AuditStatus.UNDONE

    def marked_undone(self, undone_by: str, now: datetime) -> ImportAudit:
        if self.is_undone:
            raise ValueError(f"Import {self.id} has already been undone")
        return replace(self, status=AuditStatus.UNDONE, undone_at=now, undone_by=undone_by)


__all__ = ["BankTransaction", "DEFAULT_ACTOR", "ImportAudit", "RETENTION_YEARS"]
