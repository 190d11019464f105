from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    CHAR,
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Audit: import_audits
# ---------------------------


class ImportAuditRow(Base):
    __tablename__ = "import_audits"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    business_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    import_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    # SHA-256 of the raw file bytes
    file_hash: Mapped[str] = mapped_column(CHAR(64), nullable=False)
    import_type: Mapped[str] = mapped_column(String(20), nullable=False)
    total_records: Mapped[int] = mapped_column(Integer, nullable=False)
    imported_count: Mapped[int] = mapped_column(Integer, nullable=False)
    skipped_count: Mapped[int] = mapped_column(Integer, nullable=False)
    # JSON list of imported bank_transactions ids (as strings)
    record_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    # JSON list of {line_number, raw_line, message}
    errors: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    undone_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    undone_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    original_file_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    retention_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    imported_by: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        CheckConstraint("status in ('ACTIVE','UNDONE')", name="ck_import_audits_status"),
        CheckConstraint(
            "imported_count >= 0 AND skipped_count >= 0 AND total_records >= 0",
            name="ck_import_audits_counts",
        ),
    )


# ---------------------------
# Staging: bank_transactions
# ---------------------------


class BankTransactionRow(Base):
    __tablename__ = "bank_transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    business_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    import_audit_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("import_audits.id"), nullable=False, index=True
    )
    source_format_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    account_last_four: Mapped[str | None] = mapped_column(String(4), nullable=True)
    bank_transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    transaction_hash: Mapped[str] = mapped_column(CHAR(64), nullable=False)
    review_status: Mapped[str] = mapped_column(String(20), nullable=False)
    income_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    expense_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    exclusion_reason: Mapped[str | None] = mapped_column(String(200), nullable=True)
    # NULL = not yet flagged as business/personal
    is_business: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    confidence_score: Mapped[Decimal | None] = mapped_column(Numeric(5, 4), nullable=True)
    suggested_category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    deletion_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "review_status in ('PENDING','CATEGORIZED','EXCLUDED')",
            name="ck_bank_tx_review_status",
        ),
        CheckConstraint(
            "income_id IS NULL OR expense_id IS NULL",
            name="ck_bank_tx_single_link",
        ),
        CheckConstraint(
            "confidence_score IS NULL OR (confidence_score >= 0 AND confidence_score <= 1)",
            name="ck_bank_tx_confidence_score",
        ),
        Index("ix_bank_tx_business_hash", "business_id", "transaction_hash"),
    )


# ---------------------------
# History: incomes / expenses
# ---------------------------


class IncomeRow(Base):
    __tablename__ = "incomes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    business_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    # Always positive
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    bank_transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_incomes_amount_positive"),
        Index("ix_incomes_business_date", "business_id", "date"),
    )


class ExpenseRow(Base):
    __tablename__ = "expenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    business_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    # Stored positive; the bank line it came from was negative
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    allowable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        Index("ix_expenses_business_date", "business_id", "date"),
    )


__all__ = [
    "Base",
    "BankTransactionRow",
    "ExpenseRow",
    "ImportAuditRow",
    "IncomeRow",
]
