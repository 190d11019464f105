# ruff: noqa: I001
"""Bank import core tables: import audits, staged bank transactions, history.

Revision ID: 0001_bank_import_core
Revises: None
Create Date: 2026-10-18
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_bank_import_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # import_audits
    op.create_table(
        "import_audits",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("business_id", sa.Uuid(), nullable=False),
        sa.Column("import_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=False),
        sa.Column("file_hash", sa.CHAR(64), nullable=False),
        sa.Column("import_type", sa.String(20), nullable=False),
        sa.Column("total_records", sa.Integer(), nullable=False),
        sa.Column("imported_count", sa.Integer(), nullable=False),
        sa.Column("skipped_count", sa.Integer(), nullable=False),
        sa.Column("record_ids", sa.JSON(), nullable=False),
        sa.Column("errors", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("undone_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("undone_by", sa.String(100), nullable=True),
        sa.Column("original_file_path", sa.Text(), nullable=True),
        sa.Column("retention_until", sa.Date(), nullable=True),
        sa.Column("imported_by", sa.String(100), nullable=False),
        sa.CheckConstraint("status in ('ACTIVE','UNDONE')", name="ck_import_audits_status"),
        sa.CheckConstraint(
            "imported_count >= 0 AND skipped_count >= 0 AND total_records >= 0",
            name="ck_import_audits_counts",
        ),
    )
    op.create_index("ix_import_audits_business_id", "import_audits", ["business_id"])

    # bank_transactions
    op.create_table(
        "bank_transactions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("business_id", sa.Uuid(), nullable=False),
        sa.Column(
            "import_audit_id", sa.Uuid(), sa.ForeignKey("import_audits.id"), nullable=False
        ),
        sa.Column("source_format_id", sa.String(50), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("account_last_four", sa.String(4), nullable=True),
        sa.Column("bank_transaction_id", sa.String(100), nullable=True),
        sa.Column("transaction_hash", sa.CHAR(64), nullable=False),
        sa.Column("review_status", sa.String(20), nullable=False),
        sa.Column("income_id", sa.Uuid(), nullable=True),
        sa.Column("expense_id", sa.Uuid(), nullable=True),
        sa.Column("exclusion_reason", sa.String(200), nullable=True),
        sa.Column("is_business", sa.Boolean(), nullable=True),
        sa.Column("confidence_score", sa.Numeric(5, 4), nullable=True),
        sa.Column("suggested_category", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by", sa.String(100), nullable=True),
        sa.Column("deletion_reason", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "review_status in ('PENDING','CATEGORIZED','EXCLUDED')",
            name="ck_bank_tx_review_status",
        ),
        sa.CheckConstraint(
            "income_id IS NULL OR expense_id IS NULL", name="ck_bank_tx_single_link"
        ),
        sa.CheckConstraint(
            "confidence_score IS NULL OR (confidence_score >= 0 AND confidence_score <= 1)",
            name="ck_bank_tx_confidence_score",
        ),
    )
    op.create_index(
        "ix_bank_tx_business_hash", "bank_transactions", ["business_id", "transaction_hash"]
    )
    op.create_index(
        "ix_bank_transactions_import_audit_id", "bank_transactions", ["import_audit_id"]
    )

    # incomes / expenses (history consulted for duplicate detection)
    op.create_table(
        "incomes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("business_id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("bank_transaction_id", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_incomes_amount_positive"),
    )
    op.create_index("ix_incomes_business_date", "incomes", ["business_id", "date"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("business_id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("allowable", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )
    op.create_index("ix_expenses_business_date", "expenses", ["business_id", "date"])


def downgrade() -> None:
    op.drop_index("ix_expenses_business_date", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_incomes_business_date", table_name="incomes")
    op.drop_table("incomes")
    op.drop_index("ix_bank_transactions_import_audit_id", table_name="bank_transactions")
    op.drop_index("ix_bank_tx_business_hash", table_name="bank_transactions")
    op.drop_table("bank_transactions")
    op.drop_index("ix_import_audits_business_id", table_name="import_audits")
    op.drop_table("import_audits")
