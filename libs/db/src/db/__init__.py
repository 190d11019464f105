"""db: shared database library (SQLAlchemy/Alembic).

Public exports
--------------
- ``Base`` and ``metadata`` for Alembic autogenerate/targeting
- ORM models in ``db.models.bank_import`` (re-exported for convenience)
- Engine/session helpers in ``db.client``
"""

from __future__ import annotations

from .models.bank_import import BankTransactionRow, Base, ExpenseRow, ImportAuditRow, IncomeRow

# Re-export SQLAlchemy metadata for Alembic's env.py
metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "BankTransactionRow",
    "ExpenseRow",
    "ImportAuditRow",
    "IncomeRow",
]
