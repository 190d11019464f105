"""Shared SQLAlchemy models registry for the workspace database.

Includes the bank-statement import tables used by ``bank_import``.
"""

from .bank_import import BankTransactionRow, Base, ExpenseRow, ImportAuditRow, IncomeRow

__all__ = [
    "Base",
    "BankTransactionRow",
    "ExpenseRow",
    "ImportAuditRow",
    "IncomeRow",
]
