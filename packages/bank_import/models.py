"""Core value types for ``bank_import``.

``NormalizedTransaction`` is the canonical row every bank parser produces. It
is immutable and validated on construction; its ``transaction_hash`` is the
identity used for duplicate detection across imports.

Hashing
-------
The digest covers only ``(date, amount, normalized description)``. Balance and
reference are excluded so that the same statement re-exported with different
running balances or bank references still deduplicates. Amounts are quantized
to pennies before hashing so ``Decimal("100")`` and ``Decimal("100.00")``
produce the same hash.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from datetime import date as Date
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum

_WS_RE = re.compile(r"\s+")
_PENNY = Decimal("0.01")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ReviewStatus(StrEnum):
    PENDING = "PENDING"
    CATEGORIZED = "CATEGORIZED"
    EXCLUDED = "EXCLUDED"


class ConfidenceLevel(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ExpenseCategory(StrEnum):
    """Allowable-expense categories, each reported on one SA103 box."""

    OFFICE_COSTS = "OFFICE_COSTS"
    TRAVEL = "TRAVEL"
    TRAVEL_MILEAGE = "TRAVEL_MILEAGE"
    PREMISES = "PREMISES"
    PROFESSIONAL_FEES = "PROFESSIONAL_FEES"
    STAFF_COSTS = "STAFF_COSTS"
    FINANCIAL_CHARGES = "FINANCIAL_CHARGES"
    ADVERTISING = "ADVERTISING"
    INTEREST = "INTEREST"
    OTHER_EXPENSES = "OTHER_EXPENSES"


class IncomeCategory(StrEnum):
    SALES = "SALES"
    OTHER_INCOME = "OTHER_INCOME"


class ExclusionReason(StrEnum):
    TRANSFER = "TRANSFER"
    TAX_PAYMENT = "TAX_PAYMENT"
    LOAN = "LOAN"
    CREDIT_CARD = "CREDIT_CARD"
    CASH_WITHDRAWAL = "CASH_WITHDRAWAL"


class ImportType(StrEnum):
    BANK_CSV = "BANK_CSV"


class AuditStatus(StrEnum):
    ACTIVE = "ACTIVE"
    UNDONE = "UNDONE"


# ---------------------------------------------------------------------------
# Hashing helpers
# ---------------------------------------------------------------------------


def normalize_description(description: str) -> str:
    """Lower-case, trim and collapse internal whitespace."""

    return _WS_RE.sub(" ", description.strip()).lower()


def format_amount(amount: Decimal) -> str:
    """Render ``amount`` to exactly two decimal places (ROUND_HALF_UP)."""

    return str(amount.quantize(_PENNY, rounding=ROUND_HALF_UP))


def compute_transaction_hash(date: Date, amount: Decimal, description: str) -> str:
    """Return the SHA-256 hex digest identifying a transaction's content.

    Pure function of its inputs: identical ``(date, amount, normalized
    description)`` triples always produce the same digest.
    """

    payload = f"{date.isoformat()}|{format_amount(amount)}|{normalize_description(description)}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# Normalized transaction
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NormalizedTransaction:
    """A parsed bank-statement row in canonical form.

    ``amount`` is signed: positive values are income, zero or negative values
    are expenses.
    """

    date: Date
    amount: Decimal
    description: str
    balance: Decimal | None = None
    reference: str | None = None

    def __post_init__(self) -> None:
        if self.date is None:
            raise ValueError("Transaction date is required")
        if self.amount is None:
            raise ValueError("Transaction amount is required")
        if self.description is None or not self.description.strip():
            raise ValueError("Transaction description must not be blank")

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount <= 0

    @property
    def absolute_amount(self) -> Decimal:
        return abs(self.amount)

    @property
    def transaction_hash(self) -> str:
        return compute_transaction_hash(self.date, self.amount, self.description)


__all__ = [
    "AuditStatus",
    "ConfidenceLevel",
    "ExclusionReason",
    "ExpenseCategory",
    "ImportType",
    "IncomeCategory",
    "NormalizedTransaction",
    "ReviewStatus",
    "compute_transaction_hash",
    "format_amount",
    "normalize_description",
]
