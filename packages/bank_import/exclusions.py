"""Rules that take a bank line out of income/expense accounting entirely.

Transfers between own accounts, tax payments to HMRC, loan movements, credit
card settlements and cash withdrawals are not trading income or allowable
expenses. A rule hit is always HIGH confidence; evaluation runs before any
categorization.
"""

from __future__ import annotations

from dataclasses import dataclass

from .keywords import KeywordTable
from .models import ConfidenceLevel, ExclusionReason

# Loan rules name the capital movement explicitly so "LOAN INTEREST" stays a
# categorizable expense.
EXCLUSION_KEYWORDS: KeywordTable[ExclusionReason] = KeywordTable(
    [
        (" tfr ", ExclusionReason.TRANSFER),
        ("transfer", ExclusionReason.TRANSFER),
        (" fpo ", ExclusionReason.TRANSFER),
        (" fpi ", ExclusionReason.TRANSFER),
        ("to savings", ExclusionReason.TRANSFER),
        ("hmrc", ExclusionReason.TAX_PAYMENT),
        ("self assessment", ExclusionReason.TAX_PAYMENT),
        ("loan repayment", ExclusionReason.LOAN),
        ("loan payment", ExclusionReason.LOAN),
        ("loan credit", ExclusionReason.LOAN),
        ("loan drawdown", ExclusionReason.LOAN),
        ("loan advance", ExclusionReason.LOAN),
        ("cc payment", ExclusionReason.CREDIT_CARD),
        ("credit card payment", ExclusionReason.CREDIT_CARD),
        ("amex payment", ExclusionReason.CREDIT_CARD),
        (" atm ", ExclusionReason.CASH_WITHDRAWAL),
        ("cash withdrawal", ExclusionReason.CASH_WITHDRAWAL),
        ("cashpoint", ExclusionReason.CASH_WITHDRAWAL),
    ]
)


@dataclass(frozen=True, slots=True)
class ExclusionResult:
    should_exclude: bool
    reason: ExclusionReason | None
    confidence: ConfidenceLevel
    matched_keyword: str | None = None

    @property
    def reason_label(self) -> str | None:
        return self.reason.value if self.reason is not None else None


NOT_EXCLUDED = ExclusionResult(False, None, ConfidenceLevel.LOW)


class ExclusionRulesEngine:
    def __init__(self, rules: KeywordTable[ExclusionReason] = EXCLUSION_KEYWORDS) -> None:
        self.rules = rules

    def evaluate(self, description: str | None) -> ExclusionResult:
        hit = self.rules.lookup(description)
        if hit is None:
            return NOT_EXCLUDED
        keyword, reason = hit
        return ExclusionResult(True, reason, ConfidenceLevel.HIGH, keyword.strip())


__all__ = ["EXCLUSION_KEYWORDS", "NOT_EXCLUDED", "ExclusionResult", "ExclusionRulesEngine"]
