"""Turning a bank description and amount into a categorization decision.

Pieces, from the inside out:

- ``TransactionClassificationService`` picks a direction from the sign of the
  amount and asks the ``DescriptionCategorizer`` for a category.
- ``CategorizationEngine`` runs the ``ExclusionRulesEngine`` first (exclusion
  always wins), otherwise classifies, and maps expense categories onto the
  SA103 self-employment form boxes.
- ``CategorizationEngine.apply_recommendation`` writes the decision onto a
  staged ``BankTransaction`` and returns the updated copy.

Confidence contract
-------------------
Scores are fixed per outcome (keyword expense 0.95, unmatched expense 0.30,
generic income 0.75, keyword income 0.95). Levels are derived from the score:
above 0.90 is HIGH, 0.60 and above is MEDIUM, anything lower is LOW.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Protocol

from .categorizer import KEYWORD_MATCH_SCORE, DescriptionCategorizer
from .exclusions import ExclusionRulesEngine
from .models import ConfidenceLevel, ExclusionReason, ExpenseCategory, IncomeCategory
from .staging import BankTransaction

HIGH_THRESHOLD = Decimal("0.90")
MEDIUM_THRESHOLD = Decimal("0.60")

DEFAULT_SA103_BOXES: Mapping[ExpenseCategory, int] = MappingProxyType(
    {
        ExpenseCategory.STAFF_COSTS: 19,
        ExpenseCategory.TRAVEL: 20,
        # Vehicle fuel is reported with travel costs
        ExpenseCategory.TRAVEL_MILEAGE: 20,
        ExpenseCategory.PREMISES: 21,
        ExpenseCategory.OFFICE_COSTS: 23,
        ExpenseCategory.ADVERTISING: 24,
        ExpenseCategory.INTEREST: 25,
        ExpenseCategory.FINANCIAL_CHARGES: 26,
        ExpenseCategory.PROFESSIONAL_FEES: 28,
        ExpenseCategory.OTHER_EXPENSES: 30,
    }
)


def confidence_level_for(score: Decimal) -> ConfidenceLevel:
    if score > HIGH_THRESHOLD:
        return ConfidenceLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


class Classifiable(Protocol):
    @property
    def description(self) -> str: ...

    @property
    def amount(self) -> Decimal: ...


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    is_income: bool
    expense_category: ExpenseCategory | None
    income_category: IncomeCategory | None
    confidence_level: ConfidenceLevel
    confidence_score: Decimal

    @property
    def category_name(self) -> str:
        category = self.income_category if self.is_income else self.expense_category
        return category.value if category is not None else ""

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence_level is ConfidenceLevel.HIGH

    @property
    def requires_manual_review(self) -> bool:
        return self.confidence_level is ConfidenceLevel.LOW

    @property
    def is_suggestion_worthy(self) -> bool:
        return self.confidence_level is not ConfidenceLevel.LOW


class TransactionClassificationService:
    def __init__(self, categorizer: DescriptionCategorizer | None = None) -> None:
        self.categorizer = categorizer or DescriptionCategorizer()

    def classify(self, description: str, amount: Decimal) -> ClassificationResult:
        if amount > 0:
            suggestion = self.categorizer.categorize_income(description)
            return ClassificationResult(
                is_income=True,
                expense_category=None,
                income_category=IncomeCategory(suggestion.category),
                confidence_level=confidence_level_for(suggestion.score),
                confidence_score=suggestion.score,
            )
        suggestion = self.categorizer.categorize(description)
        return ClassificationResult(
            is_income=False,
            expense_category=ExpenseCategory(suggestion.category),
            income_category=None,
            confidence_level=confidence_level_for(suggestion.score),
            confidence_score=suggestion.score,
        )


@dataclass(frozen=True, slots=True)
class CategorizationRecommendation:
    is_excluded: bool
    exclusion_reason: ExclusionReason | None
    is_income: bool
    expense_category: ExpenseCategory | None
    income_category: IncomeCategory | None
    confidence_level: ConfidenceLevel
    confidence_score: Decimal
    sa103_box: str | None = None

    @property
    def suggested_category(self) -> str | None:
        """Category stored on the staged row: expenses only."""

        if self.is_excluded or self.expense_category is None:
            return None
        return self.expense_category.value


class CategorizationEngine:
    """Exclusion-first categorization of bank transactions.

    Parameters
    ----------
    exclusions, classifier:
        Collaborators; defaults use the built-in keyword tables.
    box_overrides:
        Replaces entries of the SA103 box lookup, e.g.
        ``{ExpenseCategory.TRAVEL_MILEAGE: None}`` to leave mileage unboxed.
    """

    def __init__(
        self,
        exclusions: ExclusionRulesEngine | None = None,
        classifier: TransactionClassificationService | None = None,
        *,
        box_overrides: Mapping[ExpenseCategory, int | None] | None = None,
    ) -> None:
        self.exclusions = exclusions or ExclusionRulesEngine()
        self.classifier = classifier or TransactionClassificationService()
        boxes: dict[ExpenseCategory, int | None] = dict(DEFAULT_SA103_BOXES)
        boxes.update(box_overrides or {})
        self._boxes = boxes

    def sa103_box_for(self, category: ExpenseCategory | None) -> str | None:
        if category is None:
            return None
        number = self._boxes.get(category)
        return f"Box {number}" if number is not None else None

    def recommend(self, transaction: Classifiable) -> CategorizationRecommendation:
        exclusion = self.exclusions.evaluate(transaction.description)
        if exclusion.should_exclude:
            return CategorizationRecommendation(
                is_excluded=True,
                exclusion_reason=exclusion.reason,
                is_income=transaction.amount > 0,
                expense_category=None,
                income_category=None,
                confidence_level=ConfidenceLevel.HIGH,
                confidence_score=KEYWORD_MATCH_SCORE,
            )

        result = self.classifier.classify(transaction.description, transaction.amount)
        return CategorizationRecommendation(
            is_excluded=False,
            exclusion_reason=None,
            is_income=result.is_income,
            expense_category=result.expense_category,
            income_category=result.income_category,
            confidence_level=result.confidence_level,
            confidence_score=result.confidence_score,
            sa103_box=None if result.is_income else self.sa103_box_for(result.expense_category),
        )

    def apply_recommendation(self, transaction: BankTransaction, now: datetime) -> BankTransaction:
        """Return ``transaction`` updated with this engine's recommendation.

        Exclusions move the row to EXCLUDED and record the reason only. Other
        rows stay PENDING with the suggested category (``None`` for income)
        and the confidence score set.
        """

        rec = self.recommend(transaction)
        if rec.exclusion_reason is not None:
            return transaction.with_exclusion(rec.exclusion_reason.value, now)
        return transaction.with_suggestion(rec.suggested_category, rec.confidence_score, now)


__all__ = [
    "DEFAULT_SA103_BOXES",
    "HIGH_THRESHOLD",
    "MEDIUM_THRESHOLD",
    "CategorizationEngine",
    "CategorizationRecommendation",
    "ClassificationResult",
    "TransactionClassificationService",
    "confidence_level_for",
]
