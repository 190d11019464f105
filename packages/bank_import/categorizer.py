"""Keyword-driven category suggestions for bank descriptions.

Expense keywords map to the SA103 allowable-expense categories. Income is
assumed to be trading income (SALES) unless it looks like interest, a
dividend or a refund.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .keywords import KeywordTable
from .models import ConfidenceLevel, ExpenseCategory, IncomeCategory

KEYWORD_MATCH_SCORE = Decimal("0.95")
UNMATCHED_EXPENSE_SCORE = Decimal("0.30")
GENERIC_INCOME_SCORE = Decimal("0.75")
KEYWORD_INCOME_SCORE = Decimal("0.95")


def _entries[T](outcome: T, *keywords: str) -> list[tuple[str, T]]:
    return [(k, outcome) for k in keywords]


# Order matters: earlier rows win. Loan interest is listed before staff costs
# and travel so that "loan interest" is not swallowed by a later rule.
EXPENSE_KEYWORDS: KeywordTable[ExpenseCategory] = KeywordTable(
    [
        *_entries(
            ExpenseCategory.OFFICE_COSTS,
            "amazon", "office", "staples", "software", "microsoft", "adobe",
            "google workspace", "dropbox", "zoom", "slack", "stationery",
            "printer", "postage", "royal mail", "phone", "mobile", "broadband",
            "internet", "vodafone", " o2 ", " ee ", " bt ", "three mobile",
        ),
        *_entries(
            ExpenseCategory.TRAVEL,
            "uber", "trainline", "train", "rail", "tfl", "oyster", "taxi",
            "bus ", "coach", "flight", "airline", "easyjet", "ryanair",
            "british airways", "hotel", "travelodge", "premier inn", "airbnb",
            "parking", "ncp ",
        ),
        *_entries(
            ExpenseCategory.TRAVEL_MILEAGE,
            "petrol", "diesel", "fuel", "shell", " bp ", "esso", "texaco",
        ),
        *_entries(
            ExpenseCategory.PREMISES,
            "rent", "lease", "business rates", "council tax", "electricity",
            "british gas", "octopus energy", "edf", " eon ", "e.on",
            "water", "insurance", "cleaning",
        ),
        *_entries(
            ExpenseCategory.PROFESSIONAL_FEES,
            "accountant", "accounting", "solicitor", "legal", "lawyer",
            "consultant", "bookkeep", "professional fee",
        ),
        *_entries(
            ExpenseCategory.FINANCIAL_CHARGES,
            "bank charge", "bank fee", "overdraft", "account fee",
            "monthly fee", "transaction fee", "stripe fee", "paypal fee",
        ),
        *_entries(
            ExpenseCategory.ADVERTISING,
            "advertising", "facebook ads", "google ads", "linkedin",
            "marketing", "promotion",
        ),
        *_entries(ExpenseCategory.INTEREST, "loan interest", "interest charge"),
        *_entries(
            ExpenseCategory.STAFF_COSTS,
            "salary", "salaries", "wages", "payroll", "pension",
            "subcontractor",
        ),
    ]
)

INCOME_KEYWORDS: KeywordTable[IncomeCategory] = KeywordTable(
    _entries(IncomeCategory.OTHER_INCOME, "interest", "dividend", "refund")
)


@dataclass(frozen=True, slots=True)
class CategorySuggestion:
    category: ExpenseCategory | IncomeCategory
    confidence: ConfidenceLevel
    score: Decimal
    matched_keyword: str | None = None


class DescriptionCategorizer:
    def __init__(
        self,
        expense_keywords: KeywordTable[ExpenseCategory] = EXPENSE_KEYWORDS,
        income_keywords: KeywordTable[IncomeCategory] = INCOME_KEYWORDS,
    ) -> None:
        self.expense_keywords = expense_keywords
        self.income_keywords = income_keywords

    def categorize(self, description: str | None) -> CategorySuggestion:
        """Suggest an expense category; unmatched falls back to OTHER_EXPENSES (LOW)."""

        hit = self.expense_keywords.lookup(description)
        if hit is None:
            return CategorySuggestion(
                ExpenseCategory.OTHER_EXPENSES, ConfidenceLevel.LOW, UNMATCHED_EXPENSE_SCORE
            )
        keyword, category = hit
        return CategorySuggestion(category, ConfidenceLevel.HIGH, KEYWORD_MATCH_SCORE, keyword.strip())

    def categorize_income(self, description: str | None) -> CategorySuggestion:
        hit = self.income_keywords.lookup(description)
        if hit is None:
            return CategorySuggestion(
                IncomeCategory.SALES, ConfidenceLevel.MEDIUM, GENERIC_INCOME_SCORE
            )
        keyword, category = hit
        return CategorySuggestion(category, ConfidenceLevel.HIGH, KEYWORD_INCOME_SCORE, keyword.strip())


__all__ = [
    "EXPENSE_KEYWORDS",
    "GENERIC_INCOME_SCORE",
    "INCOME_KEYWORDS",
    "KEYWORD_INCOME_SCORE",
    "KEYWORD_MATCH_SCORE",
    "UNMATCHED_EXPENSE_SCORE",
    "CategorySuggestion",
    "DescriptionCategorizer",
]
