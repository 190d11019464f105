from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from bank_import.models import (
    NormalizedTransaction,
    compute_transaction_hash,
    normalize_description,
)


def _tx(**overrides) -> NormalizedTransaction:
    values = {
        "date": date(2025, 6, 15),
        "amount": Decimal("-49.99"),
        "description": "AMAZON PURCHASE",
    }
    values.update(overrides)
    return NormalizedTransaction(**values)


def test_direction_helpers():
    expense = _tx()
    income = _tx(amount=Decimal("1500.00"))
    zero = _tx(amount=Decimal("0"))

    assert expense.is_expense and not expense.is_income
    assert income.is_income and not income.is_expense
    # zero counts as an expense
    assert zero.is_expense and not zero.is_income
    assert expense.absolute_amount == Decimal("49.99")


@pytest.mark.parametrize(
    "field, value",
    [("date", None), ("amount", None), ("description", None), ("description", "   ")],
)
def test_construction_rejects_missing_required_values(field: str, value):
    with pytest.raises(ValueError):
        _tx(**{field: value})


def test_transaction_is_immutable():
    tx = _tx()
    with pytest.raises(AttributeError):
        tx.amount = Decimal("1")  # type: ignore[misc]


def test_normalize_description_collapses_case_and_whitespace():
    assert normalize_description("  Amazon\t  PURCHASE \n") == "amazon purchase"


def test_hash_ignores_case_whitespace_balance_and_reference():
    base = _tx()
    variant = _tx(
        description="  amazon   purchase ",
        balance=Decimal("1234.56"),
        reference="REF-1",
    )
    assert base.transaction_hash == variant.transaction_hash
    assert len(base.transaction_hash) == 64


def test_hash_treats_equal_penny_amounts_alike():
    assert _tx(amount=Decimal("-50")).transaction_hash == _tx(amount=Decimal("-50.00")).transaction_hash


@pytest.mark.parametrize(
    "overrides",
    [
        {"date": date(2025, 6, 16)},
        {"amount": Decimal("-49.98")},
        {"amount": Decimal("49.99")},
        {"description": "AMAZON REFUND"},
    ],
)
def test_hash_changes_with_date_amount_or_description(overrides):
    assert _tx().transaction_hash != _tx(**overrides).transaction_hash


def test_hash_function_is_pure():
    args = (date(2025, 1, 2), Decimal("10.00"), "Coffee")
    assert compute_transaction_hash(*args) == compute_transaction_hash(*args)
    assert _tx(date=args[0], amount=args[1], description=args[2]).transaction_hash == (
        compute_transaction_hash(*args)
    )
