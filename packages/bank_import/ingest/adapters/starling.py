"""Starling CSV export.

Header: ``Date, Counter Party, Reference, Type, Amount (GBP), Balance (GBP)``.
The amount is signed. Description is ``"COUNTERPARTY - REFERENCE"``, dropping
the reference when it merely repeats the counterparty and falling back to the
transaction type (e.g. ``INTEREST``) when both are blank.
"""

from __future__ import annotations

from ...models import NormalizedTransaction
from .base import BankCsvParser, RowContext


class StarlingCsvParser(BankCsvParser):
    bank_name = "Starling"
    expected_headers = (
        "Date",
        "Counter Party",
        "Reference",
        "Type",
        "Amount (GBP)",
        "Balance (GBP)",
    )

    def _build(self, row: RowContext) -> NormalizedTransaction:
        counterparty = row.cell(1)
        reference = row.cell(2)
        return self._transaction(
            row,
            tx_date=self._date(row, 0),
            description=_describe(counterparty, reference, row.cell(3)),
            amount=self._signed_amount(row, 4),
            balance=self._balance(row, 5),
            reference=reference or None,
        )


def _describe(counterparty: str, reference: str, tx_type: str) -> str:
    if counterparty and reference and reference.lower() != counterparty.lower():
        return f"{counterparty} - {reference}"
    return counterparty or reference or tx_type
