"""Barclays CSV export.

Header: ``Date, Description, Money Out, Money In, Balance``. Exactly one of
the money columns is populated per row; "Money Out" becomes a negative amount.
"""

from __future__ import annotations

from ...models import NormalizedTransaction
from .base import BankCsvParser, RowContext


class BarclaysCsvParser(BankCsvParser):
    bank_name = "Barclays"
    expected_headers = ("Date", "Description", "Money Out", "Money In", "Balance")

    def _build(self, row: RowContext) -> NormalizedTransaction:
        return self._transaction(
            row,
            tx_date=self._date(row, 0),
            description=row.cell(1),
            amount=self._split_amount(row, 2, 3),
            balance=self._balance(row, 4),
        )
