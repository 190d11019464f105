"""HSBC CSV export.

Header: ``Date, Type, Description, Paid Out, Paid In, Balance``. The
transaction type is folded into the description as ``"TYPE - DESCRIPTION"``.
"""

from __future__ import annotations

from ...models import NormalizedTransaction
from ..utils import combine_type_and_description
from .base import BankCsvParser, RowContext


class HsbcCsvParser(BankCsvParser):
    bank_name = "HSBC"
    expected_headers = ("Date", "Type", "Description", "Paid Out", "Paid In", "Balance")

    def _build(self, row: RowContext) -> NormalizedTransaction:
        return self._transaction(
            row,
            tx_date=self._date(row, 0),
            description=combine_type_and_description(row.cell(1), row.cell(2)),
            amount=self._split_amount(row, 3, 4),
            balance=self._balance(row, 5),
        )
