"""Nationwide CSV export.

Header: ``Date, Transaction type, Description, Paid out, Paid in, Balance``.
Nationwide writes dates either numerically or as ``15 Jun 2025``.
"""

from __future__ import annotations

from ...models import NormalizedTransaction
from ..utils import DEFAULT_DATE_FORMATS, combine_type_and_description
from .base import BankCsvParser, RowContext


class NationwideCsvParser(BankCsvParser):
    bank_name = "Nationwide"
    expected_headers = (
        "Date",
        "Transaction type",
        "Description",
        "Paid out",
        "Paid in",
        "Balance",
    )
    date_formats = (*DEFAULT_DATE_FORMATS, "%d %b %Y")

    def _build(self, row: RowContext) -> NormalizedTransaction:
        return self._transaction(
            row,
            tx_date=self._date(row, 0),
            description=combine_type_and_description(row.cell(1), row.cell(2)),
            amount=self._split_amount(row, 3, 4),
            balance=self._balance(row, 5),
        )
