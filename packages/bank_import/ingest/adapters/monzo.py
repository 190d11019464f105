"""Monzo CSV export.

Monzo's export starts with eight core columns::

    Transaction ID, Date, Time, Type, Name, Emoji, Category, Amount

and, depending on export vintage, appends currency, notes, address and other
trailing columns. Only the core prefix is checked. The transaction id is kept
as the reference; Monzo exports carry no running balance.
"""

from __future__ import annotations

from collections.abc import Sequence

from ...models import NormalizedTransaction
from ..utils import headers_match
from .base import BankCsvParser, RowContext


class MonzoCsvParser(BankCsvParser):
    bank_name = "Monzo"
    expected_headers = (
        "Transaction ID",
        "Date",
        "Time",
        "Type",
        "Name",
        "Emoji",
        "Category",
        "Amount",
    )
    date_formats = ("%d/%m/%Y", "%Y-%m-%d")

    def can_parse(self, headers: Sequence[str]) -> bool:
        core = len(self.expected_headers)
        if len(headers) < core:
            return False
        return headers_match(headers[:core], self.expected_headers)

    def _build(self, row: RowContext) -> NormalizedTransaction:
        return self._transaction(
            row,
            tx_date=self._date(row, 1),
            description=row.cell(4) or row.cell(3),
            amount=self._signed_amount(row, 7),
            reference=row.cell(0) or None,
        )
