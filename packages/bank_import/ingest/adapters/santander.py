"""Santander CSV export: ``Date, Description, Amount, Balance`` with a signed amount."""

from __future__ import annotations

from ...models import NormalizedTransaction
from .base import BankCsvParser, RowContext


class SantanderCsvParser(BankCsvParser):
    bank_name = "Santander"
    expected_headers = ("Date", "Description", "Amount", "Balance")

    def _build(self, row: RowContext) -> NormalizedTransaction:
        return self._transaction(
            row,
            tx_date=self._date(row, 0),
            description=row.cell(1),
            amount=self._signed_amount(row, 2),
            balance=self._balance(row, 3),
        )
