"""Metro Bank CSV export.

Header: ``Date, Transaction type, Description, Money out, Money in, Balance``.
Standing orders often arrive with a blank description, in which case the
transaction type alone becomes the description.
"""

from __future__ import annotations

from ...models import NormalizedTransaction
from ..utils import combine_type_and_description
from .base import BankCsvParser, RowContext


class MetroBankCsvParser(BankCsvParser):
    bank_name = "Metro Bank"
    expected_headers = (
        "Date",
        "Transaction type",
        "Description",
        "Money out",
        "Money in",
        "Balance",
    )

    def _build(self, row: RowContext) -> NormalizedTransaction:
        return self._transaction(
            row,
            tx_date=self._date(row, 0),
            description=combine_type_and_description(row.cell(1), row.cell(2)),
            amount=self._split_amount(row, 3, 4),
            balance=self._balance(row, 5),
        )
