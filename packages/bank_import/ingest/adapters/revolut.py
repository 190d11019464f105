"""Revolut CSV export.

Header::

    Type, Product, Started Date, Completed Date, Description, Amount, Fee,
    Currency, State, Balance

Only settled sterling rows are accounting transactions: rows whose ``State``
is not ``COMPLETED`` (pending, reverted, declined) or whose ``Currency`` is
not ``GBP`` are skipped without error. Dates carry a time component
(``2025-06-15 10:30:00``); only the calendar date is kept.
"""

from __future__ import annotations

from ...logging_setup import get_logger
from ...models import NormalizedTransaction
from .base import BankCsvParser, RowContext

_logger = get_logger("bank_import.ingest.revolut")


class RevolutCsvParser(BankCsvParser):
    bank_name = "Revolut"
    expected_headers = (
        "Type",
        "Product",
        "Started Date",
        "Completed Date",
        "Description",
        "Amount",
        "Fee",
        "Currency",
        "State",
        "Balance",
    )
    date_formats = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d")

    def _build(self, row: RowContext) -> NormalizedTransaction | None:
        state = row.cell(8).upper()
        currency = row.cell(7).upper()
        if state != "COMPLETED" or currency != "GBP":
            _logger.debug(
                "Skipping Revolut row at line %d (state=%s, currency=%s)",
                row.line_number,
                state or "-",
                currency or "-",
            )
            return None
        date_index = 3 if row.cell(3) else 2
        return self._transaction(
            row,
            tx_date=self._date(row, date_index),
            description=row.cell(4) or row.cell(0),
            amount=self._signed_amount(row, 5),
            balance=self._balance(row, 9),
        )
