"""Lloyds CSV export in its two layouts.

Simplified (6 columns)::

    Transaction Date, Transaction Type, Description, Debit, Credit, Balance

Full (8 columns, as downloaded from online banking)::

    Transaction Date, Transaction Type, Sort Code, Account Number,
    Transaction Description, Debit Amount, Credit Amount, Balance

The header row fixes the layout for the whole file; a short row in a full
layout file is a column error, not a simplified row.
"""

from __future__ import annotations

from collections.abc import Sequence
from os import PathLike
from typing import ClassVar

from ...models import NormalizedTransaction
from ..utils import combine_type_and_description, headers_match, read_header_cells
from .base import BankCsvParser, RowContext

FULL_HEADERS: tuple[str, ...] = (
    "Transaction Date",
    "Transaction Type",
    "Sort Code",
    "Account Number",
    "Transaction Description",
    "Debit Amount",
    "Credit Amount",
    "Balance",
)


class LloydsCsvParser(BankCsvParser):
    bank_name = "Lloyds"
    expected_headers = (
        "Transaction Date",
        "Transaction Type",
        "Description",
        "Debit",
        "Credit",
        "Balance",
    )
    # description, debit, credit, balance
    columns: ClassVar[tuple[int, int, int, int]] = (2, 3, 4, 5)

    def can_parse(self, headers: Sequence[str]) -> bool:
        return headers_match(headers, self.expected_headers) or headers_match(
            headers, FULL_HEADERS
        )

    def for_file(self, path: str | PathLike[str], encoding: str = "utf-8") -> BankCsvParser:
        if headers_match(read_header_cells(path, encoding), FULL_HEADERS):
            return LloydsFullCsvParser()
        return self

    def _build(self, row: RowContext) -> NormalizedTransaction:
        desc_i, debit_i, credit_i, balance_i = self.columns
        return self._transaction(
            row,
            tx_date=self._date(row, 0),
            description=combine_type_and_description(row.cell(1), row.cell(desc_i)),
            amount=self._split_amount(row, debit_i, credit_i),
            balance=self._balance(row, balance_i),
        )


class LloydsFullCsvParser(LloydsCsvParser):
    """Rows of a file whose header is the 8-column online-banking layout."""

    expected_headers = FULL_HEADERS
    columns = (4, 5, 6, 7)

    def for_file(self, path: str | PathLike[str], encoding: str = "utf-8") -> BankCsvParser:
        return self
