"""Shared machinery for per-bank CSV adapters.

Each bank dialect is a subclass of :class:`BankCsvParser` declaring its
``bank_name``, ``expected_headers`` and accepted ``date_formats``, and
implementing ``_build(row)`` to turn one split CSV line into a
``NormalizedTransaction`` (or ``None`` to skip the row deliberately). A dialect
with more than one column layout overrides ``for_file`` to return the parser
for the layout named by the file's header row.

The base class owns file iteration (1-based line numbers, header skip, blank
line skip), column-count checks and the translation of cell-level
``ValueError`` into ``CsvParseError`` with the offending field name.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from os import PathLike
from pathlib import Path
from typing import ClassVar

from ...errors import CsvParseError
from ...models import NormalizedTransaction
from ..utils import (
    DEFAULT_DATE_FORMATS,
    headers_match,
    is_blank,
    parse_amount,
    parse_date,
    split_amount,
    split_csv_line,
)

type RawRow = tuple[int, str, list[str]]
"""``(line_number, raw_line, fields)`` for one non-blank data line."""


@dataclass(frozen=True, slots=True)
class RowContext:
    """One data row plus the location used in error messages."""

    fields: Sequence[str]
    line_number: int
    file_name: str | None = None

    def cell(self, index: int) -> str:
        if index < 0 or index >= len(self.fields):
            return ""
        return self.fields[index].strip()

    def fail(self, field: str, message: str) -> CsvParseError:
        return CsvParseError(
            message, field=field, line_number=self.line_number, file_name=self.file_name
        )


class BankCsvParser:
    bank_name: ClassVar[str]
    expected_headers: ClassVar[tuple[str, ...]]
    date_formats: ClassVar[tuple[str, ...]] = DEFAULT_DATE_FORMATS
    min_columns: ClassVar[int | None] = None
    skip_header: bool = True

    # ---- dialect identity ----------------------------------------------

    def get_bank_name(self) -> str:
        return self.bank_name

    def get_expected_headers(self) -> list[str]:
        return list(self.expected_headers)

    def can_parse(self, headers: Sequence[str]) -> bool:
        return headers_match(headers, self.expected_headers)

    @property
    def required_columns(self) -> int:
        return self.min_columns if self.min_columns is not None else len(self.expected_headers)

    # ---- parsing ---------------------------------------------------------

    def parse(
        self, path: str | PathLike[str], encoding: str = "utf-8"
    ) -> list[NormalizedTransaction]:
        """Parse the whole file, raising on the first bad row."""

        file_name = Path(path).name
        parser = self.for_file(path, encoding)
        out: list[NormalizedTransaction] = []
        for line_number, _raw, fields in parser.iter_rows(path, encoding):
            tx = parser.parse_row(fields, line_number=line_number, file_name=file_name)
            if tx is not None:
                out.append(tx)
        return out

    def for_file(self, path: str | PathLike[str], encoding: str = "utf-8") -> BankCsvParser:
        """Parser for the rows of ``path``; dialects with several layouts pick one here."""

        return self

    def iter_rows(self, path: str | PathLike[str], encoding: str = "utf-8") -> Iterator[RawRow]:
        p = Path(path)
        try:
            with p.open(encoding=encoding, newline="") as f:
                for line_number, line in enumerate(f, start=1):
                    if line_number == 1 and self.skip_header:
                        continue
                    raw = line.rstrip("\r\n")
                    if not raw.strip():
                        continue
                    yield line_number, raw, split_csv_line(raw)
        except UnicodeDecodeError as exc:
            raise CsvParseError(
                f"Unable to read file with encoding {encoding!r}: {exc.reason}",
                field="file",
                file_name=p.name,
            ) from exc

    def parse_row(
        self, fields: Sequence[str], *, line_number: int, file_name: str | None = None
    ) -> NormalizedTransaction | None:
        row = RowContext(fields, line_number, file_name)
        if len(fields) < self.required_columns:
            raise row.fail(
                "columns",
                f"Invalid number of columns: expected at least {self.required_columns}, "
                f"got {len(fields)}",
            )
        return self._build(row)

    def _build(self, row: RowContext) -> NormalizedTransaction | None:
        raise NotImplementedError

    # ---- cell helpers for subclasses ------------------------------------

    def _date(self, row: RowContext, index: int, formats: Sequence[str] | None = None) -> date:
        raw = row.cell(index)
        if not raw:
            raise row.fail("date", "Empty date value")
        try:
            return parse_date(raw, formats or self.date_formats)
        except ValueError as exc:
            raise row.fail("date", f"Invalid date format: {raw}") from exc

    def _signed_amount(self, row: RowContext, index: int) -> Decimal:
        raw = row.cell(index)
        if not raw:
            raise row.fail("amount", "No amount specified")
        try:
            return parse_amount(raw)
        except ValueError as exc:
            raise row.fail("amount", f"Invalid amount format: {raw}") from exc

    def _split_amount(self, row: RowContext, out_index: int, in_index: int) -> Decimal:
        try:
            amount = split_amount(row.cell(out_index), row.cell(in_index))
        except ValueError as exc:
            raise row.fail("amount", f"Invalid amount format: {exc}") from exc
        if amount is None:
            raise row.fail("amount", "No amount specified (both debit and credit are empty)")
        return amount

    def _balance(self, row: RowContext, index: int) -> Decimal | None:
        raw = row.cell(index)
        if is_blank(raw):
            return None
        try:
            return parse_amount(raw)
        except ValueError as exc:
            raise row.fail("balance", f"Invalid balance format: {raw}") from exc

    def _transaction(
        self,
        row: RowContext,
        *,
        tx_date: date,
        amount: Decimal,
        description: str,
        balance: Decimal | None = None,
        reference: str | None = None,
    ) -> NormalizedTransaction:
        if not description.strip():
            raise row.fail("description", "Empty description not allowed")
        return NormalizedTransaction(
            date=tx_date,
            amount=amount,
            description=description.strip(),
            balance=balance,
            reference=reference or None,
        )


__all__ = ["BankCsvParser", "RawRow", "RowContext"]
