"""Column-index driven parser for banks without a dedicated adapter.

A :class:`ColumnMapping` describes where each value lives in the file. It is a
strict pydantic model so mappings saved as JSON by a UI (or passed to the CLI
via ``--mapping``) are validated before any row is read::

    {"bank_name": "Co-op", "date_column": 0, "description_column": 2,
     "debit_column": 3, "credit_column": 4, "balance_column": 5}

Column indices are 0-based; unused columns are ``null``.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models import NormalizedTransaction
from .adapters.base import BankCsvParser, RowContext
from .utils import is_blank, parse_amount

MANUAL_IMPORT_BANK_NAME = "Manual Import"

# Tried in order after the mapping's own ``date_format``
FALLBACK_DATE_FORMATS: tuple[str, ...] = (
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%Y-%m-%d",
    "%d-%b-%Y",
    "%d %b %Y",
)


class ColumnMapping(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, extra="forbid", str_strip_whitespace=True)

    bank_name: str | None = None
    has_header_row: bool = True
    date_column: int = Field(default=0, ge=0)
    date_format: str | None = None
    description_column: int = Field(default=1, ge=0)
    amount_column: int | None = Field(default=2, ge=0)
    debit_column: int | None = Field(default=None, ge=0)
    credit_column: int | None = Field(default=None, ge=0)
    debit_is_negative: bool = True
    credit_is_positive: bool = True
    balance_column: int | None = Field(default=None, ge=0)
    reference_column: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_amount_source(self) -> ColumnMapping:
        if not self.uses_separate_columns and self.amount_column is None:
            raise ValueError(
                "mapping needs either amount_column or debit_column/credit_column"
            )
        return self

    @property
    def uses_separate_columns(self) -> bool:
        return self.debit_column is not None or self.credit_column is not None

    @property
    def effective_bank_name(self) -> str:
        return self.bank_name or MANUAL_IMPORT_BANK_NAME

    @property
    def date_formats(self) -> tuple[str, ...]:
        if self.date_format:
            return (self.date_format, *FALLBACK_DATE_FORMATS)
        return FALLBACK_DATE_FORMATS


class ManualMappingParser(BankCsvParser):
    """Parse any CSV given an explicit :class:`ColumnMapping`.

    Never selected by format detection (``can_parse`` is always ``False``);
    callers construct it directly once the user has mapped the columns.
    """

    bank_name = MANUAL_IMPORT_BANK_NAME
    expected_headers = ()

    def __init__(self, mapping: ColumnMapping) -> None:
        self.mapping = mapping
        self.skip_header = mapping.has_header_row

    def get_bank_name(self) -> str:
        return self.mapping.effective_bank_name

    def can_parse(self, headers: Sequence[str]) -> bool:
        return False

    @property
    def required_columns(self) -> int:
        # Trailing optional columns (balance, reference) may be missing
        m = self.mapping
        required = [m.date_column, m.description_column]
        if m.uses_separate_columns:
            required += [c for c in (m.debit_column, m.credit_column) if c is not None]
        elif m.amount_column is not None:
            required.append(m.amount_column)
        return max(required) + 1

    def _build(self, row: RowContext) -> NormalizedTransaction:
        m = self.mapping
        reference = row.cell(m.reference_column) if m.reference_column is not None else ""
        balance = self._balance(row, m.balance_column) if m.balance_column is not None else None
        return self._transaction(
            row,
            tx_date=self._date(row, m.date_column, m.date_formats),
            description=row.cell(m.description_column),
            amount=self._mapped_amount(row),
            balance=balance,
            reference=reference or None,
        )

    def _mapped_amount(self, row: RowContext) -> Decimal:
        m = self.mapping
        if not m.uses_separate_columns and m.amount_column is not None:
            return self._signed_amount(row, m.amount_column)

        debit = row.cell(m.debit_column) if m.debit_column is not None else ""
        credit = row.cell(m.credit_column) if m.credit_column is not None else ""
        try:
            if not is_blank(debit):
                value = abs(parse_amount(debit))
                return -value if m.debit_is_negative else value
            if not is_blank(credit):
                value = abs(parse_amount(credit))
                return value if m.credit_is_positive else -value
        except ValueError as exc:
            raise row.fail("amount", f"Invalid amount format: {exc}") from exc
        raise row.fail("amount", "No amount specified (both debit and credit are empty)")


__all__ = [
    "FALLBACK_DATE_FORMATS",
    "MANUAL_IMPORT_BANK_NAME",
    "ColumnMapping",
    "ManualMappingParser",
]
