"""Cell-level helpers shared by the bank CSV adapters.

The cell helpers raise plain ``ValueError``; adapters translate those into
``CsvParseError`` carrying the field name and line number. Only the file-level
``read_header_cells`` raises ``CsvParseError`` itself.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from os import PathLike
from pathlib import Path

from ..errors import CsvParseError

# Day/month/year and day-month-name-year, e.g. 15/06/2025 and 15-Jun-2025
DEFAULT_DATE_FORMATS: tuple[str, ...] = ("%d/%m/%Y", "%d-%b-%Y")

_AMOUNT_NOISE_RE = re.compile(r"GBP|£|,|\s", re.IGNORECASE)
_BOM = "\ufeff"


def normalize_header(cell: str) -> str:
    """Trim whitespace, surrounding quotes and a leading BOM from a header cell."""

    return cell.replace(_BOM, "").strip().strip('"').strip("'").strip()


def headers_match(headers: Sequence[str], expected: Sequence[str]) -> bool:
    """Case-insensitive, position-by-position header comparison."""

    if len(headers) != len(expected):
        return False
    return all(
        normalize_header(h).lower() == e.lower() for h, e in zip(headers, expected, strict=True)
    )


def split_csv_line(line: str) -> list[str]:
    """Split one physical CSV line into fields, honouring double quotes."""

    return next(csv.reader([line]), [])


def read_header_cells(path: str | PathLike[str], encoding: str = "utf-8") -> list[str]:
    """Return the normalized cells of the first line of ``path``; ``[]`` when it is blank.

    Raises ``CsvParseError`` (field ``"file"``) when the leading bytes do not
    decode with ``encoding``.
    """

    p = Path(path)
    try:
        with p.open(encoding=encoding, newline="") as f:
            first = f.readline()
    except UnicodeDecodeError as exc:
        raise CsvParseError(
            f"Unable to read file with encoding {encoding!r}: {exc.reason}",
            field="file",
            file_name=p.name,
        ) from exc
    if not first.strip():
        return []
    return [normalize_header(cell) for cell in split_csv_line(first.rstrip("\r\n"))]


def is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def parse_amount(raw: str) -> Decimal:
    """Parse a monetary cell such as ``"£1,234.56"``, ``"-49.99"`` or ``"(12.00)"``.

    Strips currency markers ("GBP", "£"), thousands separators and whitespace.
    A Unicode minus sign and accounting-style parentheses both mean negative.
    """

    s = _AMOUNT_NOISE_RE.sub("", raw.replace("\u2212", "-"))
    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]
    if not s:
        raise ValueError(f"Invalid amount format: {raw!r}")
    try:
        value = Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount format: {raw!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Invalid amount format: {raw!r}")
    return -value if negative else value


def parse_optional_amount(raw: str | None) -> Decimal | None:
    return None if is_blank(raw) else parse_amount(raw)  # type: ignore[arg-type]


def parse_date(raw: str, formats: Iterable[str] = DEFAULT_DATE_FORMATS) -> date:
    """Parse ``raw`` with the first matching ``strptime`` format."""

    s = raw.strip()
    for fmt in formats:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date format: {raw!r}")


def split_amount(money_out: str | None, money_in: str | None) -> Decimal | None:
    """Signed amount from separate out/in columns; ``None`` when both are blank.

    A populated "out" column yields a negative amount (expense) regardless of
    the sign written in the cell.
    """

    if not is_blank(money_out):
        return -abs(parse_amount(money_out))  # type: ignore[arg-type]
    if not is_blank(money_in):
        return abs(parse_amount(money_in))  # type: ignore[arg-type]
    return None


def combine_type_and_description(tx_type: str | None, description: str | None) -> str:
    """Join ``"TYPE - DESCRIPTION"``, falling back to whichever part is present."""

    t = (tx_type or "").strip()
    d = (description or "").strip()
    if t and d:
        return f"{t} - {d}"
    return t or d


__all__ = [
    "DEFAULT_DATE_FORMATS",
    "combine_type_and_description",
    "headers_match",
    "is_blank",
    "normalize_header",
    "parse_amount",
    "parse_date",
    "parse_optional_amount",
    "read_header_cells",
    "split_amount",
    "split_csv_line",
]
