"""Ordered keyword lookup tables.

A table is a sequence of ``(keyword, outcome)`` pairs evaluated top to bottom
against a normalized description; the first keyword contained in it wins.
The description is padded with a space on each side, so a keyword written
as ``" atm "`` only matches the whole word while ``"amazon"`` matches
anywhere (``"AMAZON.CO.UK"``, ``"AMZN AMAZON MKTPLACE"``).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .models import normalize_description


class KeywordTable[T]:
    def __init__(self, entries: Iterable[tuple[str, T]]) -> None:
        self._entries: tuple[tuple[str, T], ...] = tuple(
            (keyword.lower(), outcome) for keyword, outcome in entries
        )

    def __iter__(self) -> Iterator[tuple[str, T]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, description: str | None) -> tuple[str, T] | None:
        """Return the first ``(keyword, outcome)`` matching ``description``."""

        if not description or not description.strip():
            return None
        haystack = f" {normalize_description(description)} "
        for keyword, outcome in self._entries:
            if keyword in haystack:
                return keyword, outcome
        return None

    def match(self, description: str | None) -> T | None:
        hit = self.lookup(description)
        return hit[1] if hit is not None else None


__all__ = ["KeywordTable"]
