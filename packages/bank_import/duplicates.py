"""Duplicate detection for a batch of parsed transactions.

A parsed row is a duplicate when any of these already holds its transaction
hash:

1. a staged bank transaction of the same owner (``exists_by_hash``);
2. recorded income or expense history in the batch's date window;
3. an earlier row of the same batch (first occurrence wins).

History amounts are stored positive. Income history is compared as a positive
amount and expense history as a negative one, so a refund of £50 does not
mask a £50 purchase with the same description on the same day.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import UUID

from .contracts import BankTransactionStore, TransactionHistoryStore
from .logging_setup import get_logger
from .models import NormalizedTransaction, compute_transaction_hash

_logger = get_logger("bank_import.duplicates")


@dataclass(frozen=True, slots=True)
class DuplicateCheckResult:
    unique: list[NormalizedTransaction] = field(default_factory=list)
    duplicates: list[NormalizedTransaction] = field(default_factory=list)

    @property
    def unique_count(self) -> int:
        return len(self.unique)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicates)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicates)


class DuplicateDetector:
    def __init__(
        self,
        history: TransactionHistoryStore,
        staged: BankTransactionStore | None = None,
    ) -> None:
        self.history = history
        self.staged = staged

    def _history_hashes(
        self, business_id: UUID, batch: Sequence[NormalizedTransaction]
    ) -> set[str]:
        start = min(tx.date for tx in batch)
        end = max(tx.date for tx in batch)
        hashes = {
            compute_transaction_hash(r.date, abs(r.amount), r.description)
            for r in self.history.find_incomes_by_date_range(business_id, start, end)
        }
        hashes.update(
            compute_transaction_hash(r.date, -abs(r.amount), r.description)
            for r in self.history.find_expenses_by_date_range(business_id, start, end)
        )
        return hashes

    def check_duplicates(
        self, business_id: UUID, batch: Sequence[NormalizedTransaction]
    ) -> DuplicateCheckResult:
        """Partition ``batch`` into unique and duplicate rows, preserving order."""

        result = DuplicateCheckResult()
        if not batch:
            return result

        history = self._history_hashes(business_id, batch)
        seen: set[str] = set()
        for tx in batch:
            tx_hash = tx.transaction_hash
            if (
                tx_hash in seen
                or tx_hash in history
                or (self.staged is not None and self.staged.exists_by_hash(business_id, tx_hash))
            ):
                _logger.debug("Duplicate %s %s %r", tx.date, tx.amount, tx.description)
                result.duplicates.append(tx)
                continue
            seen.add(tx_hash)
            result.unique.append(tx)
        return result


__all__ = ["DuplicateCheckResult", "DuplicateDetector"]
