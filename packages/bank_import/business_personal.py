"""Business/personal flagging of staged bank transactions.

The flag is tri-state: ``None`` until the user decides, then ``True``
(business) or ``False`` (personal). Flagging never changes review status.
A business is ready for a tax-return submission once no active transaction
is left unflagged.
"""

from __future__ import annotations

from uuid import UUID

from .contracts import StoreScope
from .importer import Clock, utc_now
from .staging import BankTransaction


class BusinessPersonalService:
    def __init__(self, store_scope: StoreScope, *, clock: Clock = utc_now) -> None:
        self.store_scope = store_scope
        self.clock = clock

    def _set_flag(self, transaction_id: UUID, flag: bool | None) -> BankTransaction:
        with self.store_scope() as store:
            tx = store.transactions.find_by_id(transaction_id)
            if tx is None:
                raise KeyError(f"Bank transaction not found: {transaction_id}")
            return store.transactions.update(tx.with_business_flag(flag, self.clock()))

    def flag_as_business(self, transaction_id: UUID) -> BankTransaction:
        return self._set_flag(transaction_id, True)

    def flag_as_personal(self, transaction_id: UUID) -> BankTransaction:
        return self._set_flag(transaction_id, False)

    def clear_flag(self, transaction_id: UUID) -> BankTransaction:
        return self._set_flag(transaction_id, None)

    def count_uncategorized(self, business_id: UUID) -> int:
        with self.store_scope() as store:
            return sum(
                1 for tx in store.transactions.find_by_owner_id(business_id) if tx.is_business is None
            )

    def has_uncategorized_transactions(self, business_id: UUID) -> bool:
        return self.count_uncategorized(business_id) > 0

    def is_ready_for_submission(self, business_id: UUID) -> bool:
        return not self.has_uncategorized_transactions(business_id)


__all__ = ["BusinessPersonalService"]
