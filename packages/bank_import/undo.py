"""Undoing a recent import.

An import can be undone within ``UNDO_WINDOW`` of its timestamp, once. Undo
soft-deletes every still-active bank transaction the import created and marks
the audit UNDONE in the same transactional scope. Soft-deleted rows no longer
count for duplicate detection, so the file can be imported again afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from .contracts import ImportStore, StoreScope
from .errors import UndoNotAllowedError
from .importer import Clock, resolve_actor, utc_now
from .logging_setup import get_logger
from .staging import ImportAudit

UNDO_WINDOW = timedelta(days=7)
DEFAULT_UNDO_REASON = "User requested undo"

_logger = get_logger("bank_import.undo")


@dataclass(frozen=True, slots=True)
class UndoEligibility:
    allowed: bool
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class UndoResult:
    audit_id: UUID
    deleted_count: int


class ImportUndoService:
    def __init__(
        self, store_scope: StoreScope, *, clock: Clock = utc_now, actor: str | None = None
    ) -> None:
        self.store_scope = store_scope
        self.clock = clock
        self.actor = resolve_actor(actor)

    def _eligibility(self, audit: ImportAudit) -> UndoEligibility:
        if audit.is_undone:
            return UndoEligibility(False, "Import has already been undone")
        if self.clock() - audit.import_timestamp > UNDO_WINDOW:
            return UndoEligibility(
                False, f"Imports can only be undone within {UNDO_WINDOW.days} days"
            )
        return UndoEligibility(True)

    @staticmethod
    def _load(store: ImportStore, audit_id: UUID) -> ImportAudit:
        audit = store.audits.find_audit(audit_id)
        if audit is None:
            raise KeyError(f"Import audit not found: {audit_id}")
        return audit

    def can_undo(self, audit_id: UUID) -> UndoEligibility:
        with self.store_scope() as store:
            return self._eligibility(self._load(store, audit_id))

    def undo_import(self, audit_id: UUID, reason: str = DEFAULT_UNDO_REASON) -> UndoResult:
        now = self.clock()
        with self.store_scope() as store:
            audit = self._load(store, audit_id)
            eligibility = self._eligibility(audit)
            if not eligibility.allowed:
                raise UndoNotAllowedError(eligibility.reason)
            deleted = 0
            for tx in store.transactions.find_by_audit_id(audit_id):
                store.transactions.update(tx.soft_deleted(self.actor, reason, now))
                deleted += 1
            store.audits.update_audit(audit.marked_undone(self.actor, now))

        _logger.info("Undid import %s: %d transactions removed", audit_id, deleted)
        return UndoResult(audit_id=audit_id, deleted_count=deleted)


__all__ = [
    "DEFAULT_UNDO_REASON",
    "UNDO_WINDOW",
    "ImportUndoService",
    "UndoEligibility",
    "UndoResult",
]
