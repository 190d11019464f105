from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from db.client import session_scope

from bank_import.business_personal import BusinessPersonalService
from bank_import.errors import UndoNotAllowedError
from bank_import.importer import BankStatementImportService
from bank_import.models import AuditStatus
from bank_import.persistence import SqlImportStore, sql_store_scope
from bank_import.undo import UNDO_WINDOW, ImportUndoService

STATEMENT = """
Date,Description,Money Out,Money In,Balance
15/06/2025,AMAZON PURCHASE,49.99,,1234.56
16/06/2025,CLIENT PAYMENT,,1500.00,2734.56
"""


@pytest.fixture
def scope(database_url):
    return sql_store_scope(database_url)


@pytest.fixture
def imported(scope, clock, business_id, write_csv):
    service = BankStatementImportService(scope, clock=clock)
    return service.import_bank_statement(business_id, write_csv(STATEMENT))


@pytest.fixture
def undo_service(scope, fixed_now):
    """Factory for an undo service whose clock sits ``after`` the import."""

    def _make(after: timedelta = timedelta(hours=1)) -> ImportUndoService:
        return ImportUndoService(scope, clock=lambda: fixed_now + after, actor="alice")

    return _make


# ---- undo ---------------------------------------------------------------------


def test_undo_soft_deletes_rows_and_marks_the_audit(
    undo_service, database_url, imported, business_id, fixed_now
):
    result = undo_service().undo_import(imported.audit_id, "wrong account")

    assert result.deleted_count == 2
    with session_scope(database_url=database_url) as session:
        store = SqlImportStore(session)
        audit = store.audits.find_audit(imported.audit_id)
        assert store.transactions.find_by_owner_id(business_id) == []
        assert store.transactions.find_by_id(imported.imported_ids[0]) is None

    assert audit.status is AuditStatus.UNDONE
    assert audit.undone_by == "alice"
    assert audit.undone_at == fixed_now + timedelta(hours=1)


def test_undone_file_can_be_imported_again(
    undo_service, scope, clock, imported, business_id, write_csv
):
    undo_service().undo_import(imported.audit_id)

    service = BankStatementImportService(scope, clock=clock)
    again = service.import_bank_statement(business_id, write_csv(STATEMENT))
    assert (again.imported_count, again.duplicate_count) == (2, 0)


def test_undo_only_once(undo_service, imported):
    undo = undo_service()
    undo.undo_import(imported.audit_id)

    eligibility = undo.can_undo(imported.audit_id)
    assert not eligibility.allowed
    assert "already been undone" in eligibility.reason
    with pytest.raises(UndoNotAllowedError):
        undo.undo_import(imported.audit_id)


def test_undo_window(undo_service, imported):
    inside = undo_service(after=UNDO_WINDOW)
    assert inside.can_undo(imported.audit_id).allowed

    outside = undo_service(after=UNDO_WINDOW + timedelta(seconds=1))
    eligibility = outside.can_undo(imported.audit_id)
    assert not eligibility.allowed
    assert "7 days" in eligibility.reason
    with pytest.raises(UndoNotAllowedError, match="7 days"):
        outside.undo_import(imported.audit_id)


def test_undo_unknown_audit(undo_service):
    with pytest.raises(KeyError):
        undo_service().undo_import(uuid.uuid4())


# ---- business / personal --------------------------------------------------------


def test_flags_are_tri_state_and_leave_review_status_alone(scope, clock, imported, business_id):
    flags = BusinessPersonalService(scope, clock=clock)
    first, second = imported.imported_ids

    assert flags.count_uncategorized(business_id) == 2
    assert not flags.is_ready_for_submission(business_id)

    business = flags.flag_as_business(first)
    assert business.is_business is True
    assert business.is_pending
    personal = flags.flag_as_personal(second)
    assert personal.is_business is False

    assert flags.count_uncategorized(business_id) == 0
    assert not flags.has_uncategorized_transactions(business_id)
    assert flags.is_ready_for_submission(business_id)

    assert flags.clear_flag(first).is_business is None
    assert flags.count_uncategorized(business_id) == 1


def test_flagging_missing_or_deleted_rows(undo_service, scope, clock, imported):
    flags = BusinessPersonalService(scope, clock=clock)
    with pytest.raises(KeyError, match="not found"):
        flags.flag_as_business(uuid.uuid4())

    undo_service().undo_import(imported.audit_id)
    with pytest.raises(KeyError):
        flags.flag_as_personal(imported.imported_ids[0])


def test_deleted_rows_do_not_block_submission(
    undo_service, scope, clock, imported, business_id
):
    undo_service().undo_import(imported.audit_id)
    flags = BusinessPersonalService(scope, clock=clock)

    assert flags.count_uncategorized(business_id) == 0
    assert flags.is_ready_for_submission(business_id)
