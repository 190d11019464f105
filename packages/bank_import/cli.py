# ruff: noqa: I001
"""CLI for the ``bank_import`` package.

Typer-based console interface over the import services. Environment variables
(``DATABASE_URL``, ``BANK_IMPORT_LOG_LEVEL``, ``BANK_IMPORT_USER``) are loaded
from a local ``.env`` using ``python-dotenv`` before any command runs. Business
logic lives in ``bank_import.importer`` and related modules; this module only
parses options and renders results with ``rich``.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Annotated
from uuid import UUID

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer.models import ArgumentInfo

from .errors import BankImportError
from .importer import BankStatementImportService
from .ingest.manual_mapping import ColumnMapping
from .logging_setup import configure_logging

console = Console()

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import UK bank statement CSV exports into staged transactions. "
        "Loads DATABASE_URL from a local .env before running."
    ),
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
CSV_FILE_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Path to a bank statement CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # reported by the handler with a friendlier message
)


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def _load_mapping(mapping_path: Path | None) -> ColumnMapping | None:
    if mapping_path is None:
        return None
    try:
        return ColumnMapping.model_validate_json(mapping_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise _fail(f"cannot read mapping file {mapping_path}: {e}") from e
    except ValidationError as e:
        raise _fail(f"invalid column mapping in {mapping_path}: {e}") from e


def _import_service(database_url: str | None) -> BankStatementImportService:
    from .persistence import sql_store_scope

    return BankStatementImportService(sql_store_scope(database_url))


# ---- commands ----------------------------------------------------------------


@app.command("banks")
def banks_cmd() -> None:
    """List the banks whose CSV exports are recognized automatically."""

    from .ingest.detector import get_available_bank_names

    for name in get_available_bank_names():
        console.print(name)


@app.command("detect")
def detect_cmd(
    csv_file: Annotated[Path, CSV_FILE_ARGUMENT],
    *,
    encoding: str = typer.Option("utf-8", help="File encoding."),
) -> None:
    """Report which bank format a CSV file is in."""

    from .ingest.detector import detect_format

    if not csv_file.is_file():
        raise _fail(f"file not found: {csv_file}")
    try:
        parser = detect_format(csv_file, encoding)
    except BankImportError as e:
        raise _fail(str(e)) from e
    if parser is None:
        raise _fail("Unknown CSV format. Use --mapping with `import` for other banks.")
    console.print(f"[green]{parser.get_bank_name()}[/green]")


@app.command("import")
def import_cmd(
    csv_file: Annotated[Path, CSV_FILE_ARGUMENT],
    *,
    business_id: UUID = typer.Option(..., help="Owning business id."),
    encoding: str = typer.Option("utf-8", help="File encoding."),
    mapping: Path | None = typer.Option(
        None, help="JSON column mapping for banks without automatic detection."
    ),
    tolerant: bool = typer.Option(
        False, help="Record unparseable rows as errors instead of aborting."
    ),
    auto_categorize: bool = typer.Option(
        False, help="Apply exclusion rules and category suggestions on import."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Import a statement CSV, skipping rows that were imported before."""

    if not csv_file.is_file():
        raise _fail(f"file not found: {csv_file}")
    column_mapping = _load_mapping(mapping)
    service = _import_service(database_url)
    try:
        if column_mapping is not None:
            result = service.import_with_mapping(
                business_id,
                csv_file,
                column_mapping,
                encoding,
                tolerant=tolerant,
                auto_categorize=auto_categorize,
            )
        else:
            result = service.import_bank_statement(
                business_id,
                csv_file,
                encoding,
                tolerant=tolerant,
                auto_categorize=auto_categorize,
            )
    except BankImportError as e:
        raise _fail(str(e)) from e

    table = Table(title=f"{result.bank_name} import")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    table.add_row("Total rows", str(result.total_records))
    table.add_row("Imported", str(result.imported_count))
    table.add_row("Duplicates", str(result.duplicate_count))
    table.add_row("Errors", str(result.error_count))
    if auto_categorize:
        table.add_row("Excluded", str(result.excluded_count))
    console.print(table)
    for err in result.errors:
        console.print(f"[yellow]line {err.line_number}:[/yellow] {escape(err.message)}")
    console.print(f"Audit id: {result.audit_id}")


@app.command("preview")
def preview_cmd(
    csv_file: Annotated[Path, CSV_FILE_ARGUMENT],
    *,
    business_id: UUID = typer.Option(..., help="Owning business id."),
    encoding: str = typer.Option("utf-8", help="File encoding."),
    mapping: Path | None = typer.Option(None, help="JSON column mapping."),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Show what an import would do without writing anything."""

    if not csv_file.is_file():
        raise _fail(f"file not found: {csv_file}")
    column_mapping = _load_mapping(mapping)
    try:
        preview = _import_service(database_url).preview_import(
            business_id, csv_file, encoding, mapping=column_mapping
        )
    except BankImportError as e:
        raise _fail(str(e)) from e

    table = Table(title=f"{preview.bank_name} preview")
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    for tx in preview.unique:
        table.add_row(tx.date.isoformat(), tx.description, str(tx.amount), "new")
    for tx in preview.duplicates:
        table.add_row(tx.date.isoformat(), tx.description, str(tx.amount), "duplicate")
    console.print(table)
    console.print(
        f"{len(preview.unique)} new, {len(preview.duplicates)} duplicate, "
        f"{len(preview.errors)} error(s)"
    )


@app.command("audits")
def audits_cmd(
    *,
    business_id: UUID = typer.Option(..., help="Owning business id."),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """List past imports for a business, newest first."""

    from .persistence import SqlImportAuditStore
    from db.client import session_scope

    with session_scope(database_url=database_url) as session:
        audits = SqlImportAuditStore(session).find_audits_by_owner_id(business_id)

    table = Table(title="Imports")
    for col in ("Audit id", "When", "File", "Imported", "Skipped", "Status"):
        table.add_column(col)
    for a in audits:
        table.add_row(
            str(a.id),
            a.import_timestamp.strftime("%Y-%m-%d %H:%M"),
            a.file_name,
            str(a.imported_count),
            str(a.skipped_count),
            a.status.value,
        )
    console.print(table)


@app.command("undo")
def undo_cmd(
    audit_id: UUID = typer.Argument(..., help="Audit id printed by `import`."),
    *,
    reason: str = typer.Option("User requested undo", help="Reason recorded on the rows."),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Undo an import made within the last seven days."""

    from .persistence import sql_store_scope
    from .undo import ImportUndoService

    try:
        result = ImportUndoService(sql_store_scope(database_url)).undo_import(audit_id, reason)
    except KeyError as e:
        raise _fail(f"no import with id {audit_id}") from e
    except BankImportError as e:
        raise _fail(str(e)) from e
    console.print(f"Undone: {result.deleted_count} transaction(s) removed")


@app.command("categorize")
def categorize_cmd(
    description: str = typer.Argument(..., help="Bank description text."),
    amount: str = typer.Argument(..., help="Signed amount, e.g. -49.99 or 1500."),
) -> None:
    """Show the exclusion/category recommendation for one bank line."""

    from .classification import CategorizationEngine
    from .ingest.utils import parse_amount
    from .models import NormalizedTransaction
    from datetime import date

    try:
        value: Decimal = parse_amount(amount)
        transaction = NormalizedTransaction(date.today(), value, description)
    except ValueError as e:
        raise _fail(str(e)) from e
    rec = CategorizationEngine().recommend(transaction)

    if rec.exclusion_reason is not None:
        console.print(f"Excluded: {rec.exclusion_reason.value} ({rec.confidence_level.value})")
        return
    category = rec.income_category if rec.is_income else rec.expense_category
    label = category.value if category is not None else "uncategorized"
    console.print(
        f"{'Income' if rec.is_income else 'Expense'}: {label} "
        f"({rec.confidence_level.value}, {rec.confidence_score})"
    )
    if rec.sa103_box:
        console.print(f"SA103 {rec.sa103_box}")


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    app()
