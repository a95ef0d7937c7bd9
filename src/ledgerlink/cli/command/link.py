from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.table import Table
from yaml import YAMLError

from ledgerlink.config import OPERATIONS_DOCTYPE
from ledgerlink.linking.linker import LinkResult, link_bank_operations
from ledgerlink.model.document_io import load_bills_json, load_linking_config
from ledgerlink.model.options import ConfigurationError
from ledgerlink.storage.operation_store import DryRunOperationStore, SqliteOperationStore
from ledgerlink.workspace import Workspace
from .util import console


def _merge_options(base: dict, **overrides) -> dict:
    merged = dict(base)
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def _results_table(results: list[LinkResult]) -> Table:
    table = Table(title="Bill linking", show_lines=False)
    table.add_column("Bill", style="cyan")
    table.add_column("Candidates", justify="right")
    table.add_column("Paid by")
    table.add_column("Reimburses")
    table.add_column("Updates")
    for r in results:
        table.add_row(
            r.bill_id,
            str(r.candidate_count),
            r.matching_operation_id or "[dim]-[/dim]",
            r.reimbursed_operation_id or "[dim]-[/dim]",
            ", ".join(r.updates) or "[dim]none[/dim]",
        )
    return table


def run(
    *,
    bills_file: Path,
    workspace: Workspace,
    identifier: Optional[str] = None,
    amount_delta: Optional[float] = None,
    date_delta: Optional[int] = None,
    min_date_delta: Optional[int] = None,
    max_date_delta: Optional[int] = None,
    doctype: str = OPERATIONS_DOCTYPE,
    write: bool = False,
) -> int:
    """Link bills to the operations stored in the workspace.

    Options come from config/linking.yml, overridden by explicit arguments.
    identifier replaces every configured identifier. Dry-run unless write=True.

    Returns an exit code: 0 on success, 1 when inputs cannot be read,
    2 on configuration errors.
    """
    if not bills_file.exists():
        console.print(f"[red]Error:[/red] Bills file not found: {bills_file}")
        return 1
    store_path = workspace.operations_store_path
    if not store_path.exists():
        console.print(f"[red]Error:[/red] Operations store not found: {store_path}")
        console.print("[yellow]Run 'ledgerlink import-operations' first.[/yellow]")
        return 1

    try:
        bills = load_bills_json(bills_file)
        config = load_linking_config(workspace.linking_config)
    except (ValidationError, YAMLError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    options = _merge_options(
        config.as_options(),
        amount_delta=amount_delta,
        date_delta=date_delta,
        min_date_delta=min_date_delta,
        max_date_delta=max_date_delta,
    )
    fields = {"bank_identifier": identifier} if identifier else {}

    backing = SqliteOperationStore(store_path)
    store = backing if write else DryRunOperationStore(backing)

    try:
        results = link_bank_operations(bills, doctype, fields, options, store)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        console.print("[yellow]Set identifiers in config/linking.yml or pass --identifier.[/yellow]")
        return 2

    console.print(_results_table(results))

    linked = sum(1 for r in results if r.is_linked)
    updates = sum(len(r.updates) for r in results)
    console.print(f"\n{linked}/{len(results)} bill(s) linked, {updates} update(s)")
    if not write:
        console.print("\n[yellow]This was a dry run. Use --write to persist links.[/]")
    return 0
