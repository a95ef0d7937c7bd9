from __future__ import annotations

from rich.table import Table

from ledgerlink.config import OPERATIONS_DOCTYPE
from ledgerlink.storage.operation_store import SqliteOperationStore
from ledgerlink.workspace import Workspace
from .util import console, fmt_amount


def run(
    *,
    workspace: Workspace,
    doctype: str = OPERATIONS_DOCTYPE,
    linked_only: bool = False,
    limit: int | None = None,
) -> int:
    """Show stored operations with their linked bills and reimbursements."""
    store_path = workspace.operations_store_path
    if not store_path.exists():
        console.print(f"[red]Error:[/red] Operations store not found: {store_path}")
        return 1

    store = SqliteOperationStore(store_path)
    operations = store.all_operations(doctype)
    if linked_only:
        operations = [op for op in operations if op.bills or op.reimbursements]
    if limit is not None:
        operations = operations[:limit]

    if not operations:
        console.print("[yellow]No operations to show.[/yellow]")
        return 0

    table = Table(title=f"Operations ({doctype})")
    table.add_column("Date")
    table.add_column("Id", style="cyan")
    table.add_column("Label")
    table.add_column("Amount", justify="right")
    table.add_column("Bills")
    table.add_column("Reimbursed by")
    for op in operations:
        table.add_row(
            op.date.date().isoformat() if op.date else "",
            op.id,
            op.label,
            fmt_amount(op.amount),
            "\n".join(op.bills),
            "\n".join(f"{r.bill_id} ({r.amount:,.2f})" for r in op.reimbursements),
        )
    console.print(table)
    return 0
