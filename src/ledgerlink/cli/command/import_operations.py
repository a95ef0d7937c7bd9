from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from ledgerlink.config import OPERATIONS_DOCTYPE
from ledgerlink.model.document_io import load_operations_json
from ledgerlink.storage.operation_store import SqliteOperationStore
from ledgerlink.workspace import Workspace
from .util import console


def run(
    *,
    source: Path,
    workspace: Workspace,
    doctype: str = OPERATIONS_DOCTYPE,
    write: bool = False,
) -> int:
    """Load operations from a JSON array into the workspace store.

    Operations with an id already present are replaced. Dry-run unless write=True.

    Returns an exit code (0 for success, 1 when the file cannot be read).
    """
    if not source.exists():
        console.print(f"[red]Error:[/red] Operations file not found: {source}")
        return 1

    try:
        operations = load_operations_json(source)
    except ValidationError as exc:
        console.print(f"[red]Error:[/red] Could not read operations from {source}: {exc}")
        return 1

    if not write:
        console.print(
            f"Would import {len(operations)} operation(s) into {doctype} "
            f"at {workspace.operations_store_path}"
        )
        console.print("\n[yellow]This was a dry run. Use --write to persist operations.[/]")
        return 0

    store = SqliteOperationStore(workspace.operations_store_path)
    count = store.put_operations(doctype, operations)
    console.print(f"[green]Imported {count} operation(s) into {doctype}[/]")
    return 0
