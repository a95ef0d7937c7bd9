"""Initialize a new ledgerlink workspace directory."""

from __future__ import annotations

from ledgerlink.workspace import Workspace

from .util import console

_STARTER_LINKING_YML = """\
# Linking configuration
# Identifiers are substrings looked up (case-insensitively) in operation labels
# to recognize a biller, e.g. the name of your phone operator or health insurer.
#
# Example:
#   identifiers:
#     - sfr
#     - harmonie mutuelle
#   amount_delta: 0.001   # tolerated amount difference for a payment match
#   date_delta: 15        # days around the bill date to search
#   min_date_delta: 10    # days before (defaults to date_delta)
#   max_date_delta: 15    # days after (defaults to date_delta)

identifiers: []
"""


def run(*, workspace: Workspace) -> int:
    """Initialize a new ledgerlink workspace with required directories and starter config.

    Skips anything that already exists (safe to run on an existing workspace).

    Args:
        workspace: Workspace to initialize

    Returns:
        Exit code (0 = success)
    """
    root = workspace.root
    console.print(f"[bold cyan]Initializing workspace:[/] {root}\n")

    created = []
    skipped = []

    for directory in [
        workspace.operations_store_path.parent,  # data/
        workspace.bills_dir,  # bills/
        workspace.linking_config.parent,  # config/
    ]:
        if directory.exists():
            skipped.append(str(directory.relative_to(root)) + "/")
        else:
            directory.mkdir(parents=True, exist_ok=True)
            created.append(str(directory.relative_to(root)) + "/")

    config_path = workspace.linking_config
    if config_path.exists():
        skipped.append(str(config_path.relative_to(root)))
    else:
        config_path.write_text(_STARTER_LINKING_YML, encoding="utf-8")
        created.append(str(config_path.relative_to(root)))

    if created:
        console.print("[green]Created:[/]")
        for c in created:
            console.print(f"  {c}")

    if skipped:
        console.print("[dim]Already exists (skipped):[/dim]")
        for s in skipped:
            console.print(f"  [dim]{s}[/dim]")

    if not created:
        console.print("[green]Workspace already fully initialized.[/]")
    else:
        console.print(f"\n[green]Workspace ready at {root}[/]")
        console.print("\n[dim]Next steps:[/dim]")
        console.print("  1. Edit config/linking.yml to list your biller identifiers")
        console.print("  2. Run: ledgerlink import-operations operations.json --write")
        console.print("  3. Run: ledgerlink link bills/bills.json --write")

    return 0
