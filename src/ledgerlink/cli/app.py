from __future__ import annotations

"""
ledgerlink CLI (Typer + Rich)

Link bills to the bank operations that paid them, and refund bills to the
operations they reimburse.

All paths are resolved from a single workspace root:
  --data-dir / LEDGERLINK_DATA env var / current working directory
"""

from pathlib import Path
from typing import Optional

import typer

from ledgerlink.config import OPERATIONS_DOCTYPE
from ledgerlink.workspace import Workspace

HELP_WRITE = "Persist changes (default: dry-run)"
HELP_DOCTYPE = "Collection holding the operations"

APP_HELP = "ledgerlink CLI (local-only)"

app = typer.Typer(no_args_is_help=True, add_completion=False, help=APP_HELP)


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        envvar="LEDGERLINK_DATA",
        help="Workspace root directory (default: current directory)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """ledgerlink CLI: all paths resolved from a single workspace root."""
    from ledgerlink.cli.command.util import configure_logging

    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["workspace"] = Workspace.resolve(data_dir)


def _ws(ctx: typer.Context) -> Workspace:
    return ctx.obj["workspace"]


@app.command()
def init(ctx: typer.Context):
    """Initialize a new workspace with required directories and starter config.

    Safe to run on an existing workspace; skips anything that already exists.

    Examples:
      ledgerlink --data-dir ~/bills init
      ledgerlink init
    """
    from ledgerlink.cli.command import init as cmd_init

    code = cmd_init.run(workspace=_ws(ctx))
    raise typer.Exit(code=code)


@app.command(name="import-operations")
def import_operations(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="JSON file holding an array of operations"),
    doctype: str = typer.Option(OPERATIONS_DOCTYPE, "--doctype", help=HELP_DOCTYPE),
    write: bool = typer.Option(False, "--write", help=HELP_WRITE),
):
    """Import bank operations from a JSON file into the workspace store.

    Safety: dry-run by default. Use --write to persist operations.
    """
    from ledgerlink.cli.command import import_operations as cmd_import

    code = cmd_import.run(source=source, workspace=_ws(ctx), doctype=doctype, write=write)
    raise typer.Exit(code=code)


@app.command()
def link(
    ctx: typer.Context,
    bills_file: Path = typer.Argument(..., help="JSON file holding an array of bills"),
    identifier: Optional[str] = typer.Option(None, "--identifier", "-i", help="Bank label identifier overriding config/linking.yml"),
    amount_delta: Optional[float] = typer.Option(None, "--amount-delta", min=0.0, help="Tolerated amount difference for payment matches"),
    date_delta: Optional[int] = typer.Option(None, "--date-delta", min=0, help="Days around the bill date to search"),
    min_date_delta: Optional[int] = typer.Option(None, "--min-date-delta", min=0, help="Days before the bill date (defaults to --date-delta)"),
    max_date_delta: Optional[int] = typer.Option(None, "--max-date-delta", min=0, help="Days after the bill date (defaults to --date-delta)"),
    doctype: str = typer.Option(OPERATIONS_DOCTYPE, "--doctype", help=HELP_DOCTYPE),
    write: bool = typer.Option(False, "--write", help=HELP_WRITE),
):
    """Link bills to the operations that paid them and the expenses they reimburse.

    Examples:
      ledgerlink link bills/sfr.json
      ledgerlink link bills/mutuelle.json --identifier "harmonie mutuelle" --write
      ledgerlink link bills/sfr.json --min-date-delta 10 --max-date-delta 15

    Safety: dry-run by default. Use --write to persist links.
    """
    from ledgerlink.cli.command import link as cmd_link

    code = cmd_link.run(
        bills_file=bills_file,
        workspace=_ws(ctx),
        identifier=identifier,
        amount_delta=amount_delta,
        date_delta=date_delta,
        min_date_delta=min_date_delta,
        max_date_delta=max_date_delta,
        doctype=doctype,
        write=write,
    )
    raise typer.Exit(code=code)


@app.command()
def operations(
    ctx: typer.Context,
    doctype: str = typer.Option(OPERATIONS_DOCTYPE, "--doctype", help=HELP_DOCTYPE),
    linked_only: bool = typer.Option(False, "--linked-only", help="Only show operations with linked bills"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Max number of rows to show"),
):
    """Show stored operations with their linked bills and reimbursements as a Rich table."""
    from ledgerlink.cli.command import operations as cmd_operations

    code = cmd_operations.run(
        workspace=_ws(ctx), doctype=doctype, linked_only=linked_only, limit=limit
    )
    raise typer.Exit(code=code)


if __name__ == "__main__":
    app()  # pragma: no cover
