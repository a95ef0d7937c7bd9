from __future__ import annotations

# Command implementations for ledgerlink CLI.
# Each command module exposes a `run(...)` function that performs the action
# and prints to the console. Typer wrappers in ledgerlink.cli.app delegate here.

__all__ = [
    "init",
    "import_operations",
    "link",
    "operations",
]
