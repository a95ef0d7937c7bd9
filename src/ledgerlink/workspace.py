"""
Workspace - centralized data path resolution for ledgerlink.

A Workspace represents the root directory containing the operations store,
bill documents and linking configuration. All paths are computed relative
to this root.

Resolution priority:
1. Explicit path (--data-dir CLI option)
2. LEDGERLINK_DATA environment variable
3. Current working directory
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Workspace:
    """Root directory for all ledgerlink data paths."""

    root: Path

    @classmethod
    def resolve(cls, explicit: Path | None = None) -> Workspace:
        """Resolve workspace root from explicit path, env var, or CWD.

        Args:
            explicit: Explicitly provided path (highest priority)

        Returns:
            Workspace with resolved root
        """
        if explicit is not None:
            return cls(root=explicit)
        env = os.environ.get("LEDGERLINK_DATA")
        if env:
            return cls(root=Path(env))
        return cls(root=Path.cwd())

    @property
    def operations_store_path(self) -> Path:
        return self.root / "data" / "operations.db"

    @property
    def bills_dir(self) -> Path:
        return self.root / "bills"

    @property
    def linking_config(self) -> Path:
        return self.root / "config" / "linking.yml"


__all__ = ["Workspace"]
