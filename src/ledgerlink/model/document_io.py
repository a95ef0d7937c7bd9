from __future__ import annotations

"""
Document I/O: bills and operations from JSON, linking config from YAML.

Functions for reading input documents and config/linking.yml. Parsing is
strict: malformed JSON or documents that fail validation raise, and callers
decide how to report the failure.

Privacy
- All operations are local file I/O only
- No network access
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from ledgerlink.model.bill import Bill
from ledgerlink.model.operation import Operation

_BILLS = TypeAdapter(List[Bill])
_OPERATIONS = TypeAdapter(List[Operation])


class LinkingConfig(BaseModel):
    """Shape of config/linking.yml. Every key is optional."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    identifiers: List[str] = Field(default_factory=list)
    amount_delta: Optional[float] = None
    date_delta: Optional[int] = None
    min_date_delta: Optional[int] = None
    max_date_delta: Optional[int] = None

    def as_options(self) -> dict:
        """Return the raw options mapping understood by resolve_match_options."""
        data = self.model_dump(exclude_none=True)
        if not data.get("identifiers"):
            data.pop("identifiers", None)
        return data


def load_bills_json(path: Path) -> List[Bill]:
    """Load a JSON array of bills.

    Raises:
        FileNotFoundError: if the file does not exist
        pydantic.ValidationError: if the content is not a valid list of bills
    """
    return _BILLS.validate_json(path.read_bytes())


def load_operations_json(path: Path) -> List[Operation]:
    """Load a JSON array of operations (same errors as load_bills_json)."""
    return _OPERATIONS.validate_json(path.read_bytes())


def load_linking_config(path: Path) -> LinkingConfig:
    """Load linking config from YAML (safe loader).

    Returns an empty LinkingConfig when the file is missing.

    Args:
        path: Path to linking.yml file

    Raises:
        yaml.YAMLError: if the file is not valid YAML
        pydantic.ValidationError: if values have the wrong types
    """
    if not path.exists():
        return LinkingConfig()

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return LinkingConfig.model_validate(data)


def save_linking_config(path: Path, config: LinkingConfig) -> None:
    """Save linking config to YAML, creating parent directories if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(exclude_none=True, mode="json")

    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


__all__ = [
    "LinkingConfig",
    "load_bills_json",
    "load_operations_json",
    "load_linking_config",
    "save_linking_config",
]
