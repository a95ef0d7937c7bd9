from __future__ import annotations

from typing import Any, Mapping, Sequence

import pytest

from ledgerlink.model.operation import Operation
from ledgerlink.storage.operation_store import Index, OperationStore


class RecordingStore(OperationStore):
    """In-memory store that returns a fixed candidate list and records calls."""

    def __init__(self, operations: Sequence[Operation] = ()):
        self.operations = list(operations)
        self.index_calls: list[tuple[str, list[str]]] = []
        self.queries: list[tuple[Index, Mapping[str, Any]]] = []
        self.updates: list[tuple[str, str, dict]] = []

    def define_index(self, doctype: str, fields: Sequence[str]) -> Index:
        self.index_calls.append((doctype, list(fields)))
        return Index(doctype=doctype, fields=tuple(fields), name="index")

    def query(self, index: Index, selector: Mapping[str, Any]) -> list[Operation]:
        self.queries.append((index, selector))
        return self.operations

    def update_attributes(
        self, doctype: str, operation_id: str, attributes: Mapping[str, Any]
    ) -> None:
        self.updates.append((doctype, operation_id, dict(attributes)))


@pytest.fixture
def recording_store():
    """Factory building a RecordingStore over the given operations."""
    return RecordingStore
