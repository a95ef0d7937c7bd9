"""
Operation store: the storage collaborator used by the linker.

The linker only needs three calls: declare an index, run a range query
against it, and merge attributes into a stored operation. OperationStore
defines that contract; SqliteOperationStore implements it over a local
SQLite document table.

Documents are stored as JSON in a single `documents` table keyed by
(doctype, doc_id). Indexes are SQLite expression indexes on
json_extract(data, '$.<field>'), so range queries on a declared field use
the index. Date values compare as strings, which is why Operation serializes
dates with a fixed millisecond-precision UTC format.

Privacy: the store is a local SQLite file. No network I/O.
"""

from __future__ import annotations

import json
import re
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from ledgerlink.model.operation import Operation

# Mango-style selector operators supported by query()
SELECTOR_OPERATORS = {
    "$gt": ">",
    "$gte": ">=",
    "$lt": "<",
    "$lte": "<=",
    "$eq": "=",
}

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Index:
    """Handle returned by define_index and passed back to query."""

    doctype: str
    fields: tuple[str, ...]
    name: str


class OperationStore(ABC):
    """Contract of the storage collaborator.

    Implementations may block while talking to their backend; the linker
    calls them sequentially and never concurrently.
    """

    @abstractmethod
    def define_index(self, doctype: str, fields: Sequence[str]) -> Index:
        """Declare an index on fields of doctype. Must be idempotent."""

    @abstractmethod
    def query(self, index: Index, selector: Mapping[str, Any]) -> list[Operation]:
        """Return operations matching selector, e.g.
        {"date": {"$gt": "2017-11-02T00:00:00.000Z", "$lt": "2017-11-27T00:00:00.000Z"}}
        """

    @abstractmethod
    def update_attributes(
        self, doctype: str, operation_id: str, attributes: Mapping[str, Any]
    ) -> None:
        """Merge attributes into the stored operation (last writer wins)."""


def _index_name(doctype: str, fields: Sequence[str]) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "_", doctype).strip("_")
    return f"idx_{slug}_{'_'.join(fields)}"


def _json_path(field: str) -> str:
    return f"json_extract(data, '$.{field}')"


class SqliteOperationStore(OperationStore):
    """OperationStore backed by a SQLite file.

    Usage:
        store = SqliteOperationStore("data/operations.db")
        store.put_operations("bank.operations", operations)
        index = store.define_index("bank.operations", ["date"])
        ops = store.query(index, {"date": {"$gt": start, "$lt": end}})
    """

    def __init__(self, db_path: str | Path):
        """Initialize the store, creating the database file if needed.

        Args:
            db_path: Path to SQLite database file.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self) -> None:
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    doctype TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    data TEXT NOT NULL,
                    updated_at TEXT DEFAULT (datetime('now')),
                    PRIMARY KEY (doctype, doc_id)
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def define_index(self, doctype: str, fields: Sequence[str]) -> Index:
        """Create an expression index on the given JSON fields.

        Raises:
            ValueError: if fields is empty or contains an invalid field name
        """
        fields = tuple(fields)
        if not fields:
            raise ValueError("An index needs at least one field")
        for field in fields:
            if not _FIELD_NAME.match(field):
                raise ValueError(f"Invalid index field name: {field!r}")

        index = Index(doctype=doctype, fields=fields, name=_index_name(doctype, fields))
        columns = ", ".join(["doctype", *(_json_path(f) for f in fields)])

        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(f"CREATE INDEX IF NOT EXISTS {index.name} ON documents({columns})")
            conn.commit()
        finally:
            conn.close()
        return index

    def query(self, index: Index, selector: Mapping[str, Any]) -> list[Operation]:
        """Run a range query over indexed fields, ordered by those fields.

        Raises:
            ValueError: if selector uses a field outside the index or an
                unsupported operator
        """
        clauses = ["doctype = ?"]
        params: list[Any] = [index.doctype]
        for field, condition in selector.items():
            if field not in index.fields:
                raise ValueError(f"Field {field!r} is not covered by index {index.name}")
            if not isinstance(condition, Mapping):
                condition = {"$eq": condition}
            for op, value in condition.items():
                sql_op = SELECTOR_OPERATORS.get(op)
                if sql_op is None:
                    raise ValueError(f"Unsupported selector operator: {op}")
                clauses.append(f"{_json_path(field)} {sql_op} ?")
                params.append(value)

        order_by = ", ".join(_json_path(f) for f in index.fields)
        sql = (
            f"SELECT data FROM documents WHERE {' AND '.join(clauses)} "
            f"ORDER BY {order_by}, rowid"
        )

        conn = sqlite3.connect(self.db_path)
        try:
            rows = conn.execute(sql, params).fetchall()
        finally:
            conn.close()
        return [Operation.model_validate_json(data) for (data,) in rows]

    def update_attributes(
        self, doctype: str, operation_id: str, attributes: Mapping[str, Any]
    ) -> None:
        """Merge attributes into the stored JSON document.

        Raises:
            KeyError: if no operation with that id exists under doctype
        """
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT data FROM documents WHERE doctype = ? AND doc_id = ?",
                (doctype, operation_id),
            )
            row = cursor.fetchone()
            if row is None:
                raise KeyError(f"Unknown operation {operation_id!r} in {doctype}")

            data = json.loads(row[0])
            data.update(attributes)
            cursor.execute(
                """
                UPDATE documents
                SET data = ?, updated_at = datetime('now')
                WHERE doctype = ? AND doc_id = ?
            """,
                (json.dumps(data), doctype, operation_id),
            )
            conn.commit()
        finally:
            conn.close()

    def put_operations(self, doctype: str, operations: Sequence[Operation]) -> int:
        """Insert or replace operations. Returns the number written."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.executemany(
                """
                INSERT OR REPLACE INTO documents (doctype, doc_id, data)
                VALUES (?, ?, ?)
            """,
                [(doctype, op.id, op.model_dump_json(by_alias=True)) for op in operations],
            )
            conn.commit()
        finally:
            conn.close()
        return len(operations)

    def get_operation(self, doctype: str, operation_id: str) -> Operation | None:
        conn = sqlite3.connect(self.db_path)
        try:
            row = conn.execute(
                "SELECT data FROM documents WHERE doctype = ? AND doc_id = ?",
                (doctype, operation_id),
            ).fetchone()
        finally:
            conn.close()
        return Operation.model_validate_json(row[0]) if row else None

    def all_operations(self, doctype: str) -> list[Operation]:
        """All operations of a doctype ordered by date (undated last)."""
        conn = sqlite3.connect(self.db_path)
        try:
            rows = conn.execute(
                f"""
                SELECT data FROM documents
                WHERE doctype = ?
                ORDER BY {_json_path('date')} IS NULL, {_json_path('date')}, rowid
            """,
                (doctype,),
            ).fetchall()
        finally:
            conn.close()
        return [Operation.model_validate_json(data) for (data,) in rows]



class DryRunOperationStore(OperationStore):
    """Wraps a store: updates are recorded instead of persisted.

    Used by the CLI for its default dry-run mode; `pending` lists the
    (doctype, operation_id, attributes) writes that would have happened.
    Recorded writes are merged into later query results, so a preview over
    several bills sees the links made earlier in the same run.
    """

    def __init__(self, store: OperationStore):
        self.store = store
        self.pending: list[tuple[str, str, dict]] = []
        self._overlay: dict[tuple[str, str], dict[str, Any]] = {}

    def define_index(self, doctype: str, fields: Sequence[str]) -> Index:
        return self.store.define_index(doctype, fields)

    def query(self, index: Index, selector: Mapping[str, Any]) -> list[Operation]:
        operations = self.store.query(index, selector)
        return [self._apply_pending(index.doctype, op) for op in operations]

    def update_attributes(
        self, doctype: str, operation_id: str, attributes: Mapping[str, Any]
    ) -> None:
        self.pending.append((doctype, operation_id, dict(attributes)))
        self._overlay.setdefault((doctype, operation_id), {}).update(attributes)

    def _apply_pending(self, doctype: str, operation: Operation) -> Operation:
        overlay = self._overlay.get((doctype, operation.id))
        if not overlay:
            return operation
        data = operation.model_dump(by_alias=True)
        data.update(overlay)
        return Operation.model_validate(data)


__all__ = [
    "Index",
    "OperationStore",
    "SqliteOperationStore",
    "DryRunOperationStore",
    "SELECTOR_OPERATORS",
]

