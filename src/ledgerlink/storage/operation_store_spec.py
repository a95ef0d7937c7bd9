"""
Tests for the SQLite operation store.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

import pytest

from ledgerlink.model.operation import Operation, Reimbursement
from ledgerlink.storage.operation_store import DryRunOperationStore, SqliteOperationStore

DOCTYPE = "bank.operations"


class DescribeSqliteOperationStore:
    """Test SqliteOperationStore functionality."""

    @pytest.fixture
    def store(self, tmp_path: Path):
        return SqliteOperationStore(tmp_path / "nested" / "operations.db")

    @pytest.fixture
    def populated(self, store):
        store.put_operations(
            DOCTYPE,
            [
                Operation(id="o3", amount=-30, label="Facture SFR", date=datetime(2017, 11, 7)),
                Operation(id="o1", amount=-20, label="Train", date=datetime(2017, 11, 2)),
                Operation(id="o2", amount=-120, label="Facture SFR", date=datetime(2017, 11, 27)),
                Operation(id="o4", amount=-8, label="Sans date"),
            ],
        )
        store.put_operations(
            "other.operations",
            [Operation(id="x1", amount=-1, label="Other", date=datetime(2017, 11, 10))],
        )
        return store

    def it_should_create_the_database_file(self, store):
        assert store.db_path.exists()
        assert store.all_operations(DOCTYPE) == []

    def it_should_define_indexes_idempotently(self, store):
        first = store.define_index(DOCTYPE, ["date"])
        second = store.define_index(DOCTYPE, ["date"])

        assert first == second
        assert first.fields == ("date",)
        conn = sqlite3.connect(store.db_path)
        try:
            names = [
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'index'")
            ]
        finally:
            conn.close()
        assert first.name in names

    def it_should_reject_invalid_index_fields(self, store):
        with pytest.raises(ValueError):
            store.define_index(DOCTYPE, ["date; DROP TABLE documents"])
        with pytest.raises(ValueError):
            store.define_index(DOCTYPE, [])

    def it_should_query_with_exclusive_bounds(self, populated):
        index = populated.define_index(DOCTYPE, ["date"])

        ops = populated.query(
            index,
            {"date": {"$gt": "2017-11-02T00:00:00.000Z", "$lt": "2017-11-27T00:00:00.000Z"}},
        )

        assert [op.id for op in ops] == ["o3"]

    def it_should_query_with_inclusive_bounds(self, populated):
        index = populated.define_index(DOCTYPE, ["date"])

        ops = populated.query(
            index,
            {"date": {"$gte": "2017-11-02T00:00:00.000Z", "$lte": "2017-11-27T00:00:00.000Z"}},
        )

        assert [op.id for op in ops] == ["o1", "o3", "o2"]

    def it_should_scope_queries_to_the_index_doctype(self, populated):
        index = populated.define_index("other.operations", ["date"])

        ops = populated.query(index, {"date": {"$gt": "2017-01-01T00:00:00.000Z"}})

        assert [op.id for op in ops] == ["x1"]

    def it_should_reject_fields_outside_the_index(self, populated):
        index = populated.define_index(DOCTYPE, ["date"])
        with pytest.raises(ValueError):
            populated.query(index, {"label": "Train"})

    def it_should_reject_unknown_operators(self, populated):
        index = populated.define_index(DOCTYPE, ["date"])
        with pytest.raises(ValueError):
            populated.query(index, {"date": {"$regex": "2017"}})

    def it_should_round_trip_operation_dates_as_utc(self, populated):
        op = populated.get_operation(DOCTYPE, "o3")

        assert op.date == datetime(2017, 11, 7, tzinfo=timezone.utc)

    def it_should_merge_attributes_on_update(self, populated):
        populated.update_attributes(DOCTYPE, "o3", {"bills": ["bills:b1"]})
        populated.update_attributes(
            DOCTYPE,
            "o3",
            {"reimbursements": [{"billId": "bills:b2", "amount": 5, "operationId": None}]},
        )

        op = populated.get_operation(DOCTYPE, "o3")
        assert op.bills == ["bills:b1"]
        assert op.reimbursements == [Reimbursement(bill_id="bills:b2", amount=5)]
        assert op.label == "Facture SFR"
        assert op.amount == -30

    def it_should_store_documents_with_camel_case_keys(self, store):
        store.put_operations(
            DOCTYPE,
            [
                Operation(
                    id="o1",
                    amount=-30,
                    reimbursements=[Reimbursement(bill_id="bills:b2", amount=5, operation_id="o9")],
                )
            ],
        )

        conn = sqlite3.connect(store.db_path)
        try:
            (data,) = conn.execute("SELECT data FROM documents WHERE doc_id = 'o1'").fetchone()
        finally:
            conn.close()
        assert json.loads(data)["reimbursements"] == [
            {"billId": "bills:b2", "amount": 5.0, "operationId": "o9"}
        ]

    def it_should_raise_for_unknown_operations(self, populated):
        with pytest.raises(KeyError):
            populated.update_attributes(DOCTYPE, "missing", {"bills": []})

    def it_should_list_operations_by_date_with_undated_last(self, populated):
        assert [op.id for op in populated.all_operations(DOCTYPE)] == ["o1", "o3", "o2", "o4"]

    def it_should_replace_operations_with_the_same_id(self, populated):
        populated.put_operations(DOCTYPE, [Operation(id="o1", amount=-21, label="Train")])

        assert populated.get_operation(DOCTYPE, "o1").amount == -21
        assert len(populated.all_operations(DOCTYPE)) == 4


class DescribeDryRunOperationStore:
    def it_should_record_updates_without_persisting(self, tmp_path: Path):
        backing = SqliteOperationStore(tmp_path / "operations.db")
        backing.put_operations(DOCTYPE, [Operation(id="o1", amount=-1, date=datetime(2017, 11, 7))])
        store = DryRunOperationStore(backing)

        index = store.define_index(DOCTYPE, ["date"])
        ops = store.query(index, {"date": {"$gt": "2017-11-01T00:00:00.000Z"}})
        store.update_attributes(DOCTYPE, "o1", {"bills": ["bills:b1"]})

        assert [op.id for op in ops] == ["o1"]
        assert store.pending == [(DOCTYPE, "o1", {"bills": ["bills:b1"]})]
        assert backing.get_operation(DOCTYPE, "o1").bills == []

    def it_should_show_recorded_updates_in_later_queries(self, tmp_path: Path):
        backing = SqliteOperationStore(tmp_path / "operations.db")
        backing.put_operations(
            DOCTYPE,
            [
                Operation(id="o1", amount=-30, date=datetime(2017, 11, 7)),
                Operation(id="o2", amount=-20, date=datetime(2017, 11, 8)),
            ],
        )
        store = DryRunOperationStore(backing)
        index = store.define_index(DOCTYPE, ["date"])

        store.update_attributes(DOCTYPE, "o1", {"bills": ["bills:b1"]})
        store.update_attributes(
            DOCTYPE, "o1", {"reimbursements": [{"billId": "bills:b2", "amount": 5, "operationId": None}]}
        )
        ops = store.query(index, {"date": {"$gt": "2017-11-01T00:00:00.000Z"}})

        assert ops[0].bills == ["bills:b1"]
        assert ops[0].reimbursements == [Reimbursement(bill_id="bills:b2", amount=5)]
        assert ops[1].bills == []
        assert backing.get_operation(DOCTYPE, "o1").bills == []
