from __future__ import annotations

from datetime import datetime
from pathlib import Path

from ledgerlink.cli.command.operations import run
from ledgerlink.cli.command.util import console
from ledgerlink.model.operation import Operation, Reimbursement
from ledgerlink.storage.operation_store import SqliteOperationStore
from ledgerlink.workspace import Workspace


def _workspace(tmp_path: Path) -> Workspace:
    ws = Workspace(root=tmp_path)
    SqliteOperationStore(ws.operations_store_path).put_operations(
        "bank.operations",
        [
            Operation(
                id="o3",
                amount=-30,
                label="Docteur",
                date=datetime(2017, 11, 10),
                reimbursements=[Reimbursement(bill_id="bills:b1", amount=5)],
            ),
            Operation(id="o2", amount=-120, label="Facture SFR", date=datetime(2017, 11, 8)),
        ],
    )
    return ws


def it_should_list_operations(tmp_path: Path):
    ws = _workspace(tmp_path)

    with console.capture() as capture:
        code = run(workspace=ws)

    assert code == 0
    out = capture.get()
    assert "o2" in out
    assert "o3" in out


def it_should_filter_linked_operations(tmp_path: Path):
    ws = _workspace(tmp_path)

    with console.capture() as capture:
        code = run(workspace=ws, linked_only=True)

    assert code == 0
    out = capture.get()
    assert "o3" in out
    assert "Facture SFR" not in out


def it_should_return_1_without_store(tmp_path: Path):
    assert run(workspace=Workspace(root=tmp_path)) == 1
