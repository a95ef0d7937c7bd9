from __future__ import annotations

"""
Update applier: append bill references to operations, idempotently.

Each function checks the operation's current state first and returns False
without touching the store when the bill is already referenced. Otherwise it
appends the reference, persists the full updated collection through
update_attributes (last writer wins) and returns True. The in-memory
operation is updated as well, so repeated calls on the same object are
no-ops.
"""

import logging
from typing import Optional

from ledgerlink.config import BILLS_DOCTYPE, OPERATIONS_DOCTYPE
from ledgerlink.model.bill import Bill
from ledgerlink.model.operation import Operation, Reimbursement
from ledgerlink.storage.operation_store import OperationStore

logger = logging.getLogger(__name__)


def bill_reference(bill: Bill) -> str:
    """Namespaced reference stored on operations, e.g. 'bills:b1'."""
    return f"{BILLS_DOCTYPE}:{bill.id}"


def add_bill_to_operation(
    bill: Bill,
    operation: Operation,
    store: OperationStore,
    doctype: str = OPERATIONS_DOCTYPE,
) -> bool:
    """Record that bill was paid by operation.

    Returns True if the store was updated.
    """
    ref = bill_reference(bill)
    # Older records may hold the raw id
    if operation.references_bill(ref, bill.id):
        return False

    bills = [*operation.bills, ref]
    store.update_attributes(doctype, operation.id, {"bills": bills})
    operation.bills = bills
    logger.info("Linked bill %s to operation %s", bill.id, operation.id)
    return True


def add_reimbursement_to_operation(
    bill: Bill,
    operation: Operation,
    matching_operation: Optional[Operation],
    store: OperationStore,
    doctype: str = OPERATIONS_DOCTYPE,
) -> bool:
    """Record that bill reimburses (part of) operation.

    matching_operation is the operation that paid the reimbursing bill, if the
    expense matcher found one; its id is stored on the record.

    Returns True if the store was updated.
    """
    ref = bill_reference(bill)
    if operation.has_reimbursement_for(ref, bill.id):
        return False

    reimbursements = [
        *operation.reimbursements,
        Reimbursement(
            bill_id=ref,
            amount=bill.amount,
            operation_id=matching_operation.id if matching_operation else None,
        ),
    ]
    store.update_attributes(
        doctype,
        operation.id,
        {"reimbursements": [r.model_dump(by_alias=True) for r in reimbursements]},
    )
    operation.reimbursements = reimbursements
    logger.info("Linked reimbursement bill %s to operation %s", bill.id, operation.id)
    return True


__all__ = ["bill_reference", "add_bill_to_operation", "add_reimbursement_to_operation"]
