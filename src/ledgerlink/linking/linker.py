from __future__ import annotations

"""
Bill linker: attach bills to the bank operations that paid or were reimbursed.

For each bill, in input order and one at a time:
  1) fetch the operations dated around the bill,
  2) find the operation that paid it and record the bill on that operation,
  3) for refund bills, find the operation whose expense it reimburses (in the
     same candidate set) and record a reimbursement on it.

Metadata written on matched operations:
bills = ["bills:<bill_id>", ...]
reimbursements = [
    {
        'billId': 'bills:<bill_id>',
        'amount': float,              # amount of the reimbursing bill
        'operationId': str | None,    # operation that paid the reimbursing bill
    },
    ...
]

Idempotent: re-running over the same bills writes nothing new. Storage errors
are not caught here; they abort the run and leave earlier bills linked.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Iterable, Mapping, Optional

from ledgerlink.config import OPERATIONS_DOCTYPE
from ledgerlink.model.bill import Bill
from ledgerlink.model.options import MatchOptions, resolve_match_options
from ledgerlink.storage.operation_store import OperationStore
from ledgerlink.linking.matching import find_matching_operation, find_reimbursed_operation
from ledgerlink.linking.neighborhood import fetch_neighboring_operations
from ledgerlink.linking.updates import add_bill_to_operation, add_reimbursement_to_operation

logger = logging.getLogger(__name__)


class UpdateKind(StrEnum):
    """Kind of write applied to an operation for a bill."""

    BILL = "bill"
    REIMBURSEMENT = "reimbursement"


@dataclass
class LinkResult:
    """Outcome of linking a single bill."""

    bill_id: str
    candidate_count: int = 0
    matching_operation_id: str | None = None
    reimbursed_operation_id: str | None = None
    updates: list[UpdateKind] = field(default_factory=list)

    @property
    def is_linked(self) -> bool:
        return self.matching_operation_id is not None or self.reimbursed_operation_id is not None


def link_bill(
    bill: Bill,
    options: MatchOptions,
    store: OperationStore,
    doctype: str = OPERATIONS_DOCTYPE,
) -> LinkResult:
    """Fetch, match and link a single bill. See module docstring."""
    operations = fetch_neighboring_operations(bill, options, store, doctype)
    result = LinkResult(bill_id=bill.id, candidate_count=len(operations))

    matching_op = find_matching_operation(bill, operations, options)
    if matching_op is not None:
        logger.debug("Bill %s matches operation %s", bill.id, matching_op.id)
        result.matching_operation_id = matching_op.id
        if add_bill_to_operation(bill, matching_op, store, doctype):
            result.updates.append(UpdateKind.BILL)

    reimbursed_op = find_reimbursed_operation(bill, operations, options)
    if reimbursed_op is not None:
        logger.debug("Bill %s reimburses operation %s", bill.id, reimbursed_op.id)
        result.reimbursed_operation_id = reimbursed_op.id
        if add_reimbursement_to_operation(bill, reimbursed_op, matching_op, store, doctype):
            result.updates.append(UpdateKind.REIMBURSEMENT)

    if not result.is_linked:
        logger.debug("No operation found for bill %s among %d candidates", bill.id, len(operations))
    return result


def link_bills_to_operations(
    bills: Iterable[Bill],
    options: MatchOptions,
    store: OperationStore,
    doctype: str = OPERATIONS_DOCTYPE,
) -> list[LinkResult]:
    """Link bills sequentially, in input order.

    Returns one LinkResult per bill.
    """
    return [link_bill(bill, options, store, doctype) for bill in bills]


def link_bank_operations(
    bills: Iterable[Bill],
    doctype: Optional[str],
    fields: Optional[Mapping[str, Any]],
    options: Optional[Mapping[str, Any]],
    store: OperationStore,
) -> list[LinkResult]:
    """Entry point: resolve options then link every bill.

    Args:
        bills: bills to link, processed in order
        doctype: collection holding the operations (defaults to bank.operations)
        fields: user fields; a non-empty 'bank_identifier' overrides identifiers
        options: raw options (identifiers, amount_delta, date_delta,
            min_date_delta, max_date_delta)
        store: storage collaborator

    Raises:
        ConfigurationError: before any bill is processed, if no identifiers
            can be resolved
    """
    match_options = resolve_match_options(fields, options)
    logger.info("Bank identifiers: %s", ", ".join(match_options.identifiers))

    return link_bills_to_operations(bills, match_options, store, doctype or OPERATIONS_DOCTYPE)


__all__ = [
    "LinkResult",
    "UpdateKind",
    "link_bill",
    "link_bills_to_operations",
    "link_bank_operations",
]
