"""
Linking core for ledgerlink.

This package holds the decision logic: which operation paid a bill, which
operation a refund bill reimburses, and how those links are recorded.
Storage is injected (see ledgerlink.storage.operation_store); nothing here
imports Rich, Typer or touches files directly.
"""

from ledgerlink.linking.matching import (
    equal_dates,
    find_matching_operation,
    find_reimbursed_operation,
    normalize_amount,
)
from ledgerlink.linking.neighborhood import date_window, fetch_neighboring_operations
from ledgerlink.linking.updates import (
    add_bill_to_operation,
    add_reimbursement_to_operation,
    bill_reference,
)
from ledgerlink.linking.linker import (
    LinkResult,
    UpdateKind,
    link_bank_operations,
    link_bill,
    link_bills_to_operations,
)

__all__ = [
    "normalize_amount",
    "equal_dates",
    "find_matching_operation",
    "find_reimbursed_operation",
    "date_window",
    "fetch_neighboring_operations",
    "bill_reference",
    "add_bill_to_operation",
    "add_reimbursement_to_operation",
    "LinkResult",
    "UpdateKind",
    "link_bill",
    "link_bills_to_operations",
    "link_bank_operations",
]
