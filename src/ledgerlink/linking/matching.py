"""
Pure matching logic (no storage, no printing).

Two matchers run against the same neighborhood of candidate operations:

- find_matching_operation: the operation that paid the bill. Amounts are
  compared within options.amount_delta and the label must contain one of the
  configured identifiers.
- find_reimbursed_operation: for a refund bill, the operation holding the
  original expense. Amount and calendar day must be exactly equal.

Both return the first qualifying candidate in the order given; they never
search for a best match.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from ledgerlink.config import REIMBURSED_TYPES
from ledgerlink.model.bill import Bill
from ledgerlink.model.operation import Operation
from ledgerlink.model.options import MatchOptions


def normalize_amount(amount: float, is_refund: bool) -> float:
    """Put an amount on the polarity of the bill it is compared with.

    A bill is an expense by default; refund bills invert the sign.
    """
    return -amount if is_refund else amount


def _utc(value: datetime) -> datetime:
    # Naive datetimes are already UTC, as in stored timestamps
    return value.astimezone(timezone.utc) if value.tzinfo is not None else value


def equal_dates(d1: Optional[datetime], d2: Optional[datetime]) -> bool:
    """True when both dates fall on the same UTC calendar day (year, month, day)."""
    if d1 is None or d2 is None:
        return False
    d1, d2 = _utc(d1), _utc(d2)
    return (d1.year, d1.month, d1.day) == (d2.year, d2.month, d2.day)


def _label_has_identifier(operation: Operation, identifiers: Sequence[str]) -> bool:
    label = (operation.label or "").lower()
    return any(identifier in label for identifier in identifiers)


def find_matching_operation(
    bill: Bill, operations: Sequence[Operation], options: MatchOptions
) -> Optional[Operation]:
    """Return the first operation that looks like the payment of bill.

    An operation matches when its magnitude is within options.amount_delta of
    the bill's and its label contains one of options.identifiers.
    """
    amount = normalize_amount(abs(bill.amount), bill.is_refund)

    for operation in operations:
        op_amount = normalize_amount(abs(operation.amount), bill.is_refund)
        if abs(op_amount - amount) > options.amount_delta:
            continue
        if _label_has_identifier(operation, options.identifiers):
            return operation
    return None


def find_reimbursed_operation(
    bill: Bill, operations: Sequence[Operation], options: MatchOptions
) -> Optional[Operation]:
    """Return the first operation whose expense bill reimburses, if any.

    Only refund bills of a reimbursable type qualify. A candidate must carry
    exactly the bill's original amount, fall on its original date, and be
    larger than the amount reimbursed.
    """
    if bill.type not in REIMBURSED_TYPES or not bill.is_refund:
        return None
    if bill.original_amount is None:
        return None

    original_amount = normalize_amount(abs(bill.original_amount), bill.is_refund)

    for operation in operations:
        op_amount = normalize_amount(operation.amount, bill.is_refund)
        same_amount = original_amount == operation.amount
        same_date = equal_dates(operation.date, bill.original_date)
        reimbursed_less_than_expense = bill.amount < op_amount
        if same_amount and same_date and reimbursed_less_than_expense:
            return operation
    return None


__all__ = [
    "normalize_amount",
    "equal_dates",
    "find_matching_operation",
    "find_reimbursed_operation",
]
