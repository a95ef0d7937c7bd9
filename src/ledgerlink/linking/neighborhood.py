from __future__ import annotations

"""
Neighborhood fetcher: candidate operations around a bill's date.

The window is asymmetric: options.min_date_delta days before and
options.max_date_delta days after the bill's reference date (paid date when
present). Both bounds are exclusive and expressed as UTC midnight timestamps.
"""

from datetime import timedelta, timezone

from ledgerlink.config import OPERATIONS_DOCTYPE
from ledgerlink.model.bill import Bill
from ledgerlink.model.operation import Operation
from ledgerlink.model.options import MatchOptions
from ledgerlink.storage.operation_store import OperationStore


def _midnight(day) -> str:
    return f"{day.isoformat()}T00:00:00.000Z"


def date_window(bill: Bill, options: MatchOptions) -> tuple[str, str]:
    """Return (start, end) exclusive bounds for the bill's neighborhood."""
    reference = bill.reference_date
    if reference.tzinfo is not None:
        reference = reference.astimezone(timezone.utc)
    day = reference.date()
    start = day - timedelta(days=options.min_date_delta)
    end = day + timedelta(days=options.max_date_delta)
    return _midnight(start), _midnight(end)


def fetch_neighboring_operations(
    bill: Bill,
    options: MatchOptions,
    store: OperationStore,
    doctype: str = OPERATIONS_DOCTYPE,
) -> list[Operation]:
    """Query the store for operations dated inside the bill's window.

    Results are returned in the store's order.
    """
    start, end = date_window(bill, options)
    index = store.define_index(doctype, ["date"])
    return store.query(index, {"date": {"$gt": start, "$lt": end}})


__all__ = ["date_window", "fetch_neighboring_operations"]
