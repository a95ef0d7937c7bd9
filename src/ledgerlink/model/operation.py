from __future__ import annotations

"""
Operation model: a banking transaction owned by the ledger store.

The linker only ever appends to `bills` and `reimbursements`; every other
field is read-only from its perspective.

Stored documents use camelCase keys (billId, operationId), so dump with
by_alias=True. Dates are serialized as ISO-8601 UTC timestamps with
millisecond precision (e.g. 2017-11-10T00:00:00.000Z) so that stored values
compare correctly as strings against the neighborhood window bounds. Naive
datetimes are UTC.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC timestamp with milliseconds."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class Reimbursement(BaseModel):
    """Record stating that a bill reimburses (part of) an operation.

    operation_id points at the operation that paid the reimbursing bill, when
    one was found during the same run.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    bill_id: str
    amount: float
    operation_id: Optional[str] = None


class Operation(BaseModel):
    """A ledger entry; negative amounts are money out."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    amount: float
    label: str = ""
    date: Optional[datetime] = None
    bills: List[str] = Field(default_factory=list)
    reimbursements: List[Reimbursement] = Field(default_factory=list)

    @field_serializer("date")
    def _serialize_date(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value) if value is not None else None

    def references_bill(self, *refs: str) -> bool:
        return any(ref in self.bills for ref in refs)

    def has_reimbursement_for(self, *refs: str) -> bool:
        return any(r.bill_id in refs for r in self.reimbursements)


__all__ = ["Operation", "Reimbursement", "format_timestamp"]
