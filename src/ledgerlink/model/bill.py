from __future__ import annotations

"""
Bill model: a payable or reimbursable document emitted by a biller.

Scope
- Pure Pydantic v2 model; no I/O.
- Bills are inputs to the linker. They are never created or modified by it.

Sign convention
- By default a bill is an expense and its amount magnitude is money spent.
- A bill flagged is_refund represents money received; matchers invert signs.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class Bill(BaseModel):
    """A document to reconcile against bank operations.

    original_amount and original_date are only set on reimbursement bills and
    describe the expense being reimbursed.
    """

    # Documents use camelCase keys (isRefund, originalDate); snake_case is accepted too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    amount: float
    is_refund: bool = False
    date: datetime
    paid_date: Optional[datetime] = None
    type: Optional[str] = None
    vendor: Optional[str] = None
    original_amount: Optional[float] = None
    original_date: Optional[datetime] = None
    file_attachment_id: Optional[str] = Field(
        default=None, description="Opaque attachment reference, not used in matching"
    )

    @computed_field  # type: ignore[misc]
    @property
    def reference_date(self) -> datetime:
        """Date used to compute the candidate window (paid date preferred)."""
        return self.paid_date or self.date


__all__ = ["Bill"]
