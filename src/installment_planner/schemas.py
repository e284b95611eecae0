"""Wire models for requesting installment schedules.

Field names follow the JSON convention of the callers (``startDate``,
``totalAmount``, ``wasAdjusted``); snake_case names are accepted too.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from installment_planner.allocation import (
    CENT,
    InstallmentSpec,
    RemainderPolicy,
    allocate,
    to_decimal,
)
from installment_planner.calendar_math import CalendarDate


class InstallmentRequest(BaseModel):
    """Installment plan request payload."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        frozen=True,
    )

    start_date: CalendarDate = Field(..., alias="startDate")
    count: StrictInt = Field(..., description="Number of monthly installments")
    total_amount: Decimal = Field(default=Decimal("0"), alias="totalAmount")
    description: str = Field(default="")

    @field_validator("start_date", mode="before")
    @classmethod
    def _parse_start_date(cls, value: Any) -> CalendarDate:
        return CalendarDate.coerce(value)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> Decimal:
        return to_decimal(value)

    def to_spec(self) -> InstallmentSpec:
        return InstallmentSpec(
            start_date=self.start_date,
            count=self.count,
            total_amount=self.total_amount,
            description=self.description,
        )


class InstallmentRow(BaseModel):
    """One installment as returned to callers."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    index: int
    date: str
    amount: Decimal
    was_adjusted: bool = Field(..., alias="wasAdjusted")
    anchor_day: int = Field(..., alias="anchorDay")


def plan_rows(
    request: InstallmentRequest | dict[str, Any],
    *,
    policy: RemainderPolicy | str = RemainderPolicy.NONE,
    quantum: Decimal = CENT,
) -> list[InstallmentRow]:
    """Compute the installment rows for a request payload."""
    if not isinstance(request, InstallmentRequest):
        request = InstallmentRequest.model_validate(request)
    return [
        InstallmentRow(
            index=record.index,
            date=record.due_date.isoformat(),
            amount=record.amount,
            was_adjusted=record.was_adjusted,
            anchor_day=record.anchor_day,
        )
        for record in allocate(request.to_spec(), policy=policy, quantum=quantum)
    ]
