"""Equal-split allocation of a total across monthly installments."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import (
    ROUND_HALF_UP,
    Context,
    Decimal,
    InvalidOperation,
    getcontext,
    localcontext,
)
from enum import Enum
from typing import Any

from installment_planner.calendar_math import (
    CalendarDate,
    InvalidArgumentError,
    ensure_int,
)
from installment_planner.schedule import generate_schedule

CENT = Decimal("0.01")
MAX_AMOUNT_DIGITS = 1000
DEFAULT_DESCRIPTION_TEMPLATE = "{description} ({index}/{count})"


class RemainderPolicy(str, Enum):
    """What to do with the rounding remainder of an uneven split."""

    NONE = "none"  # every installment gets the rounded share
    LAST = "last"  # the final installment absorbs the difference


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a monetary value to ``Decimal`` without binary float noise."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"invalid amount {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidArgumentError(f"invalid amount {value!r}") from exc
    if not amount.is_finite():
        raise InvalidArgumentError(f"amount must be finite, got {value!r}")
    return amount


def _money_context(amount: Decimal, quantum: Decimal) -> Context:
    """Decimal context wide enough to hold ``amount`` at ``quantum`` precision."""
    digits = max(amount.adjusted(), 0) + 1 + max(-quantum.as_tuple().exponent, 0) + 2
    if digits > MAX_AMOUNT_DIGITS:
        raise InvalidArgumentError(f"amount {amount} is too large")
    context = getcontext().copy()
    context.prec = max(context.prec, digits)
    return context


def quantize_amount(
    value: Decimal | int | float | str, quantum: Decimal = CENT
) -> Decimal:
    """Round ``value`` half-up to a multiple of ``quantum``."""
    amount = to_decimal(value)
    with localcontext(_money_context(amount, quantum)):
        try:
            return amount.quantize(quantum, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise InvalidArgumentError(f"cannot round {amount} to {quantum}") from exc


@dataclass(frozen=True)
class InstallmentSpec:
    """Input of an installment plan: when it starts, how many, how much."""

    start_date: CalendarDate
    count: int
    total_amount: Decimal = Decimal("0")
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_date", CalendarDate.coerce(self.start_date))
        ensure_int("count", self.count)
        object.__setattr__(self, "total_amount", to_decimal(self.total_amount))


@dataclass(frozen=True)
class InstallmentRecord:
    """A single dated installment with its share of the total."""

    index: int
    due_date: CalendarDate
    amount: Decimal
    was_adjusted: bool
    anchor_day: int
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "date": self.due_date.isoformat(),
            "amount": str(self.amount),
            "was_adjusted": self.was_adjusted,
            "anchor_day": self.anchor_day,
            "description": self.description,
        }


def split_amount(
    total: Decimal | int | float | str,
    count: int,
    *,
    quantum: Decimal = CENT,
    policy: RemainderPolicy | str = RemainderPolicy.NONE,
) -> list[Decimal]:
    """Split ``total`` into ``count`` equal shares rounded to ``quantum``.

    With ``RemainderPolicy.NONE`` the shares may not add up to ``total``; the
    difference is at most half a ``quantum`` per installment. With
    ``RemainderPolicy.LAST`` the total is first rounded to ``quantum`` and the
    final share is adjusted so the shares add up to that rounded total.
    """
    total = to_decimal(total)
    ensure_int("count", count)
    try:
        policy = RemainderPolicy(policy)
    except ValueError as exc:
        raise InvalidArgumentError(f"unknown remainder policy {policy!r}") from exc
    if count < 1:
        return []

    with localcontext(_money_context(total, quantum)):
        try:
            share = (total / Decimal(count)).quantize(quantum, rounding=ROUND_HALF_UP)
            shares = [share] * count
            if policy is RemainderPolicy.LAST:
                rounded_total = total.quantize(quantum, rounding=ROUND_HALF_UP)
                shares[-1] = rounded_total - share * (count - 1)
        except InvalidOperation as exc:
            raise InvalidArgumentError(
                f"cannot split {total} into {count} shares of {quantum}"
            ) from exc
    return shares


def allocate(
    spec: InstallmentSpec,
    *,
    description_template: str = DEFAULT_DESCRIPTION_TEMPLATE,
    policy: RemainderPolicy | str = RemainderPolicy.NONE,
    quantum: Decimal = CENT,
) -> list[InstallmentRecord]:
    """Build the installment records for ``spec``.

    Each due date from :func:`generate_schedule` is paired with its share from
    :func:`split_amount`. A ``count`` below 1 gives an empty list.
    """
    schedule = generate_schedule(spec.start_date, spec.count)
    amounts = split_amount(
        spec.total_amount, spec.count, quantum=quantum, policy=policy
    )
    return [
        InstallmentRecord(
            index=entry.index,
            due_date=entry.due_date,
            amount=amount,
            was_adjusted=entry.was_adjusted,
            anchor_day=entry.anchor_day,
            description=description_template.format(
                description=spec.description, index=entry.index, count=spec.count
            ).strip(),
        )
        for entry, amount in zip(schedule, amounts)
    ]

