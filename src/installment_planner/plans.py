"""Installment and subscription plans ready to be persisted.

A plan ties every generated row to one group id, so the caller can store the
rows independently and still cancel or report on the group as a whole.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

import structlog

from installment_planner.allocation import (
    InstallmentSpec,
    RemainderPolicy,
    allocate,
    quantize_amount,
)
from installment_planner.calendar_math import (
    CalendarDate,
    InvalidArgumentError,
    add_months,
    ensure_int,
)
from installment_planner.config.settings import Settings, get_settings

logger = structlog.get_logger(__name__)


class InstallmentLimitError(InvalidArgumentError):
    """A plan asks for more installments than the configured maximum."""

    def __init__(self, count: int, limit: int):
        super().__init__(f"{count} installments requested, at most {limit} allowed")
        self.count = count
        self.limit = limit


class PlanKind(str, Enum):
    INSTALLMENT = "installment"
    SUBSCRIPTION = "subscription"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class PlannedTransaction:
    """A row the caller persists, one per installment or charge."""

    group_id: UUID
    kind: PlanKind
    description: str
    amount: Decimal
    due_date: CalendarDate
    anchor_day: int
    was_adjusted: bool = False
    installment: int | None = None
    installment_count: int | None = None
    status: TransactionStatus = TransactionStatus.PENDING

    def to_row(self) -> dict[str, Any]:
        """Serialize to a flat mapping for storage."""
        return {
            "group_id": str(self.group_id),
            "kind": self.kind.value,
            "description": self.description,
            "amount": str(self.amount),
            "due_date": self.due_date.isoformat(),
            "anchor_day": self.anchor_day,
            "was_adjusted": self.was_adjusted,
            "installment": self.installment,
            "installment_count": self.installment_count,
            "status": self.status.value,
        }


@dataclass
class InstallmentPlan:
    """A fixed number of monthly installments sharing one group id."""

    group_id: UUID
    spec: InstallmentSpec
    transactions: list[PlannedTransaction] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((tx.amount for tx in self.transactions), Decimal("0"))

    @property
    def adjusted_count(self) -> int:
        return sum(1 for tx in self.transactions if tx.was_adjusted)

    def to_rows(self) -> list[dict[str, Any]]:
        return [tx.to_row() for tx in self.transactions]

    def mark_paid(self, installment: int) -> PlannedTransaction:
        """Mark one installment (1-based) as completed."""
        for tx in self.transactions:
            if tx.installment == installment:
                if tx.status is TransactionStatus.CANCELLED:
                    raise InvalidArgumentError(
                        f"installment {installment} is cancelled and cannot be paid"
                    )
                tx.status = TransactionStatus.COMPLETED
                return tx
        raise InvalidArgumentError(f"plan has no installment {installment}")

    def cancel_pending(self, as_of: CalendarDate | date | str) -> list[PlannedTransaction]:
        """Cancel every pending installment due strictly after ``as_of``.

        Completed rows and rows due on or before ``as_of`` are left alone.
        Returns the rows that were cancelled.
        """
        cutoff = CalendarDate.coerce(as_of)
        cancelled = []
        for tx in self.transactions:
            if tx.status is TransactionStatus.PENDING and tx.due_date > cutoff:
                tx.status = TransactionStatus.CANCELLED
                cancelled.append(tx)
        logger.info(
            "installment_plan_cancelled",
            group_id=str(self.group_id),
            as_of=cutoff.isoformat(),
            cancelled=len(cancelled),
        )
        return cancelled


@dataclass
class SubscriptionPlan:
    """An open-ended monthly charge anchored on its start day."""

    group_id: UUID
    start_date: CalendarDate
    amount: Decimal
    description: str
    first_transaction: PlannedTransaction

    @property
    def anchor_day(self) -> int:
        return self.start_date.day

    def _months_until(self, target: CalendarDate) -> int:
        return (target.year - self.start_date.year) * 12 + (
            target.month - self.start_date.month
        )

    def next_due_date(self, as_of: CalendarDate | date | str) -> CalendarDate:
        """Return the first charge date on or after ``as_of``."""
        cutoff = CalendarDate.coerce(as_of)
        offset = max(self._months_until(cutoff), 0)
        due = add_months(self.start_date, offset, self.anchor_day)
        if due < cutoff:
            due = add_months(self.start_date, offset + 1, self.anchor_day)
        return due

    def upcoming(
        self, as_of: CalendarDate | date | str, periods: int
    ) -> list[CalendarDate]:
        """Return the next ``periods`` charge dates on or after ``as_of``."""
        ensure_int("periods", periods)
        first = self.next_due_date(as_of)
        offset = self._months_until(first)
        return [
            add_months(self.start_date, offset + step, self.anchor_day)
            for step in range(max(periods, 0))
        ]


def build_installment_plan(
    start_date: CalendarDate | date | str,
    count: int,
    total_amount: Decimal | int | float | str,
    description: str = "",
    *,
    settings: Settings | None = None,
    group_id: UUID | None = None,
    policy: RemainderPolicy | str | None = None,
) -> InstallmentPlan:
    """Split ``total_amount`` into ``count`` monthly installments.

    Installments below 1 give an empty plan; more than
    ``settings.max_installments`` raise :class:`InstallmentLimitError`.
    """
    settings = settings or get_settings()
    spec = InstallmentSpec(
        start_date=start_date,
        count=count,
        total_amount=total_amount,
        description=description,
    )
    if spec.count > settings.max_installments:
        raise InstallmentLimitError(spec.count, settings.max_installments)

    plan = InstallmentPlan(group_id=group_id or uuid4(), spec=spec)
    if spec.count < 1:
        logger.warning(
            "installment_count_not_positive",
            group_id=str(plan.group_id),
            count=spec.count,
        )
        return plan

    records = allocate(
        spec,
        description_template=settings.installment_description_template,
        policy=policy or settings.remainder_policy,
        quantum=settings.currency_quantum,
    )
    plan.transactions = [
        PlannedTransaction(
            group_id=plan.group_id,
            kind=PlanKind.INSTALLMENT,
            description=record.description,
            amount=record.amount,
            due_date=record.due_date,
            anchor_day=record.anchor_day,
            was_adjusted=record.was_adjusted,
            installment=record.index,
            installment_count=spec.count,
        )
        for record in records
    ]

    logger.info(
        "installment_plan_built",
        group_id=str(plan.group_id),
        start_date=spec.start_date.isoformat(),
        count=spec.count,
        total=str(spec.total_amount),
        adjusted=plan.adjusted_count,
    )
    return plan


def build_subscription_plan(
    start_date: CalendarDate | date | str,
    amount: Decimal | int | float | str,
    description: str = "",
    *,
    settings: Settings | None = None,
    group_id: UUID | None = None,
) -> SubscriptionPlan:
    """Create a monthly subscription; only its first charge is materialized."""
    settings = settings or get_settings()
    start = CalendarDate.coerce(start_date)
    charge = quantize_amount(amount, settings.currency_quantum)
    group = group_id or uuid4()

    first = PlannedTransaction(
        group_id=group,
        kind=PlanKind.SUBSCRIPTION,
        description=settings.subscription_description_template.format(
            description=description
        ).strip(),
        amount=charge,
        due_date=start,
        anchor_day=start.day,
    )
    logger.info(
        "subscription_plan_built",
        group_id=str(group),
        start_date=start.isoformat(),
        amount=str(charge),
    )
    return SubscriptionPlan(
        group_id=group,
        start_date=start,
        amount=charge,
        description=description,
        first_transaction=first,
    )
