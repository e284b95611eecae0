"""Tests for installment and subscription plans."""

from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from installment_planner.calendar_math import CalendarDate, InvalidArgumentError
from installment_planner.config.settings import Settings
from installment_planner.plans import (
    InstallmentLimitError,
    PlanKind,
    TransactionStatus,
    build_installment_plan,
    build_subscription_plan,
)


class TestBuildInstallmentPlan:
    """Tests for building installment plans."""

    def test_rows_share_group_id(self):
        """Test every row of a plan carries the same group id."""
        group_id = uuid4()

        plan = build_installment_plan(
            "2024-01-31", 3, "100.00", "Laptop", group_id=group_id
        )

        assert plan.group_id == group_id
        assert len(plan.transactions) == 3
        assert {tx.group_id for tx in plan.transactions} == {group_id}
        assert all(tx.kind is PlanKind.INSTALLMENT for tx in plan.transactions)
        assert all(tx.status is TransactionStatus.PENDING for tx in plan.transactions)

    def test_generates_group_id(self):
        """Test a group id is generated when none is given."""
        plan = build_installment_plan("2024-01-31", 2, "10")
        assert isinstance(plan.group_id, UUID)

    def test_amounts_and_dates(self):
        """Test amounts and due dates of a clamped plan."""
        plan = build_installment_plan("2024-01-31", 3, "100.00", "Laptop")

        assert [tx.due_date.isoformat() for tx in plan.transactions] == [
            "2024-01-31",
            "2024-02-29",
            "2024-03-31",
        ]
        assert [tx.amount for tx in plan.transactions] == [Decimal("33.33")] * 3
        assert plan.total == Decimal("99.99")
        assert plan.adjusted_count == 1
        assert [tx.description for tx in plan.transactions] == [
            "Laptop (1/3)",
            "Laptop (2/3)",
            "Laptop (3/3)",
        ]

    def test_remainder_policy_from_settings(self):
        """Test the remainder policy defaults to the configured one."""
        settings = Settings(INSTALLMENT_REMAINDER_POLICY="last")

        plan = build_installment_plan("2024-01-31", 3, "100.00", settings=settings)

        assert plan.total == Decimal("100.00")
        assert plan.transactions[-1].amount == Decimal("33.34")

    def test_explicit_policy_overrides_settings(self):
        """Test an explicit policy wins over settings."""
        settings = Settings(INSTALLMENT_REMAINDER_POLICY="last")

        plan = build_installment_plan(
            "2024-01-31", 3, "100.00", settings=settings, policy="none"
        )

        assert plan.total == Decimal("99.99")

    def test_limit_enforced(self):
        """Test counts above the configured maximum raise."""
        settings = Settings(INSTALLMENT_MAX_COUNT=12)

        with pytest.raises(InstallmentLimitError) as exc_info:
            build_installment_plan("2024-01-31", 13, "100", settings=settings)

        assert exc_info.value.count == 13
        assert exc_info.value.limit == 12
        assert isinstance(exc_info.value, ValueError)

    def test_default_limit_is_sixty(self):
        """Test sixty installments are allowed by default."""
        assert len(build_installment_plan("2024-01-31", 60, "600").transactions) == 60
        with pytest.raises(InstallmentLimitError):
            build_installment_plan("2024-01-31", 61, "610")

    def test_zero_count_gives_empty_plan(self):
        """Test a zero count gives a plan with no transactions."""
        plan = build_installment_plan("2024-01-31", 0, "100")

        assert plan.transactions == []
        assert plan.total == Decimal("0")
        assert plan.to_rows() == []

    def test_invalid_date_rejected(self):
        """Test an impossible start date raises."""
        with pytest.raises(InvalidArgumentError):
            build_installment_plan("2024-02-30", 3, "100")

    def test_to_rows(self):
        """Test the flat row export."""
        group_id = UUID("11111111-1111-1111-1111-111111111111")
        plan = build_installment_plan("2024-01-31", 2, "50", "Desk", group_id=group_id)

        assert plan.to_rows()[1] == {
            "group_id": "11111111-1111-1111-1111-111111111111",
            "kind": "installment",
            "description": "Desk (2/2)",
            "amount": "25.00",
            "due_date": "2024-02-29",
            "anchor_day": 31,
            "was_adjusted": True,
            "installment": 2,
            "installment_count": 2,
            "status": "pending",
        }


class TestPlanLifecycle:
    """Tests for paying and cancelling installments."""

    def test_cancel_pending_only_touches_future_rows(self):
        """Test cancelling leaves past installments alone."""
        plan = build_installment_plan("2024-01-15", 6, "600")
        plan.mark_paid(1)

        cancelled = plan.cancel_pending("2024-03-15")

        assert [tx.installment for tx in cancelled] == [4, 5, 6]
        assert [tx.status for tx in plan.transactions] == [
            TransactionStatus.COMPLETED,
            TransactionStatus.PENDING,
            TransactionStatus.PENDING,
            TransactionStatus.CANCELLED,
            TransactionStatus.CANCELLED,
            TransactionStatus.CANCELLED,
        ]

    def test_cancel_keeps_paid_future_rows(self):
        """Test paid installments survive cancellation."""
        plan = build_installment_plan("2024-01-15", 3, "300")
        plan.mark_paid(3)

        cancelled = plan.cancel_pending("2024-01-01")

        assert [tx.installment for tx in cancelled] == [1, 2]
        assert plan.transactions[2].status is TransactionStatus.COMPLETED

    def test_cancel_is_repeatable(self):
        """Test cancelling twice changes nothing more."""
        plan = build_installment_plan("2024-01-15", 3, "300")
        plan.cancel_pending("2024-01-20")

        assert plan.cancel_pending("2024-01-20") == []

    def test_mark_paid_unknown_installment(self):
        """Test paying a missing installment raises."""
        plan = build_installment_plan("2024-01-15", 3, "300")

        with pytest.raises(InvalidArgumentError):
            plan.mark_paid(4)

    def test_mark_paid_cancelled_installment(self):
        """Test a cancelled installment cannot be paid."""
        plan = build_installment_plan("2024-01-15", 3, "300")
        plan.cancel_pending("2024-01-15")

        with pytest.raises(InvalidArgumentError):
            plan.mark_paid(2)


class TestSubscriptionPlan:
    """Tests for open-ended monthly subscriptions."""

    def test_only_first_charge_materialized(self):
        """Test a subscription starts with a single charge."""
        plan = build_subscription_plan("2024-01-31", "49.90", "Hosting")

        first = plan.first_transaction
        assert first.kind is PlanKind.SUBSCRIPTION
        assert first.due_date == CalendarDate(2024, 1, 31)
        assert first.amount == Decimal("49.90")
        assert first.description == "Hosting - Monthly subscription"
        assert first.installment is None
        assert first.group_id == plan.group_id

    def test_amount_rounded_to_quantum(self):
        """Test the charge is rounded to the currency quantum."""
        plan = build_subscription_plan("2024-01-31", "10.005")
        assert plan.amount == Decimal("10.01")

    def test_huge_amount_rejected(self):
        """Test an amount past the digit limit raises the planner error."""
        with pytest.raises(InvalidArgumentError):
            build_subscription_plan("2024-01-31", "1e2000")

    def test_next_due_date_before_start(self):
        """Test the first due date is the start date."""
        plan = build_subscription_plan("2024-01-31", "10")
        assert plan.next_due_date("2023-06-01") == CalendarDate(2024, 1, 31)

    def test_next_due_date_clamps_and_recovers(self):
        """Test a day-31 subscription clamps and returns to 31."""
        plan = build_subscription_plan("2024-01-31", "10")

        assert plan.next_due_date("2024-02-01") == CalendarDate(2024, 2, 29)
        assert plan.next_due_date("2024-02-29") == CalendarDate(2024, 2, 29)
        assert plan.next_due_date("2024-03-01") == CalendarDate(2024, 3, 31)
        assert plan.next_due_date("2024-04-30") == CalendarDate(2024, 4, 30)

    def test_next_due_date_after_day_passed(self):
        """Test the next charge rolls to the following month."""
        plan = build_subscription_plan("2024-01-10", "10")
        assert plan.next_due_date("2024-05-11") == CalendarDate(2024, 6, 10)

    def test_upcoming(self):
        """Test listing the next charges."""
        plan = build_subscription_plan("2023-10-31", "10")

        assert [d.isoformat() for d in plan.upcoming("2023-11-15", 4)] == [
            "2023-11-30",
            "2023-12-31",
            "2024-01-31",
            "2024-02-29",
        ]

    def test_upcoming_zero_periods(self):
        """Test zero periods list nothing."""
        plan = build_subscription_plan("2023-10-31", "10")
        assert plan.upcoming("2023-11-15", 0) == []

    def test_custom_template(self):
        """Test the configured subscription description template."""
        settings = Settings(SUBSCRIPTION_DESCRIPTION_TEMPLATE="Plan: {description}")

        plan = build_subscription_plan("2024-01-01", "5", "Pro", settings=settings)

        assert plan.first_transaction.description == "Plan: Pro"
