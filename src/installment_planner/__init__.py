"""Installment planner - monthly due dates that keep their day of month."""

__version__ = "0.1.0"

from installment_planner.allocation import (
    CENT,
    InstallmentRecord,
    InstallmentSpec,
    RemainderPolicy,
    allocate,
    quantize_amount,
    split_amount,
)
from installment_planner.calendar_math import (
    CalendarDate,
    DateAdjustment,
    InstallmentError,
    InvalidArgumentError,
    add_months,
    adjustment_info,
    is_valid_day_for_month,
    last_day_of_month,
    parse_iso_date,
    to_iso_date,
)
from installment_planner.config import configure_logging, get_settings
from installment_planner.plans import (
    InstallmentLimitError,
    InstallmentPlan,
    PlannedTransaction,
    PlanKind,
    SubscriptionPlan,
    TransactionStatus,
    build_installment_plan,
    build_subscription_plan,
)
from installment_planner.schedule import ScheduleEntry, generate_schedule, iter_schedule
from installment_planner.schemas import InstallmentRequest, InstallmentRow, plan_rows

__all__ = [
    # Version
    "__version__",
    # Calendar arithmetic
    "CalendarDate",
    "DateAdjustment",
    "add_months",
    "adjustment_info",
    "is_valid_day_for_month",
    "last_day_of_month",
    "parse_iso_date",
    "to_iso_date",
    # Schedules
    "ScheduleEntry",
    "generate_schedule",
    "iter_schedule",
    # Allocation
    "CENT",
    "InstallmentRecord",
    "InstallmentSpec",
    "RemainderPolicy",
    "allocate",
    "quantize_amount",
    "split_amount",
    # Plans
    "InstallmentPlan",
    "PlannedTransaction",
    "PlanKind",
    "SubscriptionPlan",
    "TransactionStatus",
    "build_installment_plan",
    "build_subscription_plan",
    # Wire models
    "InstallmentRequest",
    "InstallmentRow",
    "plan_rows",
    # Errors
    "InstallmentError",
    "InvalidArgumentError",
    "InstallmentLimitError",
    # Config
    "get_settings",
    "configure_logging",
]
