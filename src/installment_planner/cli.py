"""Command line entry point for building installment plans.

Usage:
    # Split 1000.00 into 12 installments starting on Jan 31
    installment-planner schedule 2024-01-31 12 --total 1000.00 --description Laptop

    # Same, with the rounding remainder on the last installment, as JSON
    installment-planner schedule 2024-01-31 12 --total 1000.00 --remainder last --json

    # Every plan in a YAML batch file
    installment-planner batch plans.yaml --json
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence

import structlog

from installment_planner.calendar_math import InstallmentError
from installment_planner.config import configure_logging, get_settings
from installment_planner.config.plans_loader import load_plan_requests
from installment_planner.plans import InstallmentPlan, build_installment_plan

logger = structlog.get_logger(__name__)

EXIT_INVALID_INPUT = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="installment-planner",
        description="Monthly installment schedules that keep their day of month",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    schedule = subparsers.add_parser("schedule", help="Build a single plan")
    schedule.add_argument("start_date", help="First due date (YYYY-MM-DD)")
    schedule.add_argument("count", type=int, help="Number of installments")
    schedule.add_argument(
        "--total", default="0", help="Total amount to split (default: 0)"
    )
    schedule.add_argument("--description", default="", help="Description prefix")
    schedule.add_argument(
        "--remainder",
        choices=["none", "last"],
        default=None,
        help="Where the rounding remainder goes (default: from settings)",
    )
    schedule.add_argument("--json", action="store_true", help="Print JSON rows")

    batch = subparsers.add_parser("batch", help="Build every plan in a YAML file")
    batch.add_argument("file", help="YAML file with a list of plans")
    batch.add_argument(
        "--remainder",
        choices=["none", "last"],
        default=None,
        help="Where the rounding remainder goes (default: from settings)",
    )
    batch.add_argument("--json", action="store_true", help="Print JSON rows")
    return parser


def _print_plan(plan: InstallmentPlan) -> None:
    print(f"Plan {plan.group_id} ({len(plan.transactions)} installments)")
    for tx in plan.transactions:
        flag = f"  (day {tx.anchor_day} -> {tx.due_date.day})" if tx.was_adjusted else ""
        print(f"  {tx.installment:>3}  {tx.due_date}  {tx.amount:>12}  {tx.description}{flag}")
    print(f"  total {plan.total}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging()
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(command=args.command)
    settings = get_settings()

    try:
        if args.command == "schedule":
            plans = [
                build_installment_plan(
                    args.start_date,
                    args.count,
                    args.total,
                    args.description,
                    settings=settings,
                    policy=args.remainder,
                )
            ]
        else:
            plans = [
                build_installment_plan(
                    request.start_date,
                    request.count,
                    request.total_amount,
                    request.description,
                    settings=settings,
                    policy=args.remainder,
                )
                for request in load_plan_requests(args.file)
            ]
    except (InstallmentError, ValueError, ArithmeticError, OSError) as e:
        logger.error("plan_failed", error=str(e))
        return EXIT_INVALID_INPUT

    if args.json:
        rows = [row for plan in plans for row in plan.to_rows()]
        print(json.dumps(rows, indent=2))
    else:
        for plan in plans:
            _print_plan(plan)
    return 0


if __name__ == "__main__":
    sys.exit(main())
