"""Loader for batch installment plan files."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from installment_planner.schemas import InstallmentRequest

logger = structlog.get_logger(__name__)


def load_plan_requests(path: str | Path) -> list[InstallmentRequest]:
    """Load installment requests from a YAML file.

    The file holds either a list of requests or a mapping with a ``plans``
    list::

        plans:
          - description: Laptop
            startDate: "2024-01-31"
            count: 12
            totalAmount: "2400.00"
    """
    plans_path = Path(path)
    raw = plans_path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw)
    if data is None:
        return []

    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        items = data.get("plans") or []
    else:
        raise ValueError(f"{plans_path.name} must be a list or mapping with 'plans'")

    if not isinstance(items, list):
        raise ValueError("plans must be a list")

    results: list[InstallmentRequest] = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"plans[{idx}] must be a mapping")
        # YAML turns unquoted ISO dates into datetime.date; both are accepted.
        try:
            results.append(InstallmentRequest.model_validate(item))
        except ValidationError as exc:
            fields = ", ".join(
                ".".join(str(part) for part in error["loc"]) for error in exc.errors()
            )
            raise ValueError(f"plans[{idx}] invalid fields: {fields}") from exc

    logger.debug("plan_requests_loaded", path=str(plans_path), count=len(results))
    return results
