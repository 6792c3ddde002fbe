"""Utilities for transforming MGNREGA API records into catalog rows."""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def _safe_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(float(str(value).replace(",", "").strip()))
    except (TypeError, ValueError):
        return 0


def _safe_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return 0.0


def district_code(record: Dict[str, Any]) -> str:
    code = str(record.get("district_code") or "").strip()
    if code:
        return code
    return re.sub(r"\s+", "_", f"{record.get('state_name', '')}_{record.get('district_name', '')}".strip())


def to_district_row(record: Dict[str, Any], updated_at: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
    name = str(record.get("district_name") or "").strip()
    state = str(record.get("state_name") or "").strip()
    if not name or not state:
        logger.debug("Skipping record without district/state: %s", record)
        return None

    return {
        "code": district_code(record),
        "name": name,
        "state": state,
        "total_workers": _safe_int(record.get("Total_Individuals_Worked")),
        "total_wages": _safe_float(record.get("Wages")),
        "households": _safe_int(record.get("Total_Households_Worked")),
        "employment_days": _safe_int(record.get("Average_days_of_employment_provided_per_Household")),
        "work_completed": _safe_int(record.get("Number_of_Completed_Works")),
        "budget_utilization": _safe_float(record.get("budget_utilized")),
        "last_updated": updated_at or datetime.now(timezone.utc),
    }
