"""Client utilities for the data.gov.in MGNREGA district statistics API."""

import logging
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


class MgnregaApiError(RuntimeError):
    """Raised when the statistics API returns no usable records."""


def fetch_records(api_url: str, api_key: str, limit: int = 5000, offset: int = 0, timeout: float = 60) -> List[Dict[str, Any]]:
    params = {"api-key": api_key, "format": "json", "limit": limit, "offset": offset}
    response = _SESSION.get(api_url, params=params, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    records = payload.get("records") if isinstance(payload, dict) else None
    if not records:
        message = payload.get("message") if isinstance(payload, dict) else None
        logger.error("fetch_records returned no data: message=%s", message)
        raise MgnregaApiError(message or "No data received from MGNREGA API")
    logger.info("Fetched %d MGNREGA records (offset=%d)", len(records), offset)
    return records
