"""CLI job to refresh the district catalog from the MGNREGA API."""

import argparse
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from src.core.config import get_settings
from src.core.db import ensure_schema, init_pool, replace_districts
from src.etl.transform import to_district_row
from src.vendors import mgnrega

logger = logging.getLogger(__name__)


def run_sync(limit: Optional[int] = None) -> int:
    """Fetch the latest statistics and replace the catalog; returns rows stored."""
    settings = get_settings()
    api_key = settings.mgnrega_api_key
    if not api_key:
        raise RuntimeError("MGNREGA_API_KEY is required")

    init_pool()

    records = mgnrega.fetch_records(
        api_url=settings.mgnrega_api_url,
        api_key=api_key,
        limit=limit or settings.mgnrega_page_limit,
        timeout=settings.mgnrega_timeout,
    )

    synced_at = datetime.now(timezone.utc)
    rows: Dict[str, dict] = {}
    skipped = 0
    for record in records:
        row = to_district_row(record, updated_at=synced_at)
        if row is None:
            skipped += 1
            continue
        # Later records for the same district supersede earlier ones.
        rows[row["code"]] = row

    if not rows:
        raise RuntimeError("MGNREGA API returned no usable district records")

    ensure_schema()
    stored = replace_districts(rows.values())
    logger.info("Completed sync: fetched=%d stored=%d skipped=%d", len(records), stored, skipped)
    return stored


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync the district catalog from the MGNREGA API")
    parser.add_argument(
        "--limit",
        dest="limit",
        type=int,
        default=get_settings().mgnrega_page_limit,
        help="Maximum number of records to request",
    )
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    run_sync(limit=args.limit)


if __name__ == "__main__":
    main()
