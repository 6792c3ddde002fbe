"""HTTP entrypoint serving district statistics and location detection."""

from __future__ import annotations

import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Tuple

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from src.core import db
from src.core.config import get_settings
from src.geo.bounds import in_service_area
from src.geo.locator import resolve_and_match
from src.geo.matcher import CatalogMatcher
from src.geo.models import Coordinate
from src.geo.resolver import CoordinateResolver, build_resolver
from src.jobs.sync_districts import run_sync

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
_executor = ThreadPoolExecutor(max_workers=1)

_resolver: Optional[CoordinateResolver] = None
_matcher: Optional[CatalogMatcher] = None
_wiring_lock = threading.Lock()

SYNC_HINT = "Please sync MGNREGA API data first: POST /api/sync or run python -m src.jobs.sync_districts"


def get_resolver() -> CoordinateResolver:
    global _resolver
    with _wiring_lock:
        if _resolver is None:
            _resolver = build_resolver(get_settings())
        return _resolver


def get_matcher() -> CatalogMatcher:
    global _matcher
    with _wiring_lock:
        if _matcher is None:
            _matcher = CatalogMatcher(db)
        return _matcher


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; does not touch the database."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "port_config": settings.server_port,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/api/districts")
def list_districts() -> Any:
    names = db.list_district_names()
    if not names:
        return jsonify({"error": "No districts found", "message": SYNC_HINT}), 404
    return jsonify({"data": names}), 200


@app.get("/api/districts/state/<state>")
def list_districts_by_state(state: str) -> Any:
    names = db.list_district_names(state=state)
    if not names:
        return jsonify({"error": f"No districts found for state: {state}", "message": SYNC_HINT}), 404
    return jsonify({"data": names}), 200


@app.get("/api/districts/<name>")
def get_district(name: str) -> Any:
    district = db.get_district(name)
    if district is None:
        return jsonify({"error": "District not found", "message": SYNC_HINT}), 404
    return jsonify({"data": district}), 200


@app.get("/api/states")
def list_states() -> Any:
    states = db.list_states()
    if not states:
        return jsonify({"error": "No states found", "message": SYNC_HINT}), 404
    return jsonify({"data": states}), 200


def _parse_coordinates(raw_lat: Any, raw_lng: Any) -> Optional[Tuple[float, float]]:
    try:
        latitude = float(raw_lat)
        longitude = float(raw_lng)
    except (TypeError, ValueError, OverflowError):
        return None
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None
    return latitude, longitude


@app.post("/api/location/detect")
def detect_location() -> Any:
    """
    Detect the district for a coordinate pair.
    Required JSON fields: latitude, longitude
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "request body must be a JSON object"}), 400

    missing = [f for f in ("latitude", "longitude") if payload.get(f) is None]
    if missing:
        return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400

    coords = _parse_coordinates(payload["latitude"], payload["longitude"])
    if coords is None:
        return jsonify({"error": "latitude and longitude must be numeric"}), 400
    latitude, longitude = coords

    if not in_service_area(Coordinate(latitude, longitude)):
        return jsonify({"error": "Coordinates are outside the supported area"}), 404

    result = resolve_and_match(latitude, longitude, resolver=get_resolver(), matcher=get_matcher())
    guess = result["guess"]
    if guess is None:
        return jsonify({"error": "Could not determine district from coordinates"}), 404

    record = result["matched_record"]
    data = {
        "guess": guess.to_dict(),
        "matched_record": record,
        "matched": result["matched"],
        "district": record["name"] if record else guess.district,
        "state": record["state"] if record else guess.state,
        "formatted_address": guess.formatted_address,
        "detected_district": guess.district,
        "matched_district": record["name"] if record else None,
        "coordinates": {"latitude": latitude, "longitude": longitude},
    }
    return jsonify({"data": data}), 200


@app.get("/api/location/debug/<lat>/<lng>")
def debug_location(lat: str, lng: str) -> Any:
    """Show which matcher tier, if any, links a coordinate to a catalog record."""
    coords = _parse_coordinates(lat, lng)
    if coords is None:
        return jsonify({"error": "latitude and longitude must be numeric"}), 400
    coord = Coordinate(*coords)
    if not in_service_area(coord):
        return jsonify({"error": "Coordinates are outside the supported area"}), 404

    guess = get_resolver().resolve(coord)
    if guess is None:
        return jsonify({"error": "Could not determine district from coordinates"}), 404

    record, tier = get_matcher().match_with_tier(guess)
    logger.info("Debug match for %.4f,%.4f: %s via tier %s", coord.latitude, coord.longitude, guess.district, tier)
    data = {
        "guess": guess.to_dict(),
        "tier": tier,
        "matched_record": record,
        "matched": record is not None,
        "coordinates": {"latitude": coord.latitude, "longitude": coord.longitude},
    }
    return jsonify({"data": data}), 200


@app.post("/api/sync")
def enqueue_sync() -> Any:
    logger.info("Queueing district catalog sync")
    _executor.submit(_run_sync_safe)
    return jsonify({"data": {"status": "queued"}}), 202


@app.errorhandler(Exception)
def handle_unexpected(exc: Exception) -> Any:
    if isinstance(exc, HTTPException):
        return exc
    logger.exception("Unhandled error on %s: %s", request.path, exc)
    return jsonify({"error": "internal server error"}), 500


# ---------- Internals ----------


def _run_sync_safe() -> None:
    try:
        run_sync()
    except Exception as exc:  # noqa: BLE001
        logger.exception("District sync failed: %s", exc)


def main() -> None:
    port = get_settings().server_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
