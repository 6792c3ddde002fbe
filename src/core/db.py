"""Database helpers for the district catalog."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional

import psycopg2
from psycopg2 import extras, pool

from src.core.config import get_settings

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None

District = Dict[str, Any]


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


def _fetch_all(sql: str, params: Any = None) -> List[District]:
    with get_connection() as conn:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            cur.execute(sql, params)
            return [dict(row) for row in cur.fetchall()]


def _fetch_one(sql: str, params: Any = None) -> Optional[District]:
    rows = _fetch_all(sql, params)
    return rows[0] if rows else None


def _contains_pattern(value: str) -> str:
    """ILIKE pattern matching ``value`` anywhere, with wildcards escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


_SCHEMA = """
CREATE TABLE IF NOT EXISTS districts (
    code TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    state TEXT NOT NULL,
    total_workers BIGINT NOT NULL DEFAULT 0,
    total_wages DOUBLE PRECISION NOT NULL DEFAULT 0,
    households BIGINT NOT NULL DEFAULT 0,
    employment_days INTEGER NOT NULL DEFAULT 0,
    work_completed BIGINT NOT NULL DEFAULT 0,
    budget_utilization DOUBLE PRECISION NOT NULL DEFAULT 0,
    last_updated TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS districts_name_idx ON districts (lower(name));
CREATE INDEX IF NOT EXISTS districts_state_idx ON districts (lower(state));
"""


def ensure_schema() -> None:
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(_SCHEMA)
        conn.commit()


# ---------- Matcher queries ----------


def find_by_name(name: str) -> Optional[District]:
    """Case-insensitive exact name match, state ignored."""
    return _fetch_one(
        "SELECT * FROM districts WHERE lower(name) = lower(%(name)s) ORDER BY state, code LIMIT 1",
        {"name": name},
    )


def find_by_name_in_state(name: str, state: str, exact: bool = False) -> Optional[District]:
    """Match a district name (exact or substring) inside states containing ``state``."""
    if exact:
        name_clause = "lower(name) = lower(%(name)s)"
        params = {"name": name, "state": _contains_pattern(state)}
    else:
        name_clause = "name ILIKE %(name)s"
        params = {"name": _contains_pattern(name), "state": _contains_pattern(state)}
    return _fetch_one(
        f"SELECT * FROM districts WHERE {name_clause} AND state ILIKE %(state)s ORDER BY name, code LIMIT 1",
        params,
    )


def find_in_state(state: str, limit: int = 3) -> List[District]:
    return _fetch_all(
        "SELECT * FROM districts WHERE state ILIKE %(state)s ORDER BY name, code LIMIT %(limit)s",
        {"state": _contains_pattern(state), "limit": limit},
    )


# ---------- Read endpoints ----------


def list_district_names(state: Optional[str] = None) -> List[str]:
    if state:
        rows = _fetch_all("SELECT name FROM districts WHERE state = %(state)s ORDER BY name", {"state": state})
    else:
        rows = _fetch_all("SELECT name FROM districts ORDER BY name")
    return [row["name"] for row in rows]


def list_states() -> List[str]:
    rows = _fetch_all("SELECT DISTINCT state FROM districts ORDER BY state")
    return [row["state"] for row in rows]


def get_district(name: str) -> Optional[District]:
    return _fetch_one("SELECT * FROM districts WHERE name = %(name)s ORDER BY code LIMIT 1", {"name": name})


# ---------- Ingestion ----------

_COLUMNS = (
    "code",
    "name",
    "state",
    "total_workers",
    "total_wages",
    "households",
    "employment_days",
    "work_completed",
    "budget_utilization",
    "last_updated",
)

_INSERT_DISTRICTS = f"INSERT INTO districts ({', '.join(_COLUMNS)}) VALUES %s"


def _prepare_values(row: District) -> tuple:
    return tuple(row.get(column) for column in _COLUMNS)


def replace_districts(rows: Iterable[District]) -> int:
    """Swap the whole catalog for ``rows`` in a single transaction."""
    values = [_prepare_values(row) for row in rows]
    if not values:
        raise ValueError("refusing to replace the district catalog with no rows")
    for value in values:
        if not value[0] or not value[1] or not value[2]:
            raise ValueError("code, name and state are required for every district")

    with get_connection() as conn:
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM districts")
                extras.execute_values(cur, _INSERT_DISTRICTS, values, page_size=500)
            conn.commit()
        except psycopg2.Error:
            conn.rollback()
            raise
    logger.info("Replaced district catalog with %d rows", len(values))
    return len(values)
