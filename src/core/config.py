"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_NOMINATIM_USER_AGENT = "DistrictLocator/1.0"
DEFAULT_MGNREGA_API_URL = "https://api.data.gov.in/resource/ee03643a-ee4c-48c2-ac30-9f2ff26ab722"


@dataclass(frozen=True)
class Settings:
    database_url: str
    server_port: int = 8080
    nominatim_url: str = DEFAULT_NOMINATIM_URL
    nominatim_user_agent: str = DEFAULT_NOMINATIM_USER_AGENT
    nominatim_timeout: float = 15.0
    location_cache_ttl: float = 300.0
    mgnrega_api_url: str = DEFAULT_MGNREGA_API_URL
    mgnrega_api_key: str = ""
    mgnrega_page_limit: int = 5000
    mgnrega_timeout: float = 60.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    database_url = os.getenv("DATABASE_URL", "")
    server_port = int(os.getenv("PORT", "8080"))
    nominatim_url = os.getenv("NOMINATIM_URL") or DEFAULT_NOMINATIM_URL
    nominatim_user_agent = os.getenv("NOMINATIM_USER_AGENT", "").strip()
    nominatim_timeout = float(os.getenv("NOMINATIM_TIMEOUT", "15"))
    location_cache_ttl = float(os.getenv("LOCATION_CACHE_TTL", "300"))
    mgnrega_api_url = os.getenv("MGNREGA_API_URL") or DEFAULT_MGNREGA_API_URL
    mgnrega_api_key = os.getenv("MGNREGA_API_KEY", "")
    mgnrega_page_limit = int(os.getenv("MGNREGA_PAGE_LIMIT", "5000"))
    mgnrega_timeout = float(os.getenv("MGNREGA_TIMEOUT", "60"))

    if not database_url:
        logger.warning("DATABASE_URL is not set; catalog lookups will fail.")
    if not mgnrega_api_key:
        logger.warning("MGNREGA_API_KEY is not configured; district sync will fail.")
    if not nominatim_user_agent:
        logger.warning(
            "NOMINATIM_USER_AGENT is not set; using %s without a contact address.", DEFAULT_NOMINATIM_USER_AGENT
        )
        nominatim_user_agent = DEFAULT_NOMINATIM_USER_AGENT

    return Settings(
        database_url=database_url,
        server_port=server_port,
        nominatim_url=nominatim_url,
        nominatim_user_agent=nominatim_user_agent,
        nominatim_timeout=nominatim_timeout,
        location_cache_ttl=location_cache_ttl,
        mgnrega_api_url=mgnrega_api_url,
        mgnrega_api_key=mgnrega_api_key,
        mgnrega_page_limit=mgnrega_page_limit,
        mgnrega_timeout=mgnrega_timeout,
    )
