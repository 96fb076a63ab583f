"""
Hosted store connection.

One Supabase client per (url, key) pair, created lazily on first use and kept
for the life of the process. Adapters receive it by reference through the
get_database dependency; None means the hosted store is not configured.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from supabase import Client, ClientOptions, create_client

from config import Settings, get_settings
from logger import get_logger

_logger = get_logger(__name__)

APPLICATION_NAME = "sbo-oilseal-backend"


@lru_cache(maxsize=4)
def _connect(url: str, key: str) -> Client:
    _logger.info(f"Connecting to Supabase at {url}")
    return create_client(
        url,
        key,
        options=ClientOptions(
            schema="public",
            headers={"x-application-name": APPLICATION_NAME},
            auto_refresh_token=False,
            persist_session=False,
        ),
    )


def get_client(settings: Settings) -> Optional[Client]:
    if not settings.supabase_configured:
        return None
    return _connect(settings.supabase_url, settings.supabase_key)


def get_database(settings: Settings = Depends(get_settings)) -> Optional[Client]:
    return get_client(settings)


def check_connection(db) -> bool:
    """Cheap round-trip used by the health check."""
    if db is None:
        return False
    try:
        db.table("contacts").select("id").limit(1).execute()
        return True
    except Exception as e:
        _logger.warning(f"Supabase health check failed: {str(e)[:80]}")
        return False
