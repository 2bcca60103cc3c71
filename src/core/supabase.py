"""Supabase client lifecycle for database operations."""

import logging
from functools import lru_cache
from typing import Any

from fastapi import FastAPI
from supabase import Client, create_client

from src.core.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Client:
    """Get cached Supabase client for database operations.

    Uses the secret key for backend operations, which bypasses RLS
    at the PostgREST level. Prefer the client attached to the
    application state (see init_database) inside request handlers.

    Returns:
        Client: Supabase client instance.
    """
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_secret_key,
    )


def init_database(app: FastAPI) -> Client:
    """Create the shared client once and attach it to the application state.

    Args:
        app: FastAPI application instance.

    Returns:
        Client: The client every request will reuse.
    """
    client = get_supabase_client()
    app.state.supabase = client
    logger.info("Supabase client initialized")
    return client


def shutdown_database(app: FastAPI) -> None:
    """Detach the shared client and drop the cached instance."""
    app.state.supabase = None
    get_supabase_client.cache_clear()
    logger.info("Supabase client released")


async def check_database_connection(client: Client) -> dict[str, Any]:
    """Check if database connection is healthy.

    Performs a simple query to verify database connectivity.

    Args:
        client: Supabase client to probe.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        table = get_settings().profiles_table
        client.table(table).select("id").limit(1).execute()
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
