"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Request
from supabase import Client

from src.core.config import get_settings
from src.services.profile_service import ProfileService


def get_db(request: Request) -> Client:
    """Return the Supabase client created at application startup.

    Args:
        request: The incoming request.

    Returns:
        Client: The shared client stored on the application state.
    """
    return request.app.state.supabase


Database = Annotated[Client, Depends(get_db)]


def get_profile_service(client: Database) -> ProfileService:
    """Build a ProfileService bound to the shared client."""
    return ProfileService(client, table=get_settings().profiles_table)


ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
