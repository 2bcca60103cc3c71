"""Profile model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class SocialLinks(TypedDict, total=False):
    """Social link URLs stored as JSON in the social_links column."""

    website: str | None
    instagram: str | None
    facebook: str | None
    telegram: str | None
    tiktok: str | None
    youtube: str | None
    whatsapp: str | None
    maps: str | None
    snapchat: str | None


class Profile(TypedDict):
    """Profile table row representation.

    Represents a public directory listing stored in the profiles table.
    Maps directly to the database schema; username and profile_key each
    carry a unique index.
    """

    id: UUID
    username: str
    profile_key: str | None
    name: str | None
    job_title: str | None
    profile_image: str | None
    header_image: str | None
    phone: str | None
    email: str | None
    is_verified: bool
    social_links: SocialLinks | None
    created_at: datetime
    updated_at: datetime


class ProfileWrite(TypedDict):
    """Full column set written on insert and on replace.

    Every column is present so that an update overwrites fields the
    caller omitted.
    """

    username: str
    profile_key: str
    name: str | None
    job_title: str | None
    profile_image: str | None
    header_image: str | None
    phone: str | None
    email: str | None
    is_verified: bool
    social_links: SocialLinks | None
