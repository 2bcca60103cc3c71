"""Database model type definitions."""

from src.models.profile import Profile, ProfileWrite, SocialLinks

__all__ = [
    "Profile",
    "ProfileWrite",
    "SocialLinks",
]
