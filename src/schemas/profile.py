"""Profile Pydantic schemas for API request/response models.

Payloads use the camelCase field names clients already send
(jobTitle, profileImage, isVerified, ...). Snake_case names are accepted
on input as well.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SocialLinksSchema(BaseModel):
    """Optional social link URLs, each independent of the others."""

    model_config = ConfigDict(from_attributes=True)

    website: str | None = Field(default=None, description="Personal or business website")
    instagram: str | None = Field(default=None, description="Instagram link")
    facebook: str | None = Field(default=None, description="Facebook link")
    telegram: str | None = Field(default=None, description="Telegram link")
    tiktok: str | None = Field(default=None, description="TikTok link")
    youtube: str | None = Field(default=None, description="YouTube link")
    whatsapp: str | None = Field(default=None, description="WhatsApp link")
    maps: str | None = Field(default=None, description="Maps location link")
    snapchat: str | None = Field(default=None, description="Snapchat link")


class ProfileBase(BaseModel):
    """Profile fields shared across schemas."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    name: str | None = Field(default=None, description="Display name")
    job_title: str | None = Field(default=None, alias="jobTitle", description="Job title")
    profile_image: str | None = Field(default=None, alias="profileImage", description="Profile image URL or path")
    header_image: str | None = Field(default=None, alias="headerImage", description="Header image URL or path")
    phone: str | None = Field(default=None, description="Contact phone number")
    email: str | None = Field(default=None, description="Contact email address")
    is_verified: bool = Field(default=False, alias="isVerified", description="Verified badge")
    social_links: SocialLinksSchema | None = Field(
        default=None, alias="socialLinks", description="Social link URLs"
    )


class ProfileInput(ProfileBase):
    """Schema for creating a profile or replacing one in full.

    Username presence and length are checked by the service so that a
    missing username is reported like a short one.
    """

    username: str | None = Field(default=None, description="Unique username, at least 3 characters")


class ProfileResponse(ProfileBase):
    """Schema for profile API responses."""

    id: UUID = Field(description="Profile unique identifier")
    username: str = Field(description="Unique username")
    profile_key: str | None = Field(default=None, alias="profileKey", description="URL-safe profile key")
    created_at: datetime | None = Field(default=None, alias="createdAt", description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, alias="updatedAt", description="Last update timestamp")


class ProfileCreatedResponse(BaseModel):
    """Response returned after a profile is saved."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(description="Human-readable result")
    profile_key: str = Field(alias="profileKey", description="Key to fetch the profile with")


class VerificationStatusResponse(BaseModel):
    """Verification badge state for a profile."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    username: str = Field(description="Unique username")
    is_verified: bool = Field(alias="isVerified", description="Verified badge")


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str = Field(description="Human-readable result")
