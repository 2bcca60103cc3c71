"""Profile directory business logic service."""

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client

from src.api.middleware.error_handler import ConflictError, StorageError, ValidationError
from src.models.profile import Profile, ProfileWrite
from src.schemas.profile import ProfileInput
from src.services.profile_keys import candidate_keys, case_insensitive_pattern, derive_key

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

MIN_USERNAME_LENGTH = 3

# Inserts tried before giving up when concurrent writers keep taking the chosen key
INSERT_ATTEMPTS = 3


class ProfileService:
    """Service for managing directory profiles.

    Usernames are unique as stored (case-sensitive). Profile keys are unique
    too: a username whose key is already used gets a numbered key such as
    jane-doe-2. Both columns carry unique indexes; the existence checks here
    only save a round trip, a unique violation raised by storage is what
    ultimately decides a conflict.
    """

    def __init__(self, client: Client, table: str = "profiles") -> None:
        """Initialize profile service.

        Args:
            client: Shared Supabase client.
            table: Name of the profiles table.
        """
        self.client = client
        self.table = table

    def _execute(self, query: Any, failure_message: str) -> Any:
        """Run a query, translating driver failures into API errors."""
        try:
            return query.execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.warning("Unique constraint rejected write: %s", e.message)
                raise ConflictError("Profile key or username already exists.") from e
            raise StorageError(failure_message) from e
        except httpx.HTTPError as e:
            raise StorageError(failure_message) from e

    def _first(self, query: Any, failure_message: str) -> dict[str, Any] | None:
        response = self._execute(query.limit(1), failure_message)
        return response.data[0] if response.data else None

    @staticmethod
    def _validate_username(username: str | None) -> str:
        """Trim the username and enforce the minimum length.

        Raises:
            ValidationError: If the username is missing or too short.
        """
        trimmed = (username or "").strip()
        if len(trimmed) < MIN_USERNAME_LENGTH:
            raise ValidationError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters long."
            )
        return trimmed

    @staticmethod
    def _build_row(username: str, profile_key: str, data: ProfileInput) -> ProfileWrite:
        """Build the full column set for an insert or a replace."""
        social_links = data.social_links.model_dump() if data.social_links else None
        return ProfileWrite(
            username=username,
            profile_key=profile_key,
            name=data.name,
            job_title=data.job_title,
            profile_image=data.profile_image,
            header_image=data.header_image,
            phone=data.phone,
            email=data.email,
            is_verified=data.is_verified,
            social_links=social_links,
        )

    def _assign_key(self, username: str, profile_id: str | None = None) -> str:
        """Pick the first free profile key for a username.

        The derived key is used when free; otherwise -2, -3, ... is appended.
        A key already held by profile_id counts as free.
        """
        return next(key for key in candidate_keys(username) if self._key_is_free(key, profile_id))

    def _key_is_free(self, profile_key: str, profile_id: str | None) -> bool:
        holder = self._first(
            self.client.table(self.table).select("id").eq("profile_key", profile_key),
            "Server error",
        )
        return not holder or holder["id"] == profile_id

    async def create_profile(self, data: ProfileInput) -> tuple[str, Profile]:
        """Create a new profile.

        Args:
            data: Profile fields from the request.

        Returns:
            tuple: The assigned profile key and the stored row.

        Raises:
            ValidationError: If the username is missing or shorter than 3 characters.
            ConflictError: If a profile with this exact username already exists.
            StorageError: If the database rejects the write for another reason.
        """
        username = self._validate_username(data.username)

        for _ in range(INSERT_ATTEMPTS):
            existing = self._first(
                self.client.table(self.table).select("id").eq("username", username),
                "Server error",
            )
            if existing:
                logger.warning("Rejected duplicate username %s", username)
                raise ConflictError("Username is already taken.")

            row = self._build_row(username, self._assign_key(username), data)
            try:
                response = self._execute(
                    self.client.table(self.table).insert(dict(row)),
                    "Server error",
                )
            except ConflictError:
                logger.warning("Insert of %s lost a race, retrying", username)
                continue

            logger.info("Created profile %s", row["profile_key"])
            return row["profile_key"], response.data[0]

        raise ConflictError("Profile key or username already exists.")

    async def list_profiles(self) -> list[Profile]:
        """Get every stored profile, in storage order."""
        response = self._execute(
            self.client.table(self.table).select("*"),
            "Error fetching profiles",
        )
        return response.data or []

    async def get_profile_by_username(self, username: str) -> Profile | None:
        """Get a profile whose username equals the given value exactly.

        Args:
            username: Username as received, compared verbatim.

        Returns:
            Profile | None: The profile row or None if not found.
        """
        logger.debug("Received profile request for username: %s", username)
        return self._first(
            self.client.table(self.table).select("*").eq("username", username),
            "Error fetching profile",
        )

    async def find_profile(self, identifier: str) -> Profile | None:
        """Get a profile by key, ignoring case and space/hyphen differences.

        Rows written before profile keys were stored have no key; for those
        the legacy username match (first hyphen read as a space) is tried.

        Args:
            identifier: Profile key or username from the URL.

        Returns:
            Profile | None: The profile row or None if not found.
        """
        profile = self._first(
            self.client.table(self.table).select("*").eq("profile_key", derive_key(identifier)),
            "Error fetching profile",
        )
        if profile:
            return profile

        return self._first(
            self.client.table(self.table)
            .select("*")
            .is_("profile_key", "null")
            .ilike("username", case_insensitive_pattern(identifier)),
            "Error fetching profile",
        )

    async def get_verification_status(self, profile_key: str) -> dict[str, Any] | None:
        """Get the username and verified flag for a profile key.

        Args:
            profile_key: Profile key from the URL.

        Returns:
            dict | None: Row with username and is_verified, or None if not found.
        """
        return self._first(
            self.client.table(self.table)
            .select("username, is_verified")
            .eq("profile_key", derive_key(profile_key)),
            "Server error",
        )

    async def replace_profile(
        self,
        identifier: str,
        data: ProfileInput,
    ) -> Profile | None:
        """Overwrite every field of an existing profile.

        Fields missing from the replacement are cleared. The profile key is
        reassigned from the new username.

        Args:
            identifier: Profile key or username of the profile to replace.
            data: The complete replacement.

        Returns:
            Profile | None: The updated row or None if not found.

        Raises:
            ValidationError: If the replacement username is missing or too short.
            ConflictError: If the new username belongs to another profile.
        """
        existing = await self.find_profile(identifier)
        if not existing:
            return None

        username = self._validate_username(data.username)
        profile_key = self._assign_key(username, profile_id=existing["id"])

        response = self._execute(
            self.client.table(self.table)
            .update(dict(self._build_row(username, profile_key, data)))
            .eq("id", existing["id"]),
            "Error updating profile",
        )

        if not response.data:
            return None

        logger.info("Replaced profile %s", identifier)
        return response.data[0]

    async def delete_profile(self, identifier: str) -> bool:
        """Delete a profile.

        Args:
            identifier: Profile key or username of the profile to delete.

        Returns:
            bool: True if a profile was deleted.
        """
        existing = await self.find_profile(identifier)
        if not existing:
            return False

        response = self._execute(
            self.client.table(self.table).delete().eq("id", existing["id"]),
            "Server error",
        )

        deleted = bool(response.data)
        if deleted:
            logger.info("Deleted profile %s", identifier)
        return deleted
