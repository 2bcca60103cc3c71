"""Profile API routes."""

from fastapi import APIRouter, status

from src.api.deps import ProfileServiceDep
from src.api.middleware.error_handler import NotFoundError
from src.schemas.profile import (
    MessageResponse,
    ProfileCreatedResponse,
    ProfileInput,
    ProfileResponse,
    VerificationStatusResponse,
)

router = APIRouter(tags=["profiles"])

# Registered last: GET /{profile_key} would otherwise shadow fixed paths such as /ping
lookup_router = APIRouter(tags=["profiles"])


@router.post(
    "/api/save-profile",
    response_model=ProfileCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a profile",
    responses={400: {"description": "Username too short or already taken"}},
)
async def save_profile(data: ProfileInput, service: ProfileServiceDep) -> ProfileCreatedResponse:
    """Create a new profile.

    Args:
        data: Profile fields.
        service: Profile service.

    Returns:
        ProfileCreatedResponse: Confirmation with the profile key.
    """
    profile_key, _ = await service.create_profile(data)
    return ProfileCreatedResponse(message="Profile saved successfully", profile_key=profile_key)


@router.get(
    "/",
    response_model=list[ProfileResponse],
    summary="List all profiles",
)
async def list_profiles(service: ProfileServiceDep) -> list[ProfileResponse]:
    """Return every stored profile."""
    profiles = await service.list_profiles()
    return [ProfileResponse.model_validate(profile) for profile in profiles]


@router.get(
    "/profile/{profile_key}",
    response_model=VerificationStatusResponse,
    summary="Get verification status",
    responses={404: {"description": "Profile not found"}},
)
async def get_verification_status(
    profile_key: str,
    service: ProfileServiceDep,
) -> VerificationStatusResponse:
    """Return the username and verified flag for a profile key.

    Raises:
        NotFoundError: If no profile has this key.
    """
    profile = await service.get_verification_status(profile_key)
    if not profile:
        raise NotFoundError()

    return VerificationStatusResponse.model_validate(profile)


@router.get(
    "/api/profiles/{profile_username}",
    response_model=ProfileResponse,
    summary="Get a profile by username",
    description="Case-insensitive lookup; hyphens and spaces are interchangeable.",
    responses={404: {"description": "Profile not found"}},
)
async def get_profile_by_username(
    profile_username: str,
    service: ProfileServiceDep,
) -> ProfileResponse:
    """Return the full profile matching a username or key in any case.

    Raises:
        NotFoundError: If no profile matches.
    """
    profile = await service.find_profile(profile_username)
    if not profile:
        raise NotFoundError()

    return ProfileResponse.model_validate(profile)


@router.delete(
    "/api/profiles/{profile_key}",
    response_model=MessageResponse,
    summary="Delete a profile",
    responses={404: {"description": "Profile not found"}},
)
async def delete_profile(profile_key: str, service: ProfileServiceDep) -> MessageResponse:
    """Delete the profile matching a key.

    Raises:
        NotFoundError: If no profile matches.
    """
    if not await service.delete_profile(profile_key):
        raise NotFoundError()

    return MessageResponse(message="Profile deleted successfully")


@router.put(
    "/api/update-profile/{profile_key}",
    response_model=ProfileResponse,
    summary="Replace a profile",
    description="Full replace: fields left out of the body are cleared.",
    responses={
        400: {"description": "Username too short or already taken"},
        404: {"description": "Profile not found"},
    },
)
async def update_profile(
    profile_key: str,
    data: ProfileInput,
    service: ProfileServiceDep,
) -> ProfileResponse:
    """Replace the profile matching a key.

    Args:
        profile_key: Key or username of the profile.
        data: The complete replacement profile.
        service: Profile service.

    Returns:
        ProfileResponse: The updated profile.

    Raises:
        NotFoundError: If no profile matches.
    """
    profile = await service.replace_profile(profile_key, data)
    if not profile:
        raise NotFoundError()

    return ProfileResponse.model_validate(profile)


@lookup_router.get(
    "/{profile_key}",
    response_model=ProfileResponse,
    summary="Get a profile by exact username",
    responses={404: {"description": "Profile not found"}},
)
async def get_profile(profile_key: str, service: ProfileServiceDep) -> ProfileResponse:
    """Return the profile whose username equals the path segment exactly.

    Raises:
        NotFoundError: If no profile has this exact username.
    """
    profile = await service.get_profile_by_username(profile_key)
    if not profile:
        raise NotFoundError()

    return ProfileResponse.model_validate(profile)
