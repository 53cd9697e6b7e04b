"""Profile API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentAccount
from api.v1.dependencies import get_profile_service, get_public_profile_service
from api.v1.schemas.profile import (
    ProfileDetailResponse,
    ProfileEditRequest,
    ProfileResponse,
)
from core.exceptions import ProfileNotFoundError
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService
from domain.services.public_profile_service import PublicProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])
me_router = APIRouter(prefix="/me", tags=["profiles"])


@router.get(
    "/{handle}",
    response_model=ProfileDetailResponse,
    summary="Get a public profile",
    responses={
        200: {"description": "Public projection of the profile"},
        404: {"description": "No such handle; details.claimable says if it is free"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_public_profile(
    request: Request,
    handle: str,
    service: PublicProfileService = Depends(get_public_profile_service),
) -> ProfileDetailResponse:
    """Render a profile for anonymous visitors."""
    projection = await service.render_profile(handle)
    if projection is None:
        raise ProfileNotFoundError(handle, claimable=await service.is_claimable(handle))
    return ProfileDetailResponse(data=ProfileResponse.from_entity(projection))


@router.put(
    "/{handle}",
    response_model=ProfileDetailResponse,
    summary="Save a profile",
    responses={
        200: {"description": "Stored profile after the save"},
        403: {"description": "Profile belongs to another account"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def save_profile(
    request: Request,
    handle: str,
    body: ProfileEditRequest,
    account: CurrentAccount,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """
    Replace every editable field of the owner's profile.

    Click counters of items that keep their id are preserved; the last save
    wins.
    """
    profile = await service.replace_editable_fields(
        handle,
        body.to_edit(),
        account_id=account.id,
    )
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@me_router.get(
    "/profile",
    response_model=ProfileDetailResponse,
    summary="Get the signed-in account's profile",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    account: CurrentAccount,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Fetch the editor copy, click counters included."""
    profile = await service.find_by_account(account.id)
    if profile is None:
        raise ProfileNotFoundError(account.handle or str(account.id))
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))
