"""Handle availability and onboarding API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentAccount, get_auth_provider
from api.v1.dependencies import get_profile_service
from api.v1.routes.auth import session_response
from api.v1.schemas.auth import SessionResponse
from api.v1.schemas.handle import (
    HandleAvailabilityData,
    HandleAvailabilityResponse,
    OnboardingRequest,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService
from infrastructure.auth.jwt_provider import JWTAuthProvider

router = APIRouter(prefix="/handles", tags=["handles"])
onboarding_router = APIRouter(prefix="/onboarding", tags=["handles"])


@router.get(
    "/{candidate}",
    response_model=HandleAvailabilityResponse,
    summary="Check whether a handle can be claimed",
    responses={
        200: {"description": "Normalized handle and its availability"},
        400: {"description": "Handle too short after normalization"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def check_handle(
    request: Request,
    candidate: str,
    service: ProfileService = Depends(get_profile_service),
) -> HandleAvailabilityResponse:
    """Normalize a candidate handle and report availability."""
    availability = await service.check_handle(candidate)
    return HandleAvailabilityResponse(
        data=HandleAvailabilityData(
            handle=availability.handle,
            available=availability.available,
            reason=availability.reason.value if availability.reason else None,
        )
    )


@onboarding_router.post(
    "",
    response_model=SessionResponse,
    summary="Claim a handle",
    responses={
        200: {"description": "Handle claimed; a refreshed session is returned"},
        400: {"description": "Handle too short after normalization"},
        409: {"description": "Handle reserved, taken, or account already has one"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def claim_handle(
    request: Request,
    body: OnboardingRequest,
    account: CurrentAccount,
    service: ProfileService = Depends(get_profile_service),
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> SessionResponse:
    """Claim a handle for the signed-in account. Claims are permanent."""
    updated = await service.claim_handle(account.id, body.handle)
    return session_response(updated, auth_provider)
