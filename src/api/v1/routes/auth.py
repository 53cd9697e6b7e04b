"""Sign-in and session API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import (
    CurrentAccount,
    VerifiedExternalIdentity,
    get_auth_provider,
)
from api.v1.dependencies import get_identity_service
from api.v1.schemas.auth import (
    AccountDetailResponse,
    AccountResponse,
    LoginRequest,
    SessionData,
    SessionResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.account import Account
from domain.services.identity_service import IdentityService
from infrastructure.auth.jwt_provider import JWTAuthProvider

router = APIRouter(prefix="/auth", tags=["auth"])


def session_response(account: Account, auth_provider: JWTAuthProvider) -> SessionResponse:
    """Issue a session token for an account."""
    return SessionResponse(
        data=SessionData(
            access_token=auth_provider.create_token(account),
            account=AccountResponse.from_account(account),
            needs_onboarding=account.needs_onboarding,
        )
    )


@router.post(
    "/login",
    response_model=SessionResponse,
    summary="Sign in with email and password",
    responses={
        200: {"description": "Signed in (or registered when a handle was proposed)"},
        401: {"description": "Wrong password"},
        404: {"description": "No account for this email and no handle proposed"},
        409: {"description": "Email belongs to an external sign-in, or handle taken"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def login(
    request: Request,
    body: LoginRequest,
    service: IdentityService = Depends(get_identity_service),
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> SessionResponse:
    """Sign in locally. Supplying a handle registers an unknown email."""
    account = await service.resolve_local(
        email=body.email,
        password=body.password,
        handle=body.handle,
    )
    return session_response(account, auth_provider)


@router.post(
    "/external",
    response_model=SessionResponse,
    summary="Exchange an external identity token for a session",
    responses={
        200: {"description": "Signed in; account created on first sight"},
        401: {"description": "Identity token missing or invalid"},
        409: {"description": "Email already registered with a password"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def external_sign_in(
    request: Request,
    identity: VerifiedExternalIdentity,
    service: IdentityService = Depends(get_identity_service),
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> SessionResponse:
    """Sign in with a token issued by the external identity provider."""
    account = await service.resolve_external(
        provider=identity.provider,
        external_id=identity.external_id,
        email=identity.email,
        display_name=identity.display_name,
    )
    return session_response(account, auth_provider)


@router.get(
    "/me",
    response_model=AccountDetailResponse,
    summary="Get the signed-in account",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_me(
    request: Request,
    account: CurrentAccount,
) -> AccountDetailResponse:
    """Return the account behind the session token."""
    return AccountDetailResponse(data=AccountResponse.from_account(account))
