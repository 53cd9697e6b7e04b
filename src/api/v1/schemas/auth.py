"""Pydantic schemas for sign-in and session API."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from domain.entities.account import Account


class LoginRequest(BaseModel):
    """Schema for local email/password sign-in.

    Supplying ``handle`` registers a new account when the email is unknown.
    """

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    handle: str | None = Field(None, max_length=64)


class AccountResponse(BaseModel):
    """Schema for Account response. Credential material is never included."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "alice@example.com",
                "handle": "alice",
                "provider": "local",
            }
        },
    )

    id: UUID
    email: str
    handle: str | None = None
    provider: str

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls.model_validate(account.to_public())


class AccountDetailResponse(BaseModel):
    """Schema for single Account."""

    data: AccountResponse


class SessionData(BaseModel):
    """A freshly issued session."""

    access_token: str
    token_type: str = "bearer"
    account: AccountResponse
    needs_onboarding: bool


class SessionResponse(BaseModel):
    """Schema for sign-in responses."""

    data: SessionData
