"""Pydantic schemas for handle availability and onboarding."""

from pydantic import BaseModel, Field


class HandleAvailabilityData(BaseModel):
    """Availability of one normalized handle."""

    handle: str
    available: bool
    reason: str | None = None


class HandleAvailabilityResponse(BaseModel):
    """Schema for availability checks."""

    data: HandleAvailabilityData


class OnboardingRequest(BaseModel):
    """Schema for claiming a handle."""

    handle: str = Field(..., min_length=1, max_length=64)
