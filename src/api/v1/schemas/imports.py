"""Pydantic schemas for import enrichment."""

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.imports import ImportResult


class ImportRequest(BaseModel):
    """Schema for importing another link-in-bio page."""

    url: str = Field(..., min_length=1, max_length=2048)


class ImportedLinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    url: str


class ImportedProfileResponse(BaseModel):
    """Data pulled from the source page."""

    model_config = ConfigDict(from_attributes=True)

    source_url: str
    title: str
    description: str
    image: str
    links: list[ImportedLinkResponse]


class ImportResponse(BaseModel):
    """Schema for import results.

    ``is_mock`` marks placeholder data produced when the source could not be
    reached; editors must warn the owner before merging it.
    """

    data: ImportedProfileResponse
    is_mock: bool = False

    @classmethod
    def from_result(cls, result: ImportResult) -> "ImportResponse":
        return cls(
            data=ImportedProfileResponse.model_validate(result),
            is_mock=result.is_mock,
        )
