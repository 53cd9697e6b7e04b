"""Pydantic schemas for click analytics."""

from pydantic import AliasChoices, BaseModel, Field


class ClickEvent(BaseModel):
    """A visitor click on a link or store item.

    Field names used by older visitor pages (``username``, ``itemId``,
    ``type``) are accepted too.
    """

    handle: str = Field(..., validation_alias=AliasChoices("handle", "username"))
    item_id: str | None = Field(None, validation_alias=AliasChoices("item_id", "itemId"))
    kind: str = Field(..., validation_alias=AliasChoices("kind", "type"))


class SuccessResponse(BaseModel):
    """Acknowledgement that carries no data."""

    success: bool = True
