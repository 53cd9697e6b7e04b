"""Click analytics accumulator."""

from uuid import UUID

import structlog

from core.exceptions import ValidationError
from domain.entities.profile import ItemKind
from domain.services.profile_service import ProfileService

logger = structlog.get_logger()


def parse_item_kind(kind: str | ItemKind) -> ItemKind:
    try:
        return ItemKind(kind)
    except ValueError:
        raise ValidationError(
            "Invalid item kind",
            {"kind": str(kind), "allowed": [k.value for k in ItemKind]},
        ) from None


class AnalyticsService:
    """Records visitor clicks on links and store items.

    One attempt per click, never retried: a transient failure undercounts
    rather than risking a double count, and never reaches the visitor.
    """

    def __init__(self, profile_service: ProfileService) -> None:
        self._profiles = profile_service

    async def record_click(
        self,
        handle: str,
        item_id: UUID | str | None,
        kind: str | ItemKind,
    ) -> None:
        item_kind = parse_item_kind(kind)
        if not item_id:
            return

        try:
            target = item_id if isinstance(item_id, UUID) else UUID(str(item_id))
        except ValueError:
            logger.debug("click_ignored", reason="malformed_item_id", item_id=str(item_id))
            return

        try:
            matched = await self._profiles.increment_item_click(handle, target, item_kind)
        except Exception:
            logger.warning(
                "click_record_failed",
                handle=handle,
                item_id=str(target),
                kind=item_kind.value,
                exc_info=True,
            )
            return

        if matched:
            logger.debug("click_recorded", handle=handle, item_id=str(target), kind=item_kind.value)
        else:
            logger.info("click_target_missing", handle=handle, item_id=str(target), kind=item_kind.value)
