"""Click analytics API routes."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_analytics_service
from api.v1.schemas.analytics import ClickEvent, SuccessResponse
from core.rate_limit import CLICK_LIMIT, limiter
from domain.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post(
    "/click",
    response_model=SuccessResponse,
    summary="Record a click",
    responses={
        200: {"description": "Accepted, whether or not the item was found"},
        400: {"description": "Unknown item kind"},
    },
)
@limiter.limit(CLICK_LIMIT)  # type: ignore[untyped-decorator]
async def record_click(
    request: Request,
    body: ClickEvent,
    service: AnalyticsService = Depends(get_analytics_service),
) -> SuccessResponse:
    """Count one visitor click. Anonymous; never fails the visitor."""
    await service.record_click(body.handle, body.item_id, body.kind)
    return SuccessResponse()
