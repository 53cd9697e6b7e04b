"""Import enrichment API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentAccount
from api.v1.dependencies import get_importer
from api.v1.schemas.imports import ImportRequest, ImportResponse
from core.exceptions import ImportFailedError, UnsupportedImportSourceError
from core.rate_limit import WRITE_LIMIT, limiter
from domain.entities.imports import ImportOutcome
from infrastructure.importers.linktree import LinktreeImporter, is_supported_source

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post(
    "",
    response_model=ImportResponse,
    summary="Import another link-in-bio page",
    responses={
        200: {"description": "Imported data; is_mock flags placeholder content"},
        400: {"description": "Source is not a Linktree URL"},
        502: {"description": "Source could not be fetched"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def import_source(
    request: Request,
    body: ImportRequest,
    account: CurrentAccount,
    importer: LinktreeImporter = Depends(get_importer),
) -> ImportResponse:
    """
    Fetch a Linktree page for the editor to merge into its draft.

    Nothing is saved; the result only seeds the owner's draft.
    """
    if not is_supported_source(body.url):
        raise UnsupportedImportSourceError(body.url)

    result = await importer.fetch(body.url)
    if result.outcome == ImportOutcome.FAILED:
        raise ImportFailedError(result.reason or "unknown error")
    return ImportResponse.from_result(result)
