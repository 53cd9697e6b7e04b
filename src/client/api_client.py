"""Async HTTP client for the Biolink API.

Editors use it to drive a ``DraftSession`` (``open_draft`` wires ``save`` in
as the draft's writer); visitor pages use ``record_click``.
"""

from typing import Any
from uuid import UUID

import httpx
import structlog

from domain.documents import edit_to_document, profile_from_document
from domain.draft import DraftSession
from domain.entities.imports import ImportedLink, ImportOutcome, ImportResult
from domain.entities.profile import ItemKind, Profile, ProfileEdit
from domain.handles import HandleAvailability, UnavailableReason

logger = structlog.get_logger()


class BiolinkAPIError(Exception):
    """Non-2xx response, carrying the server's error body."""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(f"{status_code} {error_code}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "BiolinkAPIError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls(
            status_code=response.status_code,
            error_code=str(body.get("error_code", "HTTP_ERROR")),
            message=str(body.get("message") or response.reason_phrase),
            details=body.get("details"),
        )


class BiolinkClient:
    """Thin wrapper over the v1 routes. One instance per signed-in user."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx.AsyncClient instance."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/api/v1",
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BiolinkClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        client = await self.get_client()
        headers = kwargs.pop("headers", {})
        if self.token:
            headers.setdefault("Authorization", f"Bearer {self.token}")
        response = await client.request(method, url, headers=headers, **kwargs)
        if response.is_error:
            raise BiolinkAPIError.from_response(response)
        return response.json()  # type: ignore[no-any-return]

    # --- identity ---

    async def sign_in(self, email: str, password: str, handle: str | None = None) -> dict[str, Any]:
        """Local sign-in; proposing a handle registers an unknown email."""
        body = await self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password, "handle": handle},
        )
        return self._adopt_session(body)

    async def sign_in_external(self, identity_token: str) -> dict[str, Any]:
        body = await self._request(
            "POST",
            "/auth/external",
            headers={"Authorization": f"Bearer {identity_token}"},
        )
        return self._adopt_session(body)

    async def claim_handle(self, candidate: str) -> dict[str, Any]:
        body = await self._request("POST", "/onboarding", json={"handle": candidate})
        return self._adopt_session(body)

    async def check_handle(self, candidate: str) -> HandleAvailability:
        data = (await self._request("GET", f"/handles/{candidate}"))["data"]
        reason = data.get("reason")
        return HandleAvailability(
            handle=data["handle"],
            available=data["available"],
            reason=UnavailableReason(reason) if reason else None,
        )

    def _adopt_session(self, body: dict[str, Any]) -> dict[str, Any]:
        data: dict[str, Any] = body["data"]
        self.token = data["access_token"]
        return data

    # --- profiles ---

    async def fetch_profile(self, handle: str) -> Profile | None:
        """Public page data, or None for an unknown handle."""
        try:
            data = (await self._request("GET", f"/profiles/{handle}"))["data"]
        except BiolinkAPIError as exc:
            if exc.status_code == 404:
                return None
            raise
        return profile_from_document(data)

    async def fetch_my_profile(self) -> Profile:
        data = (await self._request("GET", "/me/profile"))["data"]
        return profile_from_document(data)

    async def save(self, handle: str, edit: ProfileEdit) -> Profile:
        """Replace the editable fields; usable as a DraftSession writer."""
        data = (
            await self._request("PUT", f"/profiles/{handle}", json=edit_to_document(edit))
        )["data"]
        return profile_from_document(data)

    async def open_draft(self) -> DraftSession:
        """Fetch the signed-in owner's profile and start editing it."""
        return DraftSession(await self.fetch_my_profile(), self.save)

    # --- analytics ---

    async def record_click(
        self, handle: str, item_id: UUID | str | None, kind: ItemKind | str
    ) -> None:
        """Report a click. Never raises: navigation must not wait on analytics.

        Items without an id have never been saved and are not reported.
        """
        if not item_id:
            return
        try:
            await self._request(
                "POST",
                "/analytics/click",
                json={"handle": handle, "item_id": str(item_id), "kind": str(kind)},
            )
        except (httpx.HTTPError, BiolinkAPIError, ValueError) as exc:
            logger.debug("click_report_failed", handle=handle, item_id=str(item_id), error=str(exc))

    # --- import ---

    async def import_source(self, url: str) -> ImportResult:
        body = await self._request("POST", "/imports", json={"url": url})
        data = body["data"]
        return ImportResult(
            outcome=ImportOutcome.MOCK if body.get("is_mock") else ImportOutcome.REAL,
            source_url=data["source_url"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            image=data.get("image", ""),
            links=tuple(ImportedLink(link["title"], link["url"]) for link in data.get("links", [])),
        )
