"""Import enrichment from public Linktree pages.

Scraping is best effort. Pages rendered client-side often yield only the
og: metadata and no links; that still counts as a real import.
"""

from urllib.parse import urlparse

import httpx
import structlog
from bs4 import BeautifulSoup

from core.config import settings
from domain.entities.imports import ImportedLink, ImportOutcome, ImportResult

logger = structlog.get_logger()

SUPPORTED_HOST = "linktr.ee"

MIN_LINK_TEXT = 3
MAX_LINK_TEXT = 49

# Shown to the owner, clearly flagged, when the source can't be reached
MOCK_RESULT_TITLE = "Gary Vaynerchuk (Mock)"
MOCK_RESULT_DESCRIPTION = "Chairman of VaynerX, CEO of VaynerMedia. 5x NYT Bestselling Author."
MOCK_RESULT_LINKS = (
    ImportedLink("My New Book", "https://garyvaynerchuk.com/books"),
    ImportedLink("VaynerMedia", "https://vaynermedia.com"),
    ImportedLink("VeeFriends", "https://veefriends.com"),
    ImportedLink("Podcast", "https://garyvaynerchuk.com/podcast"),
)


def is_supported_source(url: str) -> bool:
    """Only linktr.ee pages (with or without www.) are importable."""
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return parsed.scheme in ("http", "https") and host == SUPPORTED_HOST


class LinktreeImporter:
    """Fetches a Linktree page and extracts title, bio, avatar and links."""

    def __init__(
        self,
        timeout: float = settings.import_timeout_seconds,
        max_links: int = settings.import_max_links,
        mock_fallback: bool = settings.import_mock_fallback,
        user_agent: str = settings.import_user_agent,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_links = max_links
        self._mock_fallback = mock_fallback
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
        self._transport = transport

    async def fetch(self, url: str) -> ImportResult:
        """Import a page. Never raises for upstream trouble.

        Returns a FAILED result for unsupported sources, and for unreachable
        pages when the mock fallback is switched off.
        """
        url = url.strip()
        if not is_supported_source(url):
            return ImportResult.failed(url, "Only Linktree URLs are supported")

        try:
            async with httpx.AsyncClient(
                headers=self._headers,
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("import_fetch_failed", url=url, error=str(exc))
            if self._mock_fallback:
                return self._mock(url)
            return ImportResult.failed(url, f"Could not fetch source page: {exc}")

        result = self._parse(url, response.text)
        logger.info("import_parsed", url=url, links=len(result.links))
        return result

    def _parse(self, url: str, html: str) -> ImportResult:
        soup = BeautifulSoup(html, "html.parser")

        title = (
            self._meta(soup, "og:title")
            or (soup.title.get_text(strip=True) if soup.title else "")
            or "Unknown User"
        )

        links: list[ImportedLink] = []
        seen: set[str] = set()
        for anchor in soup.find_all("a", href=True):
            href = str(anchor["href"]).strip()
            text = anchor.get_text(" ", strip=True)
            if not href.startswith("http") or SUPPORTED_HOST in href or href in seen:
                continue
            if not MIN_LINK_TEXT <= len(text) <= MAX_LINK_TEXT:
                continue
            seen.add(href)
            links.append(ImportedLink(title=text, url=href))
            if len(links) >= self._max_links:
                break

        return ImportResult(
            outcome=ImportOutcome.REAL,
            source_url=url,
            title=title,
            description=self._meta(soup, "og:description"),
            image=self._meta(soup, "og:image"),
            links=tuple(links),
        )

    @staticmethod
    def _meta(soup: BeautifulSoup, prop: str) -> str:
        tag = soup.find("meta", attrs={"property": prop})
        if tag is None:
            return ""
        return str(tag.get("content") or "").strip()

    def _mock(self, url: str) -> ImportResult:
        return ImportResult(
            outcome=ImportOutcome.MOCK,
            source_url=url,
            title=MOCK_RESULT_TITLE,
            description=MOCK_RESULT_DESCRIPTION,
            links=MOCK_RESULT_LINKS[: self._max_links],
        )
