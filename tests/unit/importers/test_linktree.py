"""Unit tests for the Linktree importer."""

import httpx
import pytest

from domain.entities.imports import ImportOutcome
from infrastructure.importers.linktree import (
    MOCK_RESULT_TITLE,
    LinktreeImporter,
    is_supported_source,
)

PAGE = """
<html>
  <head>
    <title>Fallback title | Linktree</title>
    <meta property="og:title" content="Alice Smith" />
    <meta property="og:description" content="Designer and maker" />
    <meta property="og:image" content="https://cdn.example.com/alice.png" />
  </head>
  <body>
    <a href="https://alice.shop">My Shop</a>
    <a href="https://alice.blog">Blog</a>
    <a href="https://alice.shop">My Shop again</a>
    <a href="https://linktr.ee/s/about">Linktree</a>
    <a href="/relative">Relative path</a>
    <a href="https://x.example.com">X</a>
    <a href="https://long.example.com">This anchor text is far too long to be a real link button</a>
  </body>
</html>
"""


def _importer(handler, **kwargs) -> LinktreeImporter:
    return LinktreeImporter(transport=httpx.MockTransport(handler), **kwargs)


class TestIsSupportedSource:
    @pytest.mark.parametrize(
        "url",
        ["https://linktr.ee/alice", "http://www.linktr.ee/alice", "  https://LINKTR.EE/alice  "],
    )
    def test_supported(self, url: str):
        assert is_supported_source(url)

    @pytest.mark.parametrize(
        "url",
        [
            "https://beacons.ai/alice",
            "https://linktr.ee.evil.com/alice",
            "ftp://linktr.ee/alice",
            "linktr.ee/alice",
            "",
        ],
    )
    def test_unsupported(self, url: str):
        assert not is_supported_source(url)


class TestFetch:
    @pytest.mark.asyncio
    async def test_parses_metadata_and_links(self):
        requested: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request)
            return httpx.Response(200, text=PAGE)

        result = await _importer(handler).fetch("https://linktr.ee/alice")

        assert result.outcome == ImportOutcome.REAL
        assert result.title == "Alice Smith"
        assert result.description == "Designer and maker"
        assert result.image == "https://cdn.example.com/alice.png"
        assert [(l.title, l.url) for l in result.links] == [
            ("My Shop", "https://alice.shop"),
            ("Blog", "https://alice.blog"),
        ]
        assert "Mozilla" in requested[0].headers["User-Agent"]

    @pytest.mark.asyncio
    async def test_caps_link_count(self):
        anchors = "".join(f'<a href="https://site{n}.example.com">Link {n}</a>' for n in range(20))

        result = await _importer(
            lambda request: httpx.Response(200, text=f"<html><body>{anchors}</body></html>"),
            max_links=5,
        ).fetch("https://linktr.ee/many")

        assert len(result.links) == 5

    @pytest.mark.asyncio
    async def test_title_fallbacks(self):
        plain = await _importer(
            lambda request: httpx.Response(200, text="<html><head><title>Page</title></head></html>")
        ).fetch("https://linktr.ee/plain")
        bare = await _importer(
            lambda request: httpx.Response(200, text="<html><body></body></html>")
        ).fetch("https://linktr.ee/bare")

        assert plain.title == "Page"
        assert bare.title == "Unknown User"
        assert bare.outcome == ImportOutcome.REAL
        assert bare.links == ()

    @pytest.mark.asyncio
    async def test_unsupported_source_fails_without_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        result = await _importer(handler).fetch("https://example.com/alice")

        assert result.outcome == ImportOutcome.FAILED
        assert result.reason

    @pytest.mark.asyncio
    async def test_unreachable_returns_flagged_mock(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _importer(handler).fetch("https://linktr.ee/alice")

        assert result.outcome == ImportOutcome.MOCK
        assert result.is_mock
        assert result.title == MOCK_RESULT_TITLE
        assert len(result.links) == 4

    @pytest.mark.asyncio
    async def test_http_error_status_returns_mock(self):
        result = await _importer(lambda request: httpx.Response(404)).fetch(
            "https://linktr.ee/missing"
        )

        assert result.is_mock

    @pytest.mark.asyncio
    async def test_unreachable_without_fallback_fails(self):
        result = await _importer(
            lambda request: httpx.Response(503), mock_fallback=False
        ).fetch("https://linktr.ee/alice")

        assert result.outcome == ImportOutcome.FAILED
        assert "Could not fetch" in (result.reason or "")
