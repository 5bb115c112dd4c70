"""
Tests for the httpx-backed preview fetcher, using httpx.MockTransport.
"""

import httpx
import pytest

from linkguard.core.errors import PreviewFetchError
from linkguard.core.fetch import HttpxPreviewFetcher

PAGE = b"""<html><head>
<title>Example page</title>
<meta property="og:description" content="Described">
<meta property="og:image" content="/cover.jpg">
</head><body></body></html>"""


def _html(content=PAGE, status=200):
    return httpx.Response(status, headers={"content-type": "text/html; charset=utf-8"}, content=content)


class TestHttpxPreviewFetcher:

    @pytest.mark.asyncio
    async def test_fetches_html_metadata(self):
        seen = {}

        def handler(request):
            seen["user_agent"] = request.headers.get("user-agent")
            return _html()

        fetcher = HttpxPreviewFetcher(user_agent="TestAgent/1.0", transport=httpx.MockTransport(handler))
        data = await fetcher.fetch("https://example.com/page")

        assert seen["user_agent"] == "TestAgent/1.0"
        assert data["url"] == "https://example.com/page"
        assert data["title"] == "Example page"
        assert data["description"] == "Described"
        assert data["images"] == ["https://example.com/cover.jpg"]
        assert data["site_name"] == "example.com"

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/start":
                return httpx.Response(302, headers={"location": "https://example.com/final"})
            return _html()

        fetcher = HttpxPreviewFetcher(transport=httpx.MockTransport(handler))
        data = await fetcher.fetch("https://example.com/start")

        assert data["url"] == "https://example.com/final"

    @pytest.mark.asyncio
    async def test_redirect_limit(self):
        def handler(request):
            hop = int(request.url.params.get("hop", "0"))
            return httpx.Response(302, headers={"location": f"https://example.com/loop?hop={hop + 1}"})

        fetcher = HttpxPreviewFetcher(max_redirects=3, transport=httpx.MockTransport(handler))
        with pytest.raises(PreviewFetchError, match="TooManyRedirects"):
            await fetcher.fetch("https://example.com/loop")

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        fetcher = HttpxPreviewFetcher(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
        with pytest.raises(PreviewFetchError, match="HTTPStatusError"):
            await fetcher.fetch("https://example.com/missing")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        fetcher = HttpxPreviewFetcher(transport=httpx.MockTransport(handler))
        with pytest.raises(PreviewFetchError, match="ConnectError"):
            await fetcher.fetch("https://example.com/")

    @pytest.mark.asyncio
    async def test_image_response(self):
        def handler(request):
            return httpx.Response(200, headers={"content-type": "image/png"}, content=b"\x89PNG")

        fetcher = HttpxPreviewFetcher(transport=httpx.MockTransport(handler))
        data = await fetcher.fetch("https://example.com/pic.png")

        assert data["media_type"] == "image"
        assert data["images"] == ["https://example.com/pic.png"]

    @pytest.mark.asyncio
    async def test_other_binary_response(self):
        def handler(request):
            return httpx.Response(200, headers={"content-type": "application/pdf"}, content=b"%PDF")

        fetcher = HttpxPreviewFetcher(transport=httpx.MockTransport(handler))
        data = await fetcher.fetch("https://example.com/doc.pdf")

        assert data["media_type"] == "application"
        assert data["images"] == []

    @pytest.mark.asyncio
    async def test_body_is_capped(self):
        big = b"<html><head><title>Top</title></head><body>" + b"x" * 5000 + b"<title>Late</title></body></html>"
        fetcher = HttpxPreviewFetcher(max_bytes=100, transport=httpx.MockTransport(lambda request: _html(big)))
        data = await fetcher.fetch("https://example.com/big")

        assert data["title"] == "Top"
