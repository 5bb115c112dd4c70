from __future__ import annotations

import logging
from typing import Protocol

import httpx

from .. import config
from .errors import PreviewFetchError
from .parse import extract_metadata

logger = logging.getLogger(__name__)

MEDIA_TYPES = {"image", "video", "audio"}


class PreviewFetcher(Protocol):
    async def fetch(self, url: str) -> dict:
        ...


def _media_type(content_type: str) -> str:
    major = content_type.split("/", 1)[0]
    return major if major in MEDIA_TYPES else "application"


class HttpxPreviewFetcher:
    """Fetches a page and returns its preview metadata as a plain dict."""

    def __init__(
        self,
        timeout_s: float = config.FETCH_TIMEOUT_S,
        user_agent: str = config.USER_AGENT,
        max_redirects: int = config.MAX_REDIRECTS,
        max_bytes: int = config.MAX_RESPONSE_BYTES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self.max_redirects = max_redirects
        self.max_bytes = max_bytes
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout_s,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    async def fetch(self, url: str) -> dict:
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    final_url = str(response.url)
                    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()

                    if content_type and "html" not in content_type:
                        media_type = _media_type(content_type)
                        return {
                            "url": final_url,
                            "title": "",
                            "description": "",
                            "media_type": media_type,
                            "images": [final_url] if media_type == "image" else [],
                            "favicons": [],
                        }

                    body = bytearray()
                    async for chunk in response.aiter_bytes():
                        body.extend(chunk)
                        if len(body) >= self.max_bytes:
                            break
                    html = bytes(body[: self.max_bytes]).decode(response.encoding or "utf-8", errors="replace")
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise PreviewFetchError(f"Could not fetch link ({exc.__class__.__name__})") from exc

        logger.debug("Fetched %d bytes from %s", len(body), final_url)
        return extract_metadata(html, final_url).to_dict()
