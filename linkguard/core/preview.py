from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Iterable

from .. import config
from .classifier import UrlClassifier
from .errors import InvalidUrlError, LinkError, PreviewFetchError, UnsafeUrlError
from .fetch import HttpxPreviewFetcher, PreviewFetcher
from .parse import clean_metadata

logger = logging.getLogger(__name__)


@dataclass
class PreviewResult:
    url: str
    original_url: str
    title: str
    platform: str
    platform_icon: str
    is_known_platform: bool
    description: str = ""
    site_name: str = ""
    images: list[str] = field(default_factory=list)
    favicons: list[str] = field(default_factory=list)
    media_type: str = "website"
    embed_url: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class PreviewResolver:
    """Builds link cards: screen the URL, fetch its metadata, tag the platform.

    ``resolve`` never raises. Invalid, unsafe, failed or timed-out links come
    back as a fallback result whose title is the original URL and whose
    ``error`` explains what happened.
    """

    def __init__(
        self,
        classifier: UrlClassifier | None = None,
        fetcher: PreviewFetcher | None = None,
        timeout_s: float = config.PREVIEW_TIMEOUT_S,
        cache_ttl_s: float = config.PREVIEW_CACHE_TTL_S,
        cache_max_entries: int = config.PREVIEW_CACHE_MAX_ENTRIES,
        concurrency: int = config.PREVIEW_CONCURRENCY,
    ):
        self.classifier = classifier or UrlClassifier()
        self.fetcher = fetcher or HttpxPreviewFetcher()
        self.timeout_s = timeout_s
        self.cache_ttl_s = cache_ttl_s
        self.cache_max_entries = cache_max_entries
        self.concurrency = max(1, concurrency)
        self._cache: dict[str, tuple[float, PreviewResult]] = {}

    def _cached(self, url: str) -> PreviewResult | None:
        entry = self._cache.get(url)
        if entry is None:
            return None
        stored_at, result = entry
        if time.monotonic() - stored_at >= self.cache_ttl_s:
            del self._cache[url]
            return None
        return result

    def _store(self, url: str, result: PreviewResult) -> None:
        now = time.monotonic()
        expired = [key for key, (stored_at, _) in self._cache.items() if now - stored_at >= self.cache_ttl_s]
        for key in expired:
            del self._cache[key]
        self._cache.pop(url, None)
        # Dicts keep insertion order, so the first keys are the oldest.
        while self._cache and len(self._cache) >= self.cache_max_entries:
            del self._cache[next(iter(self._cache))]
        if self.cache_max_entries > 0:
            self._cache[url] = (now, result)

    def clear_cache(self) -> None:
        self._cache.clear()

    def fallback(self, url: str, error: str) -> PreviewResult:
        platform = self.classifier.identify_platform(url)
        return PreviewResult(
            url=self.classifier.normalize(url),
            original_url=url,
            title=url,
            platform=platform.platform,
            platform_icon=platform.platform_icon,
            is_known_platform=platform.is_known_platform,
            embed_url=self.classifier.get_embed_url(url),
            error=error,
        )

    async def _fetch(self, url: str) -> PreviewResult:
        if not self.classifier.is_valid_url(url):
            raise InvalidUrlError("Invalid URL format")

        verdict = self.classifier.screen(url)
        if verdict.malicious:
            logger.info("Not previewing %s: %s", url, verdict.reason)
            raise UnsafeUrlError("URL flagged as potentially unsafe")

        normalized = self.classifier.normalize(url)
        target = self.classifier.sanitize_url(url) or normalized
        try:
            raw = await asyncio.wait_for(self.fetcher.fetch(target), timeout=self.timeout_s)
        except asyncio.TimeoutError as exc:
            raise PreviewFetchError("Preview request timed out") from exc
        except LinkError:
            raise
        except Exception as exc:
            raise PreviewFetchError(f"Preview fetch failed ({exc.__class__.__name__})") from exc

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise PreviewFetchError(f"Preview fetch returned {type(raw).__name__}, expected metadata")

        metadata = clean_metadata(raw, target)
        platform = self.classifier.identify_platform(normalized)
        return PreviewResult(
            url=normalized,
            original_url=url,
            title=metadata.title,
            description=metadata.description,
            site_name=metadata.site_name,
            images=metadata.images,
            favicons=metadata.favicons,
            media_type=metadata.media_type,
            platform=platform.platform,
            platform_icon=platform.platform_icon,
            is_known_platform=platform.is_known_platform,
            embed_url=self.classifier.get_embed_url(url),
        )

    async def resolve(self, url: str, use_cache: bool = True) -> PreviewResult:
        if use_cache:
            cached = self._cached(url)
            if cached is not None:
                return cached

        try:
            result = await self._fetch(url)
        except LinkError as exc:
            logger.warning("Error getting link preview for %s: %s", url, exc)
            return self.fallback(url, str(exc))

        if use_cache:
            self._store(url, result)
        return result

    async def resolve_many(self, urls: Iterable[str], use_cache: bool = True) -> dict[str, PreviewResult]:
        seen: set[str] = set()
        valid: list[str] = []
        for url in urls:
            if url in seen:
                continue
            seen.add(url)
            if self.classifier.is_valid_url(url):
                valid.append(url)

        limit = asyncio.Semaphore(self.concurrency)

        async def bounded(url: str) -> PreviewResult:
            async with limit:
                return await self.resolve(url, use_cache=use_cache)

        results = await asyncio.gather(*(bounded(url) for url in valid))
        return dict(zip(valid, results))
