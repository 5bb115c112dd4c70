from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .urls import get_domain

URL_RE = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)
TRAILING_PUNCTUATION = ".,;:!?)]}'\""

BLOCK_TAGS = {"script", "style", "noscript"}

TITLE_KEYS = [("property", "og:title"), ("name", "twitter:title")]
DESCRIPTION_KEYS = [("property", "og:description"), ("name", "description"), ("name", "twitter:description")]
IMAGE_KEYS = [("property", "og:image"), ("property", "og:image:url"), ("name", "twitter:image")]


@dataclass
class PageMetadata:
    url: str
    title: str = ""
    description: str = ""
    site_name: str = ""
    images: list[str] = field(default_factory=list)
    favicons: list[str] = field(default_factory=list)
    media_type: str = "website"

    def to_dict(self) -> dict:
        return asdict(self)


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def extract_urls(text: str) -> list[str]:
    if not text:
        return []
    seen: set[str] = set()
    urls: list[str] = []
    for match in URL_RE.finditer(text):
        url = match.group(0).rstrip(TRAILING_PUNCTUATION)
        if not url or url in seen:
            continue
        seen.add(url)
        urls.append(url)
    return urls


def _meta_content(soup: BeautifulSoup, keys: list[tuple[str, str]]) -> str:
    for attr, value in keys:
        tag = soup.find("meta", attrs={attr: value})
        if tag and tag.get("content"):
            return _clean_text(tag["content"])
    return ""


def _meta_contents(soup: BeautifulSoup, keys: list[tuple[str, str]]) -> list[str]:
    values: list[str] = []
    for attr, value in keys:
        for tag in soup.find_all("meta", attrs={attr: value}):
            content = (tag.get("content") or "").strip()
            if content:
                values.append(content)
    return values


def _unique_absolute(urls: list[str], base_url: str) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for url in urls:
        absolute = urljoin(base_url, url)
        if absolute in seen:
            continue
        seen.add(absolute)
        result.append(absolute)
    return result


def _favicons(soup: BeautifulSoup) -> list[str]:
    icons: list[str] = []
    for link in soup.find_all("link", href=True):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if any("icon" in value.lower() for value in rel):
            icons.append(link["href"].strip())
    return icons or ["/favicon.ico"]


def extract_metadata(html: str, base_url: str) -> PageMetadata:
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(list(BLOCK_TAGS)):
        tag.decompose()

    title = _meta_content(soup, TITLE_KEYS)
    if not title and soup.title and soup.title.string:
        title = _clean_text(soup.title.string)

    return PageMetadata(
        url=base_url,
        title=title,
        description=_meta_content(soup, DESCRIPTION_KEYS),
        site_name=_meta_content(soup, [("property", "og:site_name")]) or get_domain(base_url),
        images=_unique_absolute(_meta_contents(soup, IMAGE_KEYS), base_url),
        favicons=_unique_absolute(_favicons(soup), base_url),
        media_type=_meta_content(soup, [("property", "og:type")]) or "website",
    )


def clean_metadata(data: dict, url: str) -> PageMetadata:
    """Coerce raw metadata from any fetcher into ``PageMetadata``."""

    def _text(key: str) -> str:
        value = data.get(key)
        return value.strip() if isinstance(value, str) else ""

    def _strings(key: str) -> list[str]:
        values = data.get(key)
        if not isinstance(values, list):
            return []
        return [value for value in values if isinstance(value, str) and value]

    resolved = _text("url") or url
    return PageMetadata(
        url=resolved,
        title=_text("title"),
        description=_text("description"),
        site_name=_text("site_name") or get_domain(resolved),
        images=_strings("images"),
        favicons=_strings("favicons"),
        media_type=_text("media_type") or "website",
    )
