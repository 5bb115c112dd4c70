from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
HOST_RE = re.compile(r"^[a-z0-9._-]+$")

WEB_SCHEMES = {"http", "https"}
DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass
class ParsedUrl:
    scheme: str
    hostname: str
    port: int | None
    userinfo: str
    path: str
    query: str
    fragment: str


def normalize_url(url) -> str:
    if not url or not isinstance(url, str):
        return ""
    url = url.strip()
    if not url:
        return ""
    if not SCHEME_RE.match(url):
        return f"https://{url}"
    return url


def _ascii_host(hostname: str) -> str:
    if hostname.isascii():
        return hostname.lower()
    # IDNA failures surface as UnicodeError, a ValueError subclass.
    return hostname.encode("idna").decode("ascii").lower()


def _slash_backslashes(url: str) -> str:
    if "\\" not in url or not SCHEME_RE.match(url):
        return url
    ends = [i for i in (url.find("?"), url.find("#")) if i != -1]
    cut = min(ends) if ends else len(url)
    return url[:cut].replace("\\", "/") + url[cut:]


def parse_url(url: str) -> ParsedUrl:
    """Split ``url`` into its parts, raising ``ValueError`` when it is malformed.

    The hostname is lower-cased and IDNA encoded; an out-of-range or
    non-numeric port and hostnames with characters outside ``[a-z0-9._-]``
    are rejected.
    Backslashes before the query are read as slashes in web URLs, the way
    browsers parse them.
    """
    parts = urlsplit(_slash_backslashes(url))
    port = parts.port
    hostname = _ascii_host(parts.hostname or "")
    if hostname and not HOST_RE.match(hostname):
        raise ValueError(f"Invalid hostname: {hostname!r}")
    userinfo = parts.netloc.rpartition("@")[0] if "@" in parts.netloc else ""
    return ParsedUrl(
        scheme=parts.scheme.lower(),
        hostname=hostname,
        port=port,
        userinfo=userinfo,
        path=parts.path,
        query=parts.query,
        fragment=parts.fragment,
    )


def unparse_url(parsed: ParsedUrl, keep_fragment: bool = True, keep_userinfo: bool = True) -> str:
    netloc = parsed.hostname
    if parsed.port is not None and DEFAULT_PORTS.get(parsed.scheme) != parsed.port:
        netloc = f"{netloc}:{parsed.port}"
    if parsed.userinfo and keep_userinfo:
        netloc = f"{parsed.userinfo}@{netloc}"
    fragment = parsed.fragment if keep_fragment else ""
    return urlunsplit((parsed.scheme, netloc, parsed.path or "/", parsed.query, fragment))


def is_valid_url(url) -> bool:
    if not isinstance(url, str):
        return False
    trimmed = url.strip()
    if len(trimmed) < 3:
        return False

    try:
        parsed = parse_url(normalize_url(trimmed))
    except ValueError:
        return False

    if parsed.scheme not in WEB_SCHEMES:
        return False

    hostname = parsed.hostname
    return len(hostname) >= 3 and "." in hostname


def get_domain(url: str) -> str:
    """Hostname of ``url`` without a leading ``www.``; ``url`` itself if unparseable."""
    try:
        hostname = parse_url(normalize_url(url)).hostname
    except ValueError:
        return url
    if not hostname:
        return url
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname
