from __future__ import annotations

import re
from dataclasses import dataclass

from .registry import Registry
from .urls import normalize_url, parse_url

IPV4_RE = re.compile(r"^[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}$")

MAX_HOSTNAME_LENGTH = 50
MAX_SUBDOMAIN_DEPTH = 4


@dataclass
class ScreenVerdict:
    malicious: bool
    reason: str | None


def _suffixes(host: str) -> list[str]:
    """``a.evil.bit.ly`` -> ``a.evil.bit.ly``, ``evil.bit.ly``, ``bit.ly``, ``ly``."""
    labels = host.split(".")
    return [".".join(labels[i:]) for i in range(len(labels))]


def screen_url(url, registry: Registry) -> ScreenVerdict:
    if not url or not isinstance(url, str):
        return ScreenVerdict(True, "Empty URL")

    try:
        host = parse_url(normalize_url(url)).hostname
    except ValueError:
        return ScreenVerdict(True, "Unparseable URL")

    if not host:
        return ScreenVerdict(True, "Missing hostname")

    # The last suffix is the TLD, so bare-label entries match here too.
    suffixes = _suffixes(host)
    for suffix in suffixes:
        if suffix in registry.shortener_domains:
            return ScreenVerdict(True, f"URL shortener: {suffix}")

    for suffix in suffixes:
        if suffix in registry.blocked_tlds:
            return ScreenVerdict(True, f"Low-trust TLD: {suffix}")

    if IPV4_RE.match(host):
        return ScreenVerdict(True, "IP address host")

    if len(host) > MAX_HOSTNAME_LENGTH:
        return ScreenVerdict(True, "Hostname too long")

    if host.count(".") > MAX_SUBDOMAIN_DEPTH:
        return ScreenVerdict(True, "Too many subdomains")

    return ScreenVerdict(False, None)
