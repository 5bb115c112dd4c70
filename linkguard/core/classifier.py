from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from .extractors import EMBED_RULES, USERNAME_RULES, HostRule, Link, embed_url, extract_username
from .registry import Registry, build_registry
from .screening import ScreenVerdict, screen_url
from .urls import WEB_SCHEMES, is_valid_url, normalize_url, parse_url, unparse_url

logger = logging.getLogger(__name__)

DANGEROUS_SCHEMES = {"javascript", "data", "vbscript", "file"}


@dataclass(frozen=True)
class ClassificationResult:
    platform: str
    platform_icon: str
    is_known_platform: bool

    def to_dict(self) -> dict:
        return asdict(self)


WEBSITE = ClassificationResult(platform="Website", platform_icon="globe", is_known_platform=False)


class UrlClassifier:
    """Offline URL checks over an injected, read-only registry.

    Every public method is total: malformed input yields ``False``, ``None``
    or the generic ``Website`` classification instead of an exception. The
    one exception to "fail quietly" is screening, which treats anything it
    cannot parse as potentially malicious.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        username_rules: tuple[HostRule, ...] = USERNAME_RULES,
        embed_rules: tuple[HostRule, ...] = EMBED_RULES,
    ):
        self.registry = registry or build_registry()
        self.username_rules = username_rules
        self.embed_rules = embed_rules

    def normalize(self, url) -> str:
        return normalize_url(url)

    def is_valid_url(self, url) -> bool:
        return is_valid_url(url)

    def screen(self, url) -> ScreenVerdict:
        return screen_url(url, self.registry)

    def is_potentially_malicious(self, url) -> bool:
        return self.screen(url).malicious

    def identify_platform(self, url) -> ClassificationResult:
        try:
            hostname = parse_url(normalize_url(url)).hostname
        except ValueError:
            return WEBSITE

        if not hostname:
            return WEBSITE

        for entry in self.registry.platforms:
            if entry.domain in hostname or hostname == entry.domain or hostname.endswith(f".{entry.domain}"):
                return ClassificationResult(
                    platform=entry.name,
                    platform_icon=entry.icon,
                    is_known_platform=True,
                )
        return WEBSITE

    def _link(self, url) -> Link | None:
        if not is_valid_url(url):
            return None
        normalized = normalize_url(url)
        try:
            return Link(url=normalized, parsed=parse_url(normalized))
        except ValueError:
            return None

    def extract_username(self, url) -> str | None:
        link = self._link(url)
        if link is None:
            return None
        try:
            return extract_username(link, self.username_rules)
        except (ValueError, IndexError):
            logger.debug("Username extraction failed for %s", link.url, exc_info=True)
            return None

    def get_embed_url(self, url) -> str | None:
        link = self._link(url)
        if link is None:
            return None
        try:
            return embed_url(link, self.embed_rules)
        except (ValueError, IndexError):
            logger.debug("Embed derivation failed for %s", link.url, exc_info=True)
            return None

    def sanitize_url(self, url) -> str | None:
        if not url or not isinstance(url, str):
            return None

        if not is_valid_url(url):
            return None

        verdict = self.screen(url)
        if verdict.malicious:
            logger.info("Rejected %s: %s", url, verdict.reason)
            return None

        try:
            parsed = parse_url(normalize_url(url))
        except ValueError:
            return None

        if parsed.scheme in DANGEROUS_SCHEMES or parsed.scheme not in WEB_SCHEMES:
            return None

        return unparse_url(parsed, keep_fragment=False, keep_userinfo=False)
