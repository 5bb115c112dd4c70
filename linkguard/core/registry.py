from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .errors import RegistryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformEntry:
    name: str
    domain: str
    icon: str


# Order matters: the first entry whose domain matches a hostname wins.
PLATFORMS = (
    PlatformEntry("Facebook", "facebook.com", "logo-facebook"),
    PlatformEntry("Instagram", "instagram.com", "logo-instagram"),
    PlatformEntry("Twitter", "twitter.com", "logo-twitter"),
    PlatformEntry("X", "x.com", "logo-twitter"),
    PlatformEntry("LinkedIn", "linkedin.com", "logo-linkedin"),
    PlatformEntry("YouTube", "youtube.com", "logo-youtube"),
    PlatformEntry("TikTok", "tiktok.com", "musical-notes"),
    PlatformEntry("Substack", "substack.com", "newspaper"),
    PlatformEntry("Medium", "medium.com", "document-text"),
    PlatformEntry("Pinterest", "pinterest.com", "logo-pinterest"),
    PlatformEntry("Reddit", "reddit.com", "logo-reddit"),
    PlatformEntry("Tumblr", "tumblr.com", "logo-tumblr"),
    PlatformEntry("Spotify", "spotify.com", "musical-note"),
    PlatformEntry("SoundCloud", "soundcloud.com", "cloud"),
    PlatformEntry("Vimeo", "vimeo.com", "videocam"),
    PlatformEntry("Twitch", "twitch.tv", "game-controller"),
    PlatformEntry("Snapchat", "snapchat.com", "logo-snapchat"),
    PlatformEntry("WhatsApp", "whatsapp.com", "logo-whatsapp"),
    PlatformEntry("Telegram", "telegram.org", "paper-plane"),
    PlatformEntry("Discord", "discord.com", "logo-discord"),
    PlatformEntry("GitHub", "github.com", "logo-github"),
    PlatformEntry("Quora", "quora.com", "help-circle"),
    # Health
    PlatformEntry("WebMD", "webmd.com", "medical"),
    PlatformEntry("Healthline", "healthline.com", "medkit"),
    PlatformEntry("Mayo Clinic", "mayoclinic.org", "medical"),
    PlatformEntry("CDC", "cdc.gov", "medical"),
    PlatformEntry("WHO", "who.int", "globe"),
    PlatformEntry("NIH", "nih.gov", "flask"),
    PlatformEntry("MedlinePlus", "medlineplus.gov", "medical"),
    PlatformEntry("PubMed", "pubmed.ncbi.nlm.nih.gov", "document-text"),
)

SHORTENER_DOMAINS = {
    "bit.ly",
    "tinyurl.com",
    "goo.gl",
    "is.gd",
    "cli.gs",
    "pic.gd",
    "dwarfurl.com",
    "ow.ly",
    "yfrog",
    "migre.me",
    "ff.im",
    "tiny.cc",
    "url4.eu",
    "tr.im",
    "twit.ac",
    "su.pr",
    "twurl.nl",
    "snipurl.com",
    "budurl.com",
    "short.to",
    "ping.fm",
    "post.ly",
    "just.as",
    "bkite.com",
    "snipr.com",
    "fic.kr",
    "loopt.us",
    "doiop.com",
    "twitthis.com",
    "htxt.it",
    "alturl.com",
    "redirx.com",
    "digbig.com",
    "short.ie",
    "u.mavrev.com",
    "kl.am",
    "wp.me",
    "u.nu",
    "rubyurl.com",
    "om.ly",
    "linkbee.com",
    "yep.it",
    "posted.at",
    "xrl.us",
    "metamark.net",
    "sn.im",
    "hulu.com",
    "jpeg.ly",
    "urlkiss.com",
    "qlnk.net",
    "w3t.org",
    "prettylinkpro.com",
    "ne1.net",
    "tr.my",
    "fon.gs",
    "baid.us",
    "yourls.org",
    "adcraft.co",
    "virl.com",
    "dft.ba",
    "qr.net",
    "youtu.be",
    "1click.at",
}

LOW_TRUST_TLDS = {
    "xyz",
    "pw",
    "top",
    "club",
    "work",
    "ml",
    "ga",
    "cf",
    "gq",
    "tk",
}


@dataclass(frozen=True)
class Registry:
    platforms: tuple[PlatformEntry, ...]
    shortener_domains: frozenset[str]
    blocked_tlds: frozenset[str]

    @property
    def blocked_domains(self) -> frozenset[str]:
        return self.shortener_domains | self.blocked_tlds


def _clean_domains(domains: Iterable[str]) -> frozenset[str]:
    return frozenset(d.strip().lower() for d in domains if d and d.strip())


def build_registry(
    platforms: Iterable[PlatformEntry] = PLATFORMS,
    shortener_domains: Iterable[str] = SHORTENER_DOMAINS,
    blocked_tlds: Iterable[str] = LOW_TRUST_TLDS,
) -> Registry:
    entries = tuple(
        PlatformEntry(p.name, p.domain.strip().lower(), p.icon) for p in platforms
    )
    return Registry(
        platforms=entries,
        shortener_domains=_clean_domains(shortener_domains),
        blocked_tlds=_clean_domains(blocked_tlds),
    )


def _read_json(path: str | Path):
    try:
        with open(path, encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, ValueError) as exc:
        raise RegistryError(f"Could not read registry file {path}: {exc}") from exc


def _platforms_from_json(data, path) -> list[PlatformEntry]:
    if not isinstance(data, list):
        raise RegistryError(f"{path}: expected a list of platform objects")
    entries: list[PlatformEntry] = []
    for item in data:
        try:
            entries.append(PlatformEntry(str(item["name"]), str(item["domain"]), str(item.get("icon", "globe"))))
        except (KeyError, TypeError) as exc:
            raise RegistryError(f"{path}: invalid platform entry {item!r}") from exc
    return entries


def load_registry(
    platforms_file: str | Path | None = None,
    blocklist_file: str | Path | None = None,
) -> Registry:
    """Build a registry from the built-in tables plus optional JSON extensions.

    Platforms from ``platforms_file`` are appended after the built-in ones, so
    built-in entries keep precedence. ``blocklist_file`` holds an object with
    ``shorteners`` and ``tlds`` lists merged into the built-in sets.
    """
    platforms = list(PLATFORMS)
    shorteners = set(SHORTENER_DOMAINS)
    tlds = set(LOW_TRUST_TLDS)

    if platforms_file:
        extra = _platforms_from_json(_read_json(platforms_file), platforms_file)
        platforms.extend(extra)
        logger.info("Loaded %d extra platforms from %s", len(extra), platforms_file)

    if blocklist_file:
        data = _read_json(blocklist_file)
        if not isinstance(data, dict):
            raise RegistryError(f"{blocklist_file}: expected an object with 'shorteners' and 'tlds'")
        extra_shorteners = data.get("shorteners", [])
        extra_tlds = data.get("tlds", [])
        if not isinstance(extra_shorteners, list) or not isinstance(extra_tlds, list):
            raise RegistryError(f"{blocklist_file}: 'shorteners' and 'tlds' must be lists")
        shorteners.update(str(d) for d in extra_shorteners)
        tlds.update(str(d) for d in extra_tlds)
        logger.info(
            "Loaded %d shorteners and %d TLDs from %s",
            len(extra_shorteners),
            len(extra_tlds),
            blocklist_file,
        )

    return build_registry(platforms, shorteners, tlds)
