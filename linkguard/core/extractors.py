from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable
from urllib.parse import parse_qs, quote

from .urls import ParsedUrl

TWEET_RE = re.compile(r"/status/(\d+)")
INSTAGRAM_POST_RE = re.compile(r"/p/([^/]+)")
FACEBOOK_VIDEO_RE = re.compile(r"/videos/(\d+)")
FACEBOOK_POST_RE = re.compile(r"/posts/(\d+)")
SPOTIFY_RE = {
    kind: re.compile(rf"/{kind}/([a-zA-Z0-9]+)") for kind in ("track", "album", "playlist")
}
NUMERIC_RE = re.compile(r"^[0-9]+$")

YOUTUBE_CHANNEL_PREFIXES = {"channel", "c", "user"}


@dataclass
class Link:
    """A valid URL in the shapes the rule tables look at."""

    url: str
    parsed: ParsedUrl

    @property
    def hostname(self) -> str:
        return self.parsed.hostname

    @property
    def path(self) -> str:
        return self.parsed.path

    @property
    def segments(self) -> list[str]:
        return [part for part in self.parsed.path.split("/") if part]

    def segment(self, index: int) -> str | None:
        segments = self.segments
        return segments[index] if len(segments) > index else None

    def query_param(self, name: str) -> str | None:
        values = parse_qs(self.parsed.query).get(name)
        return values[0] if values else None


@dataclass(frozen=True)
class HostRule:
    hosts: tuple[str, ...]
    extract: Callable[[Link], str | None]

    def matches(self, hostname: str) -> bool:
        return any(host in hostname for host in self.hosts)


def _encode(url: str) -> str:
    # Same escaping as JavaScript's encodeURIComponent.
    return quote(url, safe="!~*'()")


# ---------- usernames ----------


def _first_segment(link: Link) -> str | None:
    return link.segment(0)


def _linkedin_user(link: Link) -> str | None:
    if link.segment(0) == "in":
        return link.segment(1)
    return None


def _youtube_user(link: Link) -> str | None:
    first = link.segment(0)
    if first in YOUTUBE_CHANNEL_PREFIXES:
        return link.segment(1)
    if first and first.startswith("@") and len(first) > 1:
        return first
    return None


def _tiktok_user(link: Link) -> str | None:
    first = link.segment(0)
    if first and first.startswith("@"):
        return first
    return None


def _substack_user(link: Link) -> str | None:
    return link.hostname.split(".")[0]


# The first rule whose host matches decides the outcome.
USERNAME_RULES = (
    HostRule(("twitter.com", "x.com"), _first_segment),
    HostRule(("instagram.com",), _first_segment),
    HostRule(("facebook.com",), _first_segment),
    HostRule(("linkedin.com",), _linkedin_user),
    HostRule(("youtube.com",), _youtube_user),
    HostRule(("tiktok.com",), _tiktok_user),
    HostRule(("github.com",), _first_segment),
    HostRule(("medium.com",), _first_segment),
    HostRule(("substack.com",), _substack_user),
)


def extract_username(link: Link, rules: tuple[HostRule, ...] = USERNAME_RULES) -> str | None:
    for rule in rules:
        if rule.matches(link.hostname):
            return rule.extract(link) or None
    return None


# ---------- embeds ----------


def _youtube_embed(link: Link) -> str | None:
    video_id = None
    parts = link.path.split("/")
    if "youtu.be" in link.hostname:
        video_id = parts[1] if len(parts) > 1 else None
    elif "watch" in link.path:
        video_id = link.query_param("v")
    elif "embed" in link.path:
        video_id = parts[2] if len(parts) > 2 else None
    if video_id:
        return f"https://www.youtube.com/embed/{video_id}"
    return None


def _tweet_embed(link: Link) -> str | None:
    match = TWEET_RE.search(link.path)
    if match:
        return f"https://platform.twitter.com/embed/Tweet.html?id={match.group(1)}"
    return None


def _instagram_embed(link: Link) -> str | None:
    match = INSTAGRAM_POST_RE.search(link.path)
    if match:
        return f"https://www.instagram.com/p/{match.group(1)}/embed"
    return None


def _facebook_embed(link: Link) -> str | None:
    if FACEBOOK_VIDEO_RE.search(link.path):
        return f"https://www.facebook.com/plugins/video.php?href={_encode(link.url)}"
    if FACEBOOK_POST_RE.search(link.path):
        return f"https://www.facebook.com/plugins/post.php?href={_encode(link.url)}"
    return None


def _vimeo_embed(link: Link) -> str | None:
    parts = link.path.split("/")
    video_id = parts[1] if len(parts) > 1 else ""
    if NUMERIC_RE.match(video_id):
        return f"https://player.vimeo.com/video/{video_id}"
    return None


def _soundcloud_embed(link: Link) -> str | None:
    return f"https://w.soundcloud.com/player/?url={_encode(link.url)}"


def _spotify_embed(link: Link) -> str | None:
    for kind, pattern in SPOTIFY_RE.items():
        match = pattern.search(link.path)
        if match:
            return f"https://open.spotify.com/embed/{kind}/{match.group(1)}"
    return None


# Rules are tried in order; a matching host without an identifier falls through.
EMBED_RULES = (
    HostRule(("youtube.com", "youtu.be"), _youtube_embed),
    HostRule(("twitter.com", "x.com"), _tweet_embed),
    HostRule(("instagram.com",), _instagram_embed),
    HostRule(("facebook.com",), _facebook_embed),
    HostRule(("vimeo.com",), _vimeo_embed),
    HostRule(("soundcloud.com",), _soundcloud_embed),
    HostRule(("spotify.com",), _spotify_embed),
)


def embed_url(link: Link, rules: tuple[HostRule, ...] = EMBED_RULES) -> str | None:
    for rule in rules:
        if not rule.matches(link.hostname):
            continue
        embed = rule.extract(link)
        if embed:
            return embed
    return None
