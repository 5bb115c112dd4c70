"""
Tests for the platform and blocked-domain registries.
"""

import json

import pytest

from linkguard.core.classifier import UrlClassifier
from linkguard.core.errors import RegistryError
from linkguard.core.registry import PLATFORMS, PlatformEntry, build_registry, load_registry


class TestBuildRegistry:

    def test_default_order_preserved(self):
        registry = build_registry()
        assert registry.platforms == PLATFORMS
        assert registry.platforms[0].name == "Facebook"

    def test_domains_lowercased(self):
        registry = build_registry(
            platforms=[PlatformEntry("Shop", " Shop.Example ", "cart")],
            shortener_domains=["Short.IE", " "],
            blocked_tlds=["TOP"],
        )
        assert registry.platforms[0].domain == "shop.example"
        assert registry.shortener_domains == frozenset({"short.ie"})
        assert registry.blocked_tlds == frozenset({"top"})

    def test_registry_is_immutable(self):
        registry = build_registry()
        with pytest.raises(AttributeError):
            registry.platforms = ()


class TestLoadRegistry:

    def test_without_files_uses_builtins(self):
        assert load_registry() == build_registry()

    def test_extra_platforms_appended(self, tmp_path):
        path = tmp_path / "platforms.json"
        path.write_text(json.dumps([{"name": "Mastodon", "domain": "mastodon.social", "icon": "logo-mastodon"}]))

        registry = load_registry(platforms_file=path)

        assert registry.platforms[-1] == PlatformEntry("Mastodon", "mastodon.social", "logo-mastodon")
        assert len(registry.platforms) == len(PLATFORMS) + 1
        result = UrlClassifier(registry).identify_platform("https://mastodon.social/@user")
        assert result.platform == "Mastodon"

    def test_icon_defaults_to_globe(self, tmp_path):
        path = tmp_path / "platforms.json"
        path.write_text(json.dumps([{"name": "Bluesky", "domain": "bsky.app"}]))
        assert load_registry(platforms_file=path).platforms[-1].icon == "globe"

    def test_extra_blocklist_merged(self, tmp_path):
        path = tmp_path / "blocklist.json"
        path.write_text(json.dumps({"shorteners": ["t.ly"], "tlds": ["zip"]}))

        registry = load_registry(blocklist_file=path)
        classifier = UrlClassifier(registry)

        assert "bit.ly" in registry.shortener_domains
        assert classifier.is_potentially_malicious("https://t.ly/abc") is True
        assert classifier.is_potentially_malicious("https://download.zip") is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryError):
            load_registry(platforms_file=tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "blocklist.json"
        path.write_text("{not json")
        with pytest.raises(RegistryError):
            load_registry(blocklist_file=path)

    @pytest.mark.parametrize("payload", [{"name": "x"}, [{"name": "NoDomain"}], ["just-a-string"]])
    def test_bad_platform_entries(self, tmp_path, payload):
        path = tmp_path / "platforms.json"
        path.write_text(json.dumps(payload))
        with pytest.raises(RegistryError):
            load_registry(platforms_file=path)

    @pytest.mark.parametrize("payload", [["bit.ly"], {"shorteners": "bit.ly"}])
    def test_bad_blocklist_shape(self, tmp_path, payload):
        path = tmp_path / "blocklist.json"
        path.write_text(json.dumps(payload))
        with pytest.raises(RegistryError):
            load_registry(blocklist_file=path)
