"""
Shared test fixtures.
"""

import asyncio

import pytest

from linkguard.core.classifier import UrlClassifier
from linkguard.core.registry import build_registry


class StubFetcher:
    """Preview fetcher double that records calls and returns canned data."""

    def __init__(self, data=None, exc=None, delay=0.0):
        self.data = data if data is not None else {}
        self.exc = exc
        self.delay = delay
        self.calls = []

    async def fetch(self, url):
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.data


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def classifier(registry):
    return UrlClassifier(registry)


@pytest.fixture
def stub_fetcher():
    """Factory for StubFetcher instances."""
    return StubFetcher
