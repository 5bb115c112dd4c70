from __future__ import annotations


class LinkError(Exception):
    """Base class for link handling errors."""


class InvalidUrlError(LinkError, ValueError):
    pass


class UnsafeUrlError(LinkError):
    pass


class PreviewFetchError(LinkError):
    pass


class RegistryError(LinkError):
    pass
