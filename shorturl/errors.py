"""
Error types for the shorturl service.

Responsibilities:
    - Name every failure the allocator, resolver and storage layers can report
    - Keep them plain Python exceptions so the HTTP layer decides status codes

Mapping used by the API (see main.py):
    InvalidURL          -> 400
    AliasNotFound       -> 404
    StoreFailure        -> 500
    InvalidEncodingInput / MalformedAlias -> programming errors, 500 if they escape
"""


class ShortUrlError(Exception):
    """Base class for all shorturl errors."""


class InvalidEncodingInput(ShortUrlError, ValueError):
    """Allocator called with a non-integer or non-positive id."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Alias ids must be positive integers, got {value!r}")


class MalformedAlias(ShortUrlError, ValueError):
    """Alias cannot be decoded back to an id."""

    def __init__(self, alias: str, reason: str):
        self.alias = alias
        super().__init__(f"Malformed alias {alias!r}: {reason}")


class InvalidURL(ShortUrlError, ValueError):
    """Submitted URL is not a well-formed absolute http(s) URL."""


class AliasNotFound(ShortUrlError, LookupError):
    """No record carries the requested alias."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"Short URL not found: {alias!r}")


class StoreFailure(ShortUrlError, RuntimeError):
    """Insert, update or lookup failed inside the storage backend."""
