"""
UrlManager module for shorturl.

Responsibilities:
    - Validate submitted URLs before anything is written
    - Run the two-phase creation: insert the URL, derive the alias from the
      generated id, write the alias back onto the record
    - Resolve aliases to their original URL for the redirect route

Design notes:
    - Storage is an injected dependency; the manager holds no other state.
    - Aliases come from `allocate_alias(id)`; uniqueness follows from the id,
      so there is no collision check and no retry.
    - The alias write must follow a completed insert because the alias is a
      function of the committed id. A failure in either step is raised to the
      caller; a row left without an alias stays behind and is never resolvable.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from ..config import settings
from ..errors import InvalidURL, StoreFailure
from ..storage.base import BaseStorage, UrlRecord
from .allocator import allocate_alias
from .resolver import Resolver

log = logging.getLogger("shorturl.manager")

ALLOWED_SCHEMES = {"http", "https"}


class UrlManager:
    """Coordinates URL validation, alias allocation and lookup."""

    def __init__(self, storage: BaseStorage, max_url_length: Optional[int] = None):
        """
        Args:
            storage (BaseStorage): Backend storage instance.
            max_url_length (Optional[int]): Longest accepted URL; defaults to settings.
        """
        self.storage = storage
        self.resolver = Resolver(storage)
        if max_url_length is None:
            max_url_length = settings.MAX_URL_LENGTH
        self.max_url_length = max_url_length

    # ---------------------------------------------------------------------
    # Validation
    # ---------------------------------------------------------------------
    def validate_url(self, url: str) -> str:
        """
        Normalize surrounding whitespace and check the URL is absolute http(s).

        Returns:
            str: The trimmed URL, otherwise unchanged.

        Raises:
            InvalidURL: If the URL is empty, too long, or malformed.
        """
        if not isinstance(url, str):
            raise InvalidURL("URL must be a string")
        url = url.strip()
        if not url:
            raise InvalidURL("URL is required")
        if len(url) > self.max_url_length:
            raise InvalidURL(f"URL is too long (max {self.max_url_length} characters)")
        try:
            parsed = urlparse(url)
            # Accessing .port validates the port component.
            parsed.port
        except ValueError as exc:
            raise InvalidURL(f"Invalid URL format: {exc}") from exc
        if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.hostname:
            raise InvalidURL("Invalid URL format")
        if any(ch.isspace() for ch in url):
            raise InvalidURL("URL must not contain whitespace")
        return url

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create_short_url(self, url: str) -> UrlRecord:
        """
        Store `url` and give it an alias.

        Steps:
            1. validate (no write happens for an invalid URL)
            2. insert -> generated id
            3. alias = allocate_alias(id)
            4. write alias onto the record

        Returns:
            UrlRecord: The stored record, alias populated.

        Raises:
            InvalidURL: Rejected before any record is created.
            StoreFailure: Insert or alias write failed.
        """
        url = self.validate_url(url)

        record_id = self.storage.insert_url(url)
        alias = allocate_alias(record_id)

        if not self.storage.set_alias(record_id, alias):
            log.error("alias write for record %s matched no row", record_id)
            raise StoreFailure(f"record {record_id} vanished before alias {alias!r} was written")

        record = self.storage.get_by_id(record_id)
        if record is None:
            raise StoreFailure(f"record {record_id} not readable after alias write")
        log.info("created alias %s for record %s", alias, record_id)
        return record

    def resolve_alias(self, alias: str) -> str:
        """Return the original URL for `alias`; raises AliasNotFound on a miss."""
        return self.resolver.resolve_alias(alias)
