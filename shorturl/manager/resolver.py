"""
Redirect resolution for shorturl.

Maps an alias taken verbatim from the request path to the stored URL.
Matching is exact and case-sensitive; the stored URL is returned untouched
(it was validated once, at creation). Lookups never write.
"""

import logging

from ..errors import AliasNotFound
from ..storage.base import BaseStorage

log = logging.getLogger("shorturl.manager")


class Resolver:
    """Read-only alias -> URL lookup over an injected storage backend."""

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def resolve_alias(self, alias: str) -> str:
        """
        Return the original URL stored under `alias`.

        Raises:
            AliasNotFound: no record carries this alias (includes "").
            StoreFailure: propagated from the backend.
        """
        record = self.storage.get_by_alias(alias)
        if record is None:
            log.debug("alias %r not found", alias)
            raise AliasNotFound(alias)
        return record.url
