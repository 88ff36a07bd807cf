"""
Base storage interface for shorturl.

Purpose:
    Define the small contract the creation flow and the resolver need from a
    persistent store, so backends (in-memory, PostgreSQL) can be swapped
    without touching business logic:

    - insert-with-generated-id   -> insert_url
    - update-by-id               -> set_alias
    - exact lookup-by-alias      -> get_by_alias

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class UrlRecord:
    """A stored URL. `alias` is None between the insert and the alias write."""
    id: int
    url: str
    alias: Optional[str]
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "alias": self.alias,
            "created_at": self.created_at.isoformat(),
        }


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def ensure_schema(self) -> None:
        """Create the backing table/collection if it does not exist yet."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def insert_url(self, url: str) -> int:
        """
        Insert a new record holding only `url` and return its generated id.

        Ids are positive and strictly increasing in creation order.

        Raises:
            StoreFailure: the insert could not be performed.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def set_alias(self, record_id: int, alias: str) -> bool:
        """
        Write `alias` onto the record `record_id`.

        Returns:
            bool: False if no such record exists.

        Raises:
            StoreFailure: infrastructure failure or alias uniqueness violation.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_by_alias(self, alias: str) -> Optional[UrlRecord]:
        """Exact, case-sensitive lookup. Never mutates."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_by_id(self, record_id: int) -> Optional[UrlRecord]:
        """Return the record with this id, alias set or not."""
        raise NotImplementedError
