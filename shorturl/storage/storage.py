"""
Storage module for shorturl (in-memory implementation).

Responsibilities:
    - Insert URL records with a generated, monotonically increasing id
    - Attach the alias to a record in a second write
    - Look records up by alias (exact match) and by id
    - Enforce alias uniqueness

Design:
    - This is an in-memory reference implementation that satisfies the BaseStorage contract.
    - It is intentionally simple to keep unit/integration tests fast and deterministic.
    - For production, use the PostgreSQL backend (db_storage.py).
"""

import itertools
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from ..errors import StoreFailure
from .base import BaseStorage, UrlRecord


class Storage(BaseStorage):
    def __init__(self, start: int = 1):
        """
        Initialize empty storage.

        Internal schema:
            self.records  = {id: UrlRecord}
            self.aliases  = {alias: id}
        """
        if start < 1:
            raise ValueError("start must be a positive integer")
        self.records: Dict[int, UrlRecord] = {}
        self.aliases: Dict[str, int] = {}
        self._ids = itertools.count(start)
        self._lock = threading.Lock()

    def ensure_schema(self) -> None:
        # Nothing to create for dictionaries.
        return None

    def insert_url(self, url: str) -> int:
        """
        Insert `url` and return the generated id.

        Empty URLs are rejected with StoreFailure, mirroring the NOT NULL /
        non-empty constraint of the SQL schema.
        """
        if not url:
            raise StoreFailure("url must be a non-empty string")
        with self._lock:
            record_id = next(self._ids)
            self.records[record_id] = UrlRecord(
                id=record_id,
                url=url,
                alias=None,
                created_at=datetime.now(timezone.utc),
            )
        return record_id

    def set_alias(self, record_id: int, alias: str) -> bool:
        """
        Attach `alias` to the record.

        Returns:
            bool: False if the record does not exist.

        Raises:
            StoreFailure: alias already held by another record, or the
                record already carries a different alias.
        """
        with self._lock:
            record = self.records.get(record_id)
            if record is None:
                return False
            owner = self.aliases.get(alias)
            if owner is not None and owner != record_id:
                raise StoreFailure(f"alias {alias!r} already used by record {owner}")
            if record.alias is not None and record.alias != alias:
                raise StoreFailure(f"record {record_id} already has alias {record.alias!r}")
            self.records[record_id] = UrlRecord(
                id=record.id,
                url=record.url,
                alias=alias,
                created_at=record.created_at,
            )
            self.aliases[alias] = record_id
        return True

    def get_by_alias(self, alias: str) -> Optional[UrlRecord]:
        record_id = self.aliases.get(alias)
        if record_id is None:
            return None
        return self.records.get(record_id)

    def get_by_id(self, record_id: int) -> Optional[UrlRecord]:
        return self.records.get(record_id)
