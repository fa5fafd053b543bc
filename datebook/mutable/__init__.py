"""Persistent record collections on top of a key-value blob store.

This module provides the abstract blob store that backends implement, and
``RecordCollection``, which keeps one JSON-encoded list of records under a
single storage key.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, Self, TypeVar
from uuid import UUID

logger = logging.getLogger(__name__)

TIMERS_KEY = "SavedTimers"
NOTES_KEY = "SavedNotes"
EVENTS_KEY = "CalendarEvents"


class Record(Protocol):
    @property
    def id(self) -> UUID: ...

    def to_dict(self) -> dict[str, Any]: ...

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self: ...


R = TypeVar("R", bound=Record)


@dataclass(frozen=True)
class WriteResult(Generic[R]):
    """Result of a write operation (upsert/remove).

    Attributes:
        success: True if the operation succeeded, False otherwise
        record: The record written or removed if successful, None if failed
        error: The exception that occurred if failed, None if successful
    """

    success: bool
    record: R | None
    error: Exception | None


class BlobStore(ABC):
    """Abstract key-value store holding opaque byte blobs."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the blob stored under ``key``, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous blob."""
        pass


class RecordCollection(Generic[R]):
    """Ordered list of records persisted as one JSON blob.

    Every operation reads the blob fresh and writes it back whole, so the
    collection itself holds no state between calls.
    """

    def __init__(self, store: BlobStore, key: str, record_class: type[R]):
        self.store: BlobStore = store
        self.key: str = key
        self.record_class: type[R] = record_class

    def load(self) -> list[R]:
        """Decode the stored records.

        A missing blob is an empty collection. A blob that cannot be decoded
        is logged and also read as empty.
        """
        data = self.store.get(self.key)
        if data is None:
            return []
        try:
            raw = json.loads(data)
            return [self.record_class.from_dict(item) for item in raw]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Discarding unreadable %s blob: %s", self.key, exc)
            return []

    def save(self, records: Iterable[R]) -> None:
        payload = [record.to_dict() for record in records]
        self.store.set(self.key, json.dumps(payload).encode("utf-8"))
        logger.debug("Saved %d records under %s", len(payload), self.key)

    def get(self, record_id: UUID) -> R | None:
        return next((r for r in self.load() if r.id == record_id), None)

    def upsert(self, record: R) -> WriteResult[R]:
        """Replace the record with the same id in place, or append it."""
        try:
            records = self.load()
            for i, existing in enumerate(records):
                if existing.id == record.id:
                    records[i] = record
                    break
            else:
                records.append(record)
            self.save(records)
        except OSError as exc:
            logger.error("Failed to write %s to %s: %s", record.id, self.key, exc)
            return WriteResult(success=False, record=None, error=exc)
        return WriteResult(success=True, record=record, error=None)

    def remove(self, record_id: UUID) -> WriteResult[R]:
        """Remove the record with ``record_id``.

        Removing an unknown id fails with a ``KeyError`` in the result.
        """
        records = self.load()
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            return WriteResult(
                success=False,
                record=None,
                error=KeyError(f"No record {record_id} under {self.key}"),
            )
        removed = next(r for r in records if r.id == record_id)
        try:
            self.save(kept)
        except OSError as exc:
            logger.error("Failed to remove %s from %s: %s", record_id, self.key, exc)
            return WriteResult(success=False, record=None, error=exc)
        return WriteResult(success=True, record=removed, error=None)


__all__ = [
    "BlobStore",
    "RecordCollection",
    "WriteResult",
    "TIMERS_KEY",
    "NOTES_KEY",
    "EVENTS_KEY",
]
