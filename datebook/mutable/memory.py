"""In-memory blob store.

Useful for testing, prototyping, and sessions that need no persistence.
"""

from typing import override

from datebook.mutable import BlobStore


class MemoryBlobStore(BlobStore):
    def __init__(self, blobs: dict[str, bytes] | None = None) -> None:
        self._blobs: dict[str, bytes] = dict(blobs or {})

    @override
    def get(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    @override
    def set(self, key: str, value: bytes) -> None:
        self._blobs[key] = bytes(value)

    def keys(self) -> list[str]:
        return sorted(self._blobs)
