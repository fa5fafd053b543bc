"""Directory-backed blob store: one ``<key>.json`` file per key."""

import logging
import os
import re
from pathlib import Path
from typing import override

from datebook.mutable import BlobStore

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileBlobStore(BlobStore):
    def __init__(self, directory: str | Path):
        self.directory: Path = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key) or key.startswith("."):
            raise ValueError(
                f"Invalid storage key {key!r}.\n"
                f"Keys may contain letters, digits, '_', '-' and '.'"
            )
        return self.directory / f"{key}.json"

    @override
    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    @override
    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write then rename so a crash never leaves a half-written blob
        tmp = path.with_suffix(".json.tmp")
        tmp.write_bytes(value)
        try:
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d bytes to %s", len(value), path)
