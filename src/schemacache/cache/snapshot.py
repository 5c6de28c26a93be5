"""Durable JSON snapshots backing :class:`~schemacache.cache.CachingRegistry`.

Each cache owns one flat JSON object on disk, rewritten in full whenever a
new entry is learned. Writes go through
:func:`schemacache.config._atomic_write`, so a reader never observes a
half-written snapshot even after a crash mid-write.

Snapshot keys are always strings. Stores whose in-memory keys are not
strings take a pair of functions to encode and decode them; values are
validated with a pydantic :class:`~pydantic.TypeAdapter` on load.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

from pydantic import TypeAdapter

from schemacache.config import _atomic_write
from schemacache.exceptions import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

SCHEMAS_BY_ID_FILENAME = "schemas_by_id.json"
IDS_BY_SCHEMA_FILENAME = "ids_by_schema.json"

# ASCII unit separator between subject and document in registration keys.
KEY_SEPARATOR = "\x1f"


def encode_registration_key(key: tuple[str, str]) -> str:
    """Compose a ``(subject, document)`` pair into a snapshot key."""
    subject, document = key
    return f"{subject}{KEY_SEPARATOR}{document}"


def decode_registration_key(raw: str) -> tuple[str, str]:
    """Split a snapshot key back into ``(subject, document)``.

    Raises:
        ValueError: If *raw* has no separator.
    """
    subject, sep, document = raw.partition(KEY_SEPARATOR)
    if not sep:
        raise ValueError(f"registration key without separator: {raw[:60]!r}")
    return subject, document


def decode_schema_id(raw: str) -> int:
    """Parse a snapshot key holding a schema id in canonical decimal form.

    Raises:
        ValueError: If *raw* is not exactly how the id is written back, so
            keys such as ``"042"`` or ``" 42"`` never alias ``42``.
    """
    schema_id = int(raw)
    if str(schema_id) != raw:
        raise ValueError(f"non-canonical schema id key: {raw!r}")
    return schema_id


class SnapshotStore(Generic[K, V]):
    """Load and rewrite one cache's key/value map as a JSON file.

    Args:
        path: Location of the snapshot file.
        value_type: Python type of the values, used to validate on load.
        encode_key: Turns an in-memory key into its string form.
        decode_key: Inverse of *encode_key*; may raise ``ValueError``.
    """

    def __init__(
        self,
        path: str | Path,
        value_type: Any,
        encode_key: Callable[[K], str] = str,
        decode_key: Callable[[str], K] = lambda raw: raw,  # type: ignore[assignment, return-value]
    ) -> None:
        self._path = Path(path)
        self._adapter: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, value_type])
        self._encode_key = encode_key
        self._decode_key = decode_key

    @property
    def path(self) -> Path:
        """The filesystem path of the snapshot file."""
        return self._path

    def load(self) -> dict[K, V]:
        """Read the snapshot.

        Returns:
            The decoded map, or an empty ``dict`` if the file does not exist.

        Raises:
            StorageReadError: If the file exists but cannot be read, is not
                valid JSON, or holds keys or values of the wrong shape.
        """
        if not self._path.exists():
            logger.debug("No snapshot at %s, starting empty", self._path)
            return {}
        try:
            raw = self._adapter.validate_json(self._path.read_bytes())
            entries = {self._decode_key(key): value for key, value in raw.items()}
        except (OSError, ValueError) as exc:
            raise StorageReadError(f"Invalid cache snapshot at {self._path}: {exc}") from exc
        logger.debug("Loaded %d entries from %s", len(entries), self._path)
        return entries

    def save(self, entries: dict[K, V]) -> None:
        """Atomically replace the snapshot with *entries*.

        Raises:
            StorageWriteError: If the file cannot be written.
        """
        data = {self._encode_key(key): value for key, value in entries.items()}
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        try:
            _atomic_write(self._path, text)
        except OSError as exc:
            raise StorageWriteError(f"Failed to write cache snapshot {self._path}: {exc}") from exc
        logger.debug("Wrote %d entries to %s", len(data), self._path)


def schemas_by_id_store(directory: str | Path) -> SnapshotStore[int, str]:
    """Snapshot store for the id -> schema document cache."""
    return SnapshotStore(
        Path(directory) / SCHEMAS_BY_ID_FILENAME,
        str,
        encode_key=str,
        decode_key=decode_schema_id,
    )


def ids_by_schema_store(directory: str | Path) -> SnapshotStore[tuple[str, str], int]:
    """Snapshot store for the (subject, schema document) -> id cache."""
    return SnapshotStore(
        Path(directory) / IDS_BY_SCHEMA_FILENAME,
        int,
        encode_key=encode_registration_key,
        decode_key=decode_registration_key,
    )
