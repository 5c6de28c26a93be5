"""Read-through, write-through cache in front of a schema registry client.

Schema registry mappings never change once created: an id always names the
same schema document, and registering the same document under the same
subject always yields the same id. :class:`CachingRegistry` relies on that to
cache both mappings permanently, so each distinct key reaches the network at
most once over the lifetime of its snapshot directory.

Lookups go memory first, then the on-disk snapshot (loaded lazily, once per
instance), then the upstream client. Whatever the upstream returns is stored
in memory and the full snapshot is rewritten before the value is handed back.
Errors are never cached, retried, or translated.

See Also:
    :mod:`schemacache.cache.snapshot` -- the JSON snapshot files.
    :class:`~schemacache.client.RegistryClient` -- the usual upstream.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Generic, Optional, Protocol, TypeVar

from schemacache.cache.snapshot import (
    SnapshotStore,
    ids_by_schema_store,
    schemas_by_id_store,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class SchemaRegistry(Protocol):
    """The two upstream operations the cache consumes."""

    def fetch(self, schema_id: int) -> str: ...

    def register(self, subject: str, schema: str) -> int: ...


class _CacheTable(Generic[K, V]):
    """One key/value map, its optional snapshot, and the lock guarding both.

    The lock is held across the whole lookup, including the upstream call and
    the snapshot write, so concurrent misses on one key reach upstream once.
    """

    def __init__(self, name: str, store: Optional[SnapshotStore[K, V]]) -> None:
        self._name = name
        self._store = store
        self._entries: dict[K, V] = {}
        self._loaded = store is None
        self._lock = threading.Lock()

    def get_or_load(self, key: K, miss: Callable[[], V]) -> V:
        with self._lock:
            if key in self._entries:
                return self._entries[key]

            if not self._loaded and self._store is not None:
                # Entries already in memory win over the snapshot.
                self._entries = {**self._store.load(), **self._entries}
                self._loaded = True
                if key in self._entries:
                    logger.debug("%s: served %r from snapshot", self._name, key)
                    return self._entries[key]

            logger.debug("%s: cache miss for %r, calling upstream", self._name, key)
            value = miss()
            self._entries[key] = value
            if self._store is not None:
                self._store.save(self._entries)
            return value


class CachingRegistry:
    """Schema registry client wrapper that remembers every answer.

    Exposes the same ``fetch`` / ``register`` surface as the upstream client
    and raises the same errors, plus
    :class:`~schemacache.exceptions.StorageReadError` for a corrupt snapshot
    and :class:`~schemacache.exceptions.StorageWriteError` when a new entry
    cannot be persisted. In the latter case the entry is still kept in memory
    and later calls in this process are served from it.

    The id cache and the registration cache are locked independently, so a
    slow ``register`` does not hold up ``fetch`` calls.

    Args:
        upstream: Object providing ``fetch(schema_id)`` and
            ``register(subject, schema)``, typically a
            :class:`~schemacache.client.RegistryClient`.
        disk_path: Directory for the ``schemas_by_id.json`` and
            ``ids_by_schema.json`` snapshots. When ``None`` the cache lives
            in memory only.

    Example::

        with RegistryClient(config.registry) as client:
            registry = CachingRegistry(client, disk_path="/var/cache/schemas")
            schema = registry.fetch(42)
    """

    def __init__(
        self,
        upstream: SchemaRegistry,
        disk_path: str | Path | None = None,
    ) -> None:
        self._upstream = upstream
        self._schemas_by_id: _CacheTable[int, str] = _CacheTable(
            "schemas_by_id",
            schemas_by_id_store(disk_path) if disk_path is not None else None,
        )
        self._ids_by_schema: _CacheTable[tuple[str, str], int] = _CacheTable(
            "ids_by_schema",
            ids_by_schema_store(disk_path) if disk_path is not None else None,
        )

    def fetch(self, schema_id: int) -> str:
        """Return the schema document registered under *schema_id*.

        Raises:
            NotFoundError: Propagated from the upstream for unknown ids.
            ConnectionError_: Propagated from the upstream on network failure.
            StorageReadError: The id snapshot exists but is unreadable.
            StorageWriteError: The document was fetched but not persisted.
        """
        return self._schemas_by_id.get_or_load(
            schema_id, lambda: self._upstream.fetch(schema_id)
        )

    def register(self, subject: str, schema: str) -> int:
        """Register *schema* under *subject* and return its id.

        The cache key is the ``(subject, schema)`` pair; the same document
        under another subject is a separate entry and a separate upstream
        call.

        Raises:
            SchemaValidationError: Propagated from the upstream.
            ConnectionError_: Propagated from the upstream on network failure.
            StorageReadError: The registration snapshot is unreadable.
            StorageWriteError: The id was obtained but not persisted.
        """
        return self._ids_by_schema.get_or_load(
            (subject, schema), lambda: self._upstream.register(subject, schema)
        )
