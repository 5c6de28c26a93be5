"""Permanent two-key caching for schema registry lookups.

This package provides :class:`CachingRegistry`, a read-through and
write-through cache placed in front of a schema registry client. It caches
``fetch(id) -> schema`` and ``register(subject, schema) -> id`` forever,
persisting each mapping to a JSON snapshot so later processes skip the
network entirely.

Snapshots live in the directory given as ``disk_path`` and are handled by
:class:`~schemacache.cache.snapshot.SnapshotStore`. The CLI picks that
directory from the ``cache`` section of the configuration
(:class:`~schemacache.models.CacheConfig`).
"""

from schemacache.cache.cache import CachingRegistry, SchemaRegistry
from schemacache.cache.snapshot import SnapshotStore

__all__ = ["CachingRegistry", "SchemaRegistry", "SnapshotStore"]
