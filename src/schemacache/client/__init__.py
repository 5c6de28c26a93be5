"""HTTP client module for schemacache.

Provides :class:`RegistryClient`, a blocking client for the Confluent Schema
Registry REST API backed by :class:`httpx.Client`, with basic auth, retry
with exponential backoff and typed error mapping.

Example::

    from schemacache.client import RegistryClient

    with RegistryClient(config.registry) as client:
        schema = client.fetch(42)
"""

from schemacache.client.sync_client import RegistryClient

__all__ = ["RegistryClient"]
