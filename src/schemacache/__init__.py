"""schemacache -- permanent, disk-backed caching for schema registry lookups.

Schema registries are read-heavy and their mappings never change once
created: an id always names the same schema, and a schema registered under a
subject always keeps its id. This package exploits that with
:class:`~schemacache.cache.CachingRegistry`, which wraps a registry client
and answers each distinct ``fetch`` or ``register`` call from the network at
most once, persisting every answer to JSON snapshots on disk.

Typical use::

    from schemacache import CachingRegistry, RegistryClient
    from schemacache.models import RegistryConfig

    with RegistryClient(RegistryConfig(url="http://localhost:8081")) as client:
        registry = CachingRegistry(client, disk_path="/var/cache/schemas")
        schema_id = registry.register("orders-value", schema_json)
        assert registry.fetch(schema_id) == schema_json

Modules:
    app: Typer application and CLI entry point.
    cache: The caching registry and its snapshot files.
    client: HTTP client for the Confluent Schema Registry API.
    models: Pydantic models for configuration and registry payloads.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

from schemacache.cache import CachingRegistry  # noqa: E402
from schemacache.client import RegistryClient  # noqa: E402

__all__ = ["CachingRegistry", "RegistryClient", "__version__"]
