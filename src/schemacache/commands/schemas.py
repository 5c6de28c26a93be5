"""Schema commands -- fetch, register, list, and inspect schemas.

``fetch`` and ``register`` go through
:class:`~schemacache.cache.CachingRegistry`, so repeated invocations are
answered from the snapshot directory without contacting the registry.
The other commands read mutable registry state (subject listings, latest
versions) and always go to the network.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from schemacache.output import debug, format_response, print_data


@contextmanager
def _open_registry(ctx: typer.Context) -> Iterator[tuple]:
    """Yield ``(client, caching_registry)`` for the resolved configuration."""
    from schemacache.cache import CachingRegistry
    from schemacache.client import RegistryClient
    from schemacache.config import resolve_config

    obj = ctx.obj or {}
    config = resolve_config(
        cli_url=obj.get("registry_url"),
        cli_cache_dir=obj.get("cache_dir"),
        cli_no_cache=obj.get("no_cache", False),
    )
    disk_path = config.cache.directory if config.cache.enabled else None
    debug(f"Registry: {config.registry.url}, snapshots: {disk_path or 'memory only'}")

    with RegistryClient(config.registry) as client:
        yield client, CachingRegistry(client, disk_path=disk_path)


def fetch_command(
    ctx: typer.Context,
    schema_id: int = typer.Argument(help="Global schema id."),
) -> None:
    """Print the schema document registered under SCHEMA_ID.

    Example::

        schemacache fetch 42
    """
    with _open_registry(ctx) as (_, registry):
        format_response(registry.fetch(schema_id))


def register_command(
    ctx: typer.Context,
    subject: str = typer.Argument(help="Subject to register the schema under."),
    schema_file: typer.FileText = typer.Argument(
        help="Path to the schema document, or '-' to read stdin."
    ),
) -> None:
    """Register a schema under SUBJECT and print its id.

    Example::

        schemacache register orders-value schemas/order.avsc
        cat order.avsc | schemacache register orders-value -
    """
    schema = schema_file.read().strip()
    with _open_registry(ctx) as (_, registry):
        print_data(str(registry.register(subject, schema)))


def subjects_command(ctx: typer.Context) -> None:
    """List registered subjects."""
    with _open_registry(ctx) as (client, _):
        format_response(client.subjects())


def versions_command(
    ctx: typer.Context,
    subject: str = typer.Argument(help="Subject name."),
) -> None:
    """List the versions registered under SUBJECT."""
    with _open_registry(ctx) as (client, _):
        format_response(client.subject_versions(subject))


def show_command(
    ctx: typer.Context,
    subject: str = typer.Argument(help="Subject name."),
    version: str = typer.Argument("latest", help="Version number or 'latest'."),
) -> None:
    """Show one version of SUBJECT (id, version, and schema document)."""
    with _open_registry(ctx) as (client, _):
        record = client.subject_version(subject, version)
        format_response(record.model_dump(by_alias=True))


def check_command(
    ctx: typer.Context,
    subject: str = typer.Argument(help="Subject name."),
    schema_file: typer.FileText = typer.Argument(
        help="Path to the schema document, or '-' to read stdin."
    ),
) -> None:
    """Check whether a schema is already registered under SUBJECT.

    Exits with code 4 when it is not.
    """
    schema = schema_file.read().strip()
    with _open_registry(ctx) as (client, _):
        record = client.check(subject, schema)
        format_response(record.model_dump(by_alias=True))
