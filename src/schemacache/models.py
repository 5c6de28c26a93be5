"""Pydantic models shared across schemacache modules.

**Configuration models** are serialised as JSON in the user's config
directory: :class:`RegistryConfig`, :class:`CacheConfig`,
:class:`OutputConfig` and :class:`GlobalConfig`.

**Registry payload models** describe records returned by the schema
registry REST API: :class:`SubjectVersion`.

The cache core itself deals only in plain ``int`` ids and ``str`` schema
documents; these models live at the configuration and HTTP edges.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Config ---


class RegistryConfig(BaseModel):
    """Connection settings for the upstream schema registry."""

    url: Optional[str] = Field(
        default=None, description="Base URL of the schema registry"
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=3, description="Max retry attempts")
    username: Optional[str] = Field(
        default=None, description="HTTP basic auth user name"
    )
    password: Optional[str] = Field(
        default=None, description="HTTP basic auth password"
    )


class CacheConfig(BaseModel):
    """Durable snapshot settings for :class:`~schemacache.cache.CachingRegistry`.

    When ``directory`` is unset, snapshots are stored in a per-registry
    directory under the XDG cache dir (see
    :func:`~schemacache.config.registry_cache_dir`). Disabling the cache
    keeps it in memory only for the life of the process.
    """

    enabled: bool = Field(default=True, description="Persist cache snapshots to disk")
    directory: Optional[str] = Field(
        default=None, description="Directory holding the snapshot files"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto",
        description="Data format used when neither --json nor --plain is given",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/schemacache/config.json``.

    Loaded and saved by :func:`~schemacache.config.load_global_config` and
    :func:`~schemacache.config.save_global_config`. Environment variables and
    CLI flags override these values; see
    :func:`~schemacache.config.resolve_config`.
    """

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Registry payloads ---


class SubjectVersion(BaseModel):
    """A schema registered under a subject at a particular version.

    Returned by ``GET /subjects/{subject}/versions/{version}`` and by the
    ``POST /subjects/{subject}`` lookup. ``schema`` is exposed as
    :attr:`schema_` because it would otherwise shadow a ``BaseModel``
    attribute.
    """

    model_config = ConfigDict(populate_by_name=True)

    subject: str
    version: int
    id: int
    schema_: str = Field(alias="schema")
