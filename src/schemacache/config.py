"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for schemacache:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.schemacache/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~schemacache.models.GlobalConfig`
  JSON file storing the registry URL, credentials and cache settings.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the global config into the effective
  configuration.
* **Snapshot placement** -- :func:`registry_cache_dir` gives every registry
  URL its own snapshot directory.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`), which the cache snapshot store shares.
"""

from __future__ import annotations

import hashlib
import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from schemacache.exceptions import ConfigError
from schemacache.models import GlobalConfig

_APP_NAME = "schemacache"
_CONFIG_FILENAME = "config.json"

ENV_REGISTRY_URL = "SCHEMACACHE_REGISTRY_URL"
ENV_CACHE_DIR = "SCHEMACACHE_CACHE_DIR"
ENV_USERNAME = "SCHEMACACHE_USERNAME"
ENV_PASSWORD = "SCHEMACACHE_PASSWORD"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/schemacache/`` (default
    ``~/.config/schemacache/``). On macOS/Windows: ``~/.schemacache/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Holds the schema snapshots. Unlike an HTTP response cache, deleting it
    only costs a round trip per schema: every entry can be re-learned from
    the registry.

    On Linux/BSD: ``$XDG_CACHE_HOME/schemacache/`` (default
    ``~/.cache/schemacache/``). On macOS/Windows: ``~/.schemacache/cache/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CACHE_HOME", (".cache",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/schemacache/`` (default
    ``~/.local/share/schemacache/``). On macOS/Windows: ``~/.schemacache/logs/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def registry_cache_dir(url: str) -> Path:
    """Return the snapshot directory for the registry at *url*.

    The directory name is a short SHA-256 digest of the URL (trailing
    slashes ignored) so two registries never share ids or registrations.
    The directory is not created here; the snapshot store creates it on
    first write.
    """
    digest = hashlib.sha256(url.rstrip("/").encode()).hexdigest()[:16]
    return get_cache_dir() / "registries" / digest


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~schemacache.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_config(
    cli_url: Optional[str] = None,
    cli_cache_dir: Optional[str] = None,
    cli_no_cache: bool = False,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_url``, ``cli_cache_dir``, ``cli_no_cache``)
        2. Environment variables (``SCHEMACACHE_REGISTRY_URL``,
           ``SCHEMACACHE_CACHE_DIR``, ``SCHEMACACHE_USERNAME``,
           ``SCHEMACACHE_PASSWORD``)
        3. User config (``~/.config/schemacache/config.json``)
        4. Defaults

    When the cache is enabled and no directory was configured anywhere,
    ``cache.directory`` is filled in from :func:`registry_cache_dir` for the
    resolved registry URL.

    Returns:
        The effective :class:`~schemacache.models.GlobalConfig`.
    """
    # 4 + 3. Defaults and user config
    config = load_global_config()
    registry = config.registry
    cache = config.cache

    # 2. Environment variables
    env_url = os.environ.get(ENV_REGISTRY_URL)
    if env_url:
        registry.url = env_url
    env_cache_dir = os.environ.get(ENV_CACHE_DIR)
    if env_cache_dir:
        cache.directory = env_cache_dir
    env_username = os.environ.get(ENV_USERNAME)
    if env_username:
        registry.username = env_username
    env_password = os.environ.get(ENV_PASSWORD)
    if env_password:
        registry.password = env_password

    # 1. CLI flags
    if cli_url is not None:
        registry.url = cli_url
    if cli_cache_dir is not None:
        cache.directory = cli_cache_dir
    if cli_no_cache:
        cache.enabled = False

    if cache.enabled and cache.directory is None and registry.url:
        cache.directory = str(registry_cache_dir(registry.url))

    return config
