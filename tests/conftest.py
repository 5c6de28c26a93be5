"""Shared test fixtures for schemacache.

Provides sample schema documents, an isolated XDG directory layout, and
automatic reset of the global output manager between tests.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from schemacache.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams out per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Isolated directories
# ---------------------------------------------------------------------------


@pytest.fixture
def xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """Point the XDG config, cache and data dirs at *tmp_path*.

    Also clears the ``SCHEMACACHE_*`` environment variables so the host
    environment cannot leak into config resolution.
    """
    dirs = {
        "config": tmp_path / "config",
        "cache": tmp_path / "cache",
        "data": tmp_path / "data",
    }
    monkeypatch.setattr("schemacache.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(dirs["config"]))
    monkeypatch.setenv("XDG_CACHE_HOME", str(dirs["cache"]))
    monkeypatch.setenv("XDG_DATA_HOME", str(dirs["data"]))
    for var in (
        "SCHEMACACHE_REGISTRY_URL",
        "SCHEMACACHE_CACHE_DIR",
        "SCHEMACACHE_USERNAME",
        "SCHEMACACHE_PASSWORD",
    ):
        monkeypatch.delenv(var, raising=False)
    return dirs


# ---------------------------------------------------------------------------
# Schema documents
# ---------------------------------------------------------------------------


@pytest.fixture
def person_schema() -> str:
    return json.dumps(
        {
            "type": "record",
            "name": "person",
            "fields": [{"name": "name", "type": "string"}],
        }
    )


@pytest.fixture
def city_schema() -> str:
    return json.dumps(
        {
            "type": "record",
            "name": "city",
            "fields": [{"name": "name", "type": "string"}],
        }
    )
