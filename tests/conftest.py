"""Pytest configuration and shared fixtures for the exporter tests."""

import json
import logging
import sys
from pathlib import Path

import pytest

from asvexport.config.settings import Settings
from asvexport.content.snapshot import SnapshotBackend
from asvexport.domain.enums import FailurePolicy


SNAPSHOT = {
    "mapName": "TheIsland",
    "tribes": [
        {"tribeId": 1, "tribeName": "Alpha", "logs": ["Day 1: Ann tamed a Raptor"]},
        {"tribeId": 2, "tribeName": "Beta", "logs": []},
    ],
    "players": [
        {"playerId": 10, "tribeId": 1, "playerName": "Ann", "lat": 40.0, "lon": 40.0, "level": 80},
        {"playerId": 20, "tribeId": 2, "playerName": "Bo", "lat": 60.0, "lon": 60.0, "level": 12},
    ],
    "structures": [
        {"className": "StoneWall", "tribeId": 1, "lat": 41.0, "lon": 41.0, "inventory": []},
        {"className": "StorageBox", "tribeId": 2, "lat": 61.0, "lon": 61.0, "inventory": [{"item": "Metal", "qty": 20}]},
    ],
    "mapStructures": [
        {"className": "SupplyCrate", "lat": 50.0, "lon": 50.0, "inventory": [{"item": "Saddle", "qty": 1}]},
        {"className": "Obelisk", "lat": 95.0, "lon": 95.0},
    ],
    "droppedItems": [
        {"className": "DeathCache", "lat": 52.0, "lon": 48.0},
    ],
    "wild": [
        {"className": "Dodo", "lat": 50.0, "lon": 50.0, "level": 5},
        {"className": "Rex", "lat": 95.0, "lon": 95.0, "level": 150},
    ],
    "tamed": [
        {"className": "Raptor", "tribeId": 1, "name": "Sharp", "lat": 40.5, "lon": 40.5, "level": 30},
        {"className": "Parasaur", "tribeId": 2, "name": "Slow", "lat": 60.5, "lon": 60.5, "level": 8},
    ],
    "profiles": [
        {"playerId": 10, "playerName": "Ann"},
        {"playerId": 20, "playerName": "Bo"},
    ],
}


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo root logger and excepthook changes made by setup_logging()."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    hook = sys.excepthook
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    sys.excepthook = hook


@pytest.fixture
def base_dir(tmp_path) -> Path:
    base = tmp_path / "app"
    base.mkdir()
    return base


@pytest.fixture
def settings(base_dir) -> Settings:
    return Settings(base_dir=base_dir, log_file=base_dir / "ASV_Error.log")


@pytest.fixture
def abort_settings(base_dir) -> Settings:
    return Settings(
        base_dir=base_dir,
        log_file=base_dir / "ASV_Error.log",
        failure_policy=FailurePolicy.ABORT,
    )


@pytest.fixture
def snapshot_data() -> dict:
    return json.loads(json.dumps(SNAPSHOT))


@pytest.fixture
def save_file(tmp_path, snapshot_data) -> Path:
    path = tmp_path / "saves" / "The Island.ark"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(snapshot_data), encoding="utf-8")
    return path


@pytest.fixture
def backend() -> SnapshotBackend:
    return SnapshotBackend()


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration document to a file and return its path."""
    def _write(data, name: str = "config.json") -> Path:
        path = tmp_path / name
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
