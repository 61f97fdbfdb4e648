"""
Snapshot content backend.

Reads a save game that has already been decoded to JSON. The document holds
entity lists keyed `tribes`, `players`, `structures`, `mapStructures`,
`droppedItems`, `wild`, `tamed` and `profiles`; every entity is a JSON object
using camelCase keys such as `tribeId`, `playerId`, `lat`, `lon` and `level`.

Tribe and player filters apply to tribes, players, player structures and tamed
creatures. The spatial circle applies to wild creatures, map structures and
dropped items.
"""

from __future__ import annotations

import json
import logging
import time
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO, Optional

from pydantic import BaseModel, Field

from ..domain.models import PackFilter, PackOptions, ReadingOptions
from .base import ContentBackend, ContentContainer, ContentPack, StoredSavegame

logger = logging.getLogger(__name__)

Entity = dict[str, Any]

PACK_MEMBER = "content.json"
TRIBE_EXTENSION = ".arktribe"
PROFILE_EXTENSION = ".arkprofile"

# File names written by export_json_all
ALL_EXPORT_FILES = {
    "tribes": "ASV_Tribes.json",
    "tribe_logs": "ASV_TribeLogs.json",
    "players": "ASV_Players.json",
    "structures": "ASV_Structures.json",
    "map_structures": "ASV_MapStructures.json",
    "wild": "ASV_Wild.json",
    "tamed": "ASV_Tamed.json",
}


class SaveSnapshot(BaseModel):
    """Decoded save game document."""
    map_name: str = Field(default="", alias="mapName")
    tribes: list[Entity] = Field(default_factory=list)
    players: list[Entity] = Field(default_factory=list)
    structures: list[Entity] = Field(default_factory=list)
    map_structures: list[Entity] = Field(default_factory=list, alias="mapStructures")
    dropped_items: list[Entity] = Field(default_factory=list, alias="droppedItems")
    wild: list[Entity] = Field(default_factory=list)
    tamed: list[Entity] = Field(default_factory=list)
    profiles: list[Entity] = Field(default_factory=list)

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
        extra = "allow"


def _write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)
    logger.debug(f"Wrote {path}")


def _in_circle(entity: Entity, pack_filter: PackFilter) -> bool:
    lat, lon = entity.get("lat"), entity.get("lon")
    if lat is None or lon is None:
        return True
    return pack_filter.contains(float(lat), float(lon))


def _without_inventory(entities: list[Entity]) -> list[Entity]:
    return [{k: v for k, v in e.items() if k != "inventory"} for e in entities]


class SnapshotContainer(ContentContainer):
    """Loaded snapshot plus any cluster uploads found next to it."""

    def __init__(self, map_filename: str, snapshot: SaveSnapshot, cluster: Optional[list[Entity]] = None):
        self.map_filename = map_filename
        self.snapshot = snapshot
        self.cluster = cluster or []


class SnapshotPack(ContentPack):
    """Filtered entity lists built from a SnapshotContainer."""

    def __init__(self, container: SnapshotContainer, pack_filter: PackFilter, options: PackOptions):
        self.map_name = container.snapshot.map_name
        self.pack_filter = pack_filter
        self.options = options
        self.cluster = container.cluster

        snap = container.snapshot
        player_tribes = {p.get("playerId"): p.get("tribeId") for p in snap.players}
        selected_player_tribe = player_tribes.get(pack_filter.player_id)

        def owned(entity: Entity) -> bool:
            if not pack_filter.matches_tribe(entity.get("tribeId")):
                return False
            if pack_filter.player_id and selected_player_tribe is not None:
                return entity.get("tribeId") == selected_player_tribe
            return True

        self.tribes = [t for t in snap.tribes if owned(t)] if options.tribes_players else []
        self.players = (
            [p for p in snap.players if owned(p) and pack_filter.matches_player(p.get("playerId"))]
            if options.tribes_players else []
        )
        self.structures = [s for s in snap.structures if owned(s)] if options.player_structures else []
        self.tamed = [c for c in snap.tamed if owned(c)] if options.tamed else []
        self.wild = [c for c in snap.wild if _in_circle(c, pack_filter)] if options.wild else []
        self.map_structures = (
            [s for s in snap.map_structures if _in_circle(s, pack_filter)] if options.structure_locations else []
        )
        self.dropped_items = (
            [d for d in snap.dropped_items if _in_circle(d, pack_filter)] if options.dropped_items else []
        )

        if not options.structure_content:
            self.structures = _without_inventory(self.structures)
            self.map_structures = _without_inventory(self.map_structures)

    def tribe_logs(self) -> list[Entity]:
        return [
            {"tribeId": t.get("tribeId"), "tribeName": t.get("tribeName", ""), "logs": t.get("logs", [])}
            for t in self.tribes
        ]

    def to_document(self) -> dict[str, Any]:
        return {
            "mapName": self.map_name,
            "exportedAt": datetime.now().isoformat(timespec="seconds"),
            "filter": self.pack_filter.model_dump(),
            "options": self.options.model_dump(),
            "tribes": self.tribes,
            "players": self.players,
            "structures": self.structures,
            "mapStructures": self.map_structures,
            "droppedItems": self.dropped_items,
            "wild": self.wild,
            "tamed": self.tamed,
            "cluster": self.cluster,
        }

    def export_pack(self, path: Path) -> None:
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(PACK_MEMBER, json.dumps(self.to_document(), default=str))
        logger.debug(f"Wrote content pack {path}")

    def export_json_all(self, folder: Path) -> None:
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)
        self.export_json_player_tribes(folder / ALL_EXPORT_FILES["tribes"])
        self.export_json_player_tribe_logs(folder / ALL_EXPORT_FILES["tribe_logs"])
        self.export_json_players(folder / ALL_EXPORT_FILES["players"])
        self.export_json_player_structures(folder / ALL_EXPORT_FILES["structures"])
        self.export_json_map_structures(folder / ALL_EXPORT_FILES["map_structures"])
        self.export_json_wild(folder / ALL_EXPORT_FILES["wild"])
        self.export_json_tamed(folder / ALL_EXPORT_FILES["tamed"])

    def export_json_map_structures(self, path: Path) -> None:
        _write_json(path, self.map_structures)

    def export_json_player_structures(self, path: Path) -> None:
        _write_json(path, self.structures)

    def export_json_player_tribe_logs(self, path: Path) -> None:
        _write_json(path, self.tribe_logs())

    def export_json_player_tribes(self, path: Path) -> None:
        _write_json(path, [{k: v for k, v in t.items() if k != "logs"} for t in self.tribes])

    def export_json_players(self, path: Path) -> None:
        _write_json(path, self.players)

    def export_json_wild(self, path: Path) -> None:
        _write_json(path, self.wild)

    def export_json_tamed(self, path: Path) -> None:
        _write_json(path, self.tamed)


class SnapshotSavegame(StoredSavegame):
    """Stored tribe and profile records of a snapshot, gated by reading options."""

    def __init__(self, snapshot: SaveSnapshot, options: ReadingOptions):
        self.snapshot = snapshot
        self.options = options
        self.file_time = None

    def _write_records(self, records: list[Entity], key: str, extension: str, folder: Path) -> list[Path]:
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)
        written = []
        for index, entity in enumerate(records):
            record_id = entity.get(key, index)
            path = folder / f"{record_id}{extension}"
            _write_json(path, {
                "fileTime": self.file_time.isoformat() if self.file_time else None,
                "record": entity,
            })
            written.append(path)
        return written

    def _profile_is_current(self, profile: Entity) -> bool:
        last_active = profile.get("lastActiveTime")
        if not last_active or self.file_time is None:
            return True
        try:
            age = self.file_time - datetime.fromisoformat(str(last_active))
        except (ValueError, TypeError):
            return True
        return age.days <= self.options.max_profile_age

    def extract_stored_tribes(self, folder: Path) -> list[Path]:
        if not self.options.stored_tribes:
            logger.debug("Stored tribes were not decoded; nothing to extract")
            return []
        return self._write_records(self.snapshot.tribes, "tribeId", TRIBE_EXTENSION, folder)

    def extract_stored_profiles(self, folder: Path) -> list[Path]:
        if not self.options.stored_profiles:
            logger.debug("Stored profiles were not decoded; nothing to extract")
            return []
        profiles = [p for p in self.snapshot.profiles if self._profile_is_current(p)]
        return self._write_records(profiles, "playerId", PROFILE_EXTENSION, folder)


class SnapshotBackend(ContentBackend):
    """Content backend for JSON save snapshots."""

    def load_save_game(self, map_filename: str, cluster_folder: str, max_cluster_age: int) -> SnapshotContainer:
        with open(map_filename, encoding="utf-8-sig") as f:
            snapshot = SaveSnapshot.model_validate(json.load(f))
        cluster = self._load_cluster(cluster_folder, max_cluster_age) if cluster_folder else []
        logger.debug(
            f"Loaded snapshot {map_filename}: {len(snapshot.tribes)} tribes, "
            f"{len(snapshot.players)} players, {len(snapshot.wild)} wild"
        )
        return SnapshotContainer(map_filename, snapshot, cluster)

    def _load_cluster(self, cluster_folder: str, max_cluster_age: int) -> list[Entity]:
        folder = Path(cluster_folder)
        if not folder.is_dir():
            logger.warning(f"Cluster folder not found: {folder}")
            return []

        cutoff = time.time() - max_cluster_age * 86400
        uploads = []
        for path in sorted(folder.glob("*.json")):
            if path.stat().st_mtime < cutoff:
                logger.debug(f"Skipping stale cluster file: {path}")
                continue
            with open(path, encoding="utf-8-sig") as f:
                uploads.append({"file": path.name, "data": json.load(f)})
        return uploads

    def create_pack(self, container: ContentContainer, pack_filter: PackFilter, options: PackOptions) -> SnapshotPack:
        if not isinstance(container, SnapshotContainer):
            raise TypeError(f"SnapshotBackend cannot pack {type(container).__name__}")
        return SnapshotPack(container, pack_filter, options)

    def read_savegame(self, stream: BinaryIO, options: ReadingOptions) -> SnapshotSavegame:
        snapshot = SaveSnapshot.model_validate(json.load(stream))
        return SnapshotSavegame(snapshot, options)
