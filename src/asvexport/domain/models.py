"""
Export Domain Models

Pydantic models for the export configuration files and the parameters handed to
the content backend. Field aliases follow the camelCase keys of the JSON files.
"""

import math
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .enums import BatchTarget

DEFAULT_EXPORT_FOLDER = "Export"
DEFAULT_PACK_FILENAME = "ASV_ContentPack.asv"
PACK_EXTENSION = ".asv"


class PackExportConfig(BaseModel):
    """Settings for `pack` mode: one consolidated content pack."""
    map_filename: str = Field(default="", alias="mapFilename", description="Save game to load")
    export_filename: str = Field(default="", alias="exportFilename", description="Destination .asv file")
    cluster_folder: str = Field(default="", alias="clusterFolder", description="Optional cluster data folder")
    tribe_id: int = Field(default=0, alias="tribeId", description="Tribe filter, 0 for all tribes")
    player_id: int = Field(default=0, alias="playerId", description="Player filter, 0 for all players")
    filter_lat: float = Field(default=50, alias="filterLat")
    filter_lon: float = Field(default=50, alias="filterLon")
    filter_rad: float = Field(default=250, alias="filterRad")
    pack_structure_locations: bool = Field(default=True, alias="packStructureLocations")
    pack_structure_content: bool = Field(default=True, alias="packStructureContent")
    pack_dropped_items: bool = Field(default=True, alias="packDroppedItems")
    pack_tribes_players: bool = Field(default=True, alias="packTribesPlayers")
    pack_tamed: bool = Field(default=True, alias="packTamed")
    pack_wild: bool = Field(default=True, alias="packWild")
    pack_player_structures: bool = Field(default=True, alias="packPlayerStructures")

    class Config:
        """Pydantic configuration."""
        frozen = True
        populate_by_name = True

    @classmethod
    def with_defaults(cls, base_dir: Path) -> "PackExportConfig":
        """Defaults with the export filename resolved against the application folder."""
        return cls(export_filename=str(base_dir / DEFAULT_EXPORT_FOLDER / DEFAULT_PACK_FILENAME))

    def to_filter(self) -> "PackFilter":
        return PackFilter(
            tribe_id=self.tribe_id,
            player_id=self.player_id,
            lat=self.filter_lat,
            lon=self.filter_lon,
            radius=self.filter_rad,
        )

    def to_options(self) -> "PackOptions":
        return PackOptions(
            structure_locations=self.pack_structure_locations,
            structure_content=self.pack_structure_content,
            tribes_players=self.pack_tribes_players,
            tamed=self.pack_tamed,
            wild=self.pack_wild,
            player_structures=self.pack_player_structures,
            dropped_items=self.pack_dropped_items,
        )


class TargetDescriptor(BaseModel):
    """Destination of one batch export target. An empty jsonFilename disables it."""
    json_filename: str = Field(default="", alias="jsonFilename")
    image_filename: str = Field(default="", alias="imageFilename", description="Reserved, never rendered")

    class Config:
        """Pydantic configuration."""
        frozen = True
        populate_by_name = True

    @property
    def enabled(self) -> bool:
        return len(self.json_filename) > 0


class TribeDescriptor(TargetDescriptor):
    add_structures: bool = Field(default=True, alias="addStructures")
    add_players: bool = Field(default=True, alias="addPlayers")
    add_tames: bool = Field(default=True, alias="addTames")


class ClassDescriptor(TargetDescriptor):
    class_name: str = Field(default="", alias="className")


class WildDescriptor(ClassDescriptor):
    min_level: int = Field(default=0, alias="minLevel")
    max_level: int = Field(default=999, alias="maxLevel")


class JsonExportConfig(BaseModel):
    """Settings for `json` batch mode: one filtered pack, up to six JSON targets."""
    map_filename: str = Field(default="", alias="mapFilename")
    cluster_folder: str = Field(default="", alias="clusterFolder")
    tribe_id: int = Field(default=0, alias="tribeId")
    player_id: int = Field(default=0, alias="playerId")
    filter_lat: float = Field(default=50, alias="filterLat")
    filter_lon: float = Field(default=50, alias="filterLon")
    filter_rad: float = Field(default=250, alias="filterRad")
    structure_content: bool = Field(default=True, alias="structureContent")

    export_tribes: TribeDescriptor = Field(default_factory=TribeDescriptor, alias="exportTribes")
    export_structures: ClassDescriptor = Field(default_factory=ClassDescriptor, alias="exportStructures")
    export_map_structures: TargetDescriptor = Field(default_factory=TargetDescriptor, alias="exportMapStructures")
    export_players: TargetDescriptor = Field(default_factory=TargetDescriptor, alias="exportPlayers")
    export_wild: WildDescriptor = Field(default_factory=WildDescriptor, alias="exportWild")
    export_tamed: ClassDescriptor = Field(default_factory=ClassDescriptor, alias="exportTamed")

    class Config:
        """Pydantic configuration."""
        frozen = True
        populate_by_name = True

    def descriptor(self, target: BatchTarget) -> TargetDescriptor:
        return {
            BatchTarget.TRIBES: self.export_tribes,
            BatchTarget.STRUCTURES: self.export_structures,
            BatchTarget.MAP_STRUCTURES: self.export_map_structures,
            BatchTarget.PLAYERS: self.export_players,
            BatchTarget.WILD: self.export_wild,
            BatchTarget.TAMED: self.export_tamed,
        }[target]

    def to_filter(self) -> "PackFilter":
        return PackFilter(
            tribe_id=self.tribe_id,
            player_id=self.player_id,
            lat=self.filter_lat,
            lon=self.filter_lon,
            radius=self.filter_rad,
        )

    def to_options(self) -> "PackOptions":
        # Dropped items are never part of a batch export
        return PackOptions(
            structure_locations=True,
            structure_content=self.structure_content,
            tribes_players=self.export_tribes.add_players,
            tamed=self.export_tribes.add_tames,
            wild=True,
            player_structures=self.export_tribes.add_structures,
            dropped_items=False,
        )


class PackFilter(BaseModel):
    """Tribe, player and spatial selection applied when building a content pack."""
    tribe_id: int = 0
    player_id: int = 0
    lat: float = 50
    lon: float = 50
    radius: float = 250

    class Config:
        """Pydantic configuration."""
        frozen = True

    def matches_tribe(self, tribe_id: Optional[int]) -> bool:
        return self.tribe_id == 0 or tribe_id == self.tribe_id

    def matches_player(self, player_id: Optional[int]) -> bool:
        return self.player_id == 0 or player_id == self.player_id

    def contains(self, lat: float, lon: float) -> bool:
        """Inclusive bounding-circle test in map lat/lon units."""
        return math.hypot(lat - self.lat, lon - self.lon) <= self.radius


class PackOptions(BaseModel):
    """Inclusion flags for a content pack."""
    structure_locations: bool = True
    structure_content: bool = True
    tribes_players: bool = True
    tamed: bool = True
    wild: bool = True
    player_structures: bool = True
    dropped_items: bool = True

    class Config:
        """Pydantic configuration."""
        frozen = True


class ReadingOptions(BaseModel):
    """Which sections of a save archive the reader decodes."""
    data_files: bool = True
    game_objects: bool = False
    stored_creatures: bool = False
    stored_tribes: bool = False
    stored_profiles: bool = False
    max_profile_age: int = 90
    build_component_tree: bool = False

    class Config:
        """Pydantic configuration."""
        frozen = True

    @classmethod
    def for_stored_tribes(cls, max_profile_age: int) -> "ReadingOptions":
        return cls(stored_tribes=True, max_profile_age=max_profile_age)

    @classmethod
    def for_stored_profiles(cls, max_profile_age: int) -> "ReadingOptions":
        return cls(stored_profiles=True, max_profile_age=max_profile_age)


class Invocation(BaseModel):
    """A routed command line: mode plus its positional paths."""
    mode: str = Field(..., description="Lower-cased, trimmed mode token")
    input_path: str = ""
    export_path: str = Field(..., description="Output file, or the default export folder")
    export_folder: str = Field(..., description="Directory part of export_path")
    export_is_folder: bool = Field(default=True, description="export_path names a directory, not a file")
    cluster_folder: str = ""
    tokens: tuple[str, ...] = ()

    class Config:
        """Pydantic configuration."""
        frozen = True
