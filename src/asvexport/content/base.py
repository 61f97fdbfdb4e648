"""
Content model interface.

The exporter never decodes save files itself. A content backend loads a save
into a container, builds filtered content packs from it, and reads raw stored
tribe/profile records from a save archive. The orchestrator only talks to these
abstract classes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional

from ..domain.models import PackFilter, PackOptions, ReadingOptions


class ContentContainer(ABC):
    """A loaded and indexed save game. Read-only once loaded."""

    map_filename: str = ""


class ContentPack(ABC):
    """A filtered view of a container that can be written as JSON or as a pack."""

    @abstractmethod
    def export_pack(self, path: Path) -> None:
        """Write the consolidated .asv pack."""

    @abstractmethod
    def export_json_all(self, folder: Path) -> None:
        """Write every JSON export into folder."""

    @abstractmethod
    def export_json_map_structures(self, path: Path) -> None: ...

    @abstractmethod
    def export_json_player_structures(self, path: Path) -> None: ...

    @abstractmethod
    def export_json_player_tribe_logs(self, path: Path) -> None: ...

    @abstractmethod
    def export_json_player_tribes(self, path: Path) -> None: ...

    @abstractmethod
    def export_json_players(self, path: Path) -> None: ...

    @abstractmethod
    def export_json_wild(self, path: Path) -> None: ...

    @abstractmethod
    def export_json_tamed(self, path: Path) -> None: ...


class StoredSavegame(ABC):
    """Stored tribe/profile records decoded from a save archive."""

    file_time: Optional[datetime] = None

    @abstractmethod
    def extract_stored_tribes(self, folder: Path) -> list[Path]:
        """Write one record file per stored tribe and return their paths."""

    @abstractmethod
    def extract_stored_profiles(self, folder: Path) -> list[Path]:
        """Write one record file per stored profile and return their paths."""


class ContentBackend(ABC):
    """Factory for containers, packs and archive readers."""

    @abstractmethod
    def load_save_game(self, map_filename: str, cluster_folder: str, max_cluster_age: int) -> ContentContainer:
        """Load and index a save file."""

    @abstractmethod
    def create_pack(self, container: ContentContainer, pack_filter: PackFilter, options: PackOptions) -> ContentPack:
        """Build a filtered content pack from a loaded container."""

    @abstractmethod
    def read_savegame(self, stream: BinaryIO, options: ReadingOptions) -> StoredSavegame:
        """Decode the sections of an open save stream selected by options."""
