"""
SaveGameSource - Save Game Loading and Raw Record Extraction

Wraps the configured content backend: loads a save once per run, builds
filtered content packs, and extracts stored tribe/profile records straight
from the save archive without rebuilding the full content model.
"""

import logging
from pathlib import Path
from typing import Union

from ..content.base import ContentBackend, ContentContainer, ContentPack
from ..domain.models import PackFilter, PackOptions, ReadingOptions
from ..types import ExtractionError, InvocationError
from ..utils import ensure_directory, file_timestamp

logger = logging.getLogger(__name__)


class SaveGameSource:
    """
    Save game access for one run.

    The loaded container is shared read-only by every export target of the run.
    """

    def __init__(self, backend: ContentBackend, cluster_max_age: int = 90):
        """
        Args:
            backend: Content backend used to decode saves
            cluster_max_age: Maximum age in days of cluster and profile data
        """
        self.backend = backend
        self.cluster_max_age = cluster_max_age

    def load(self, map_filename: str, cluster_folder: str = "") -> ContentContainer:
        """
        Load a save game.

        Raises:
            InvocationError: If map_filename does not name an existing file
        """
        if not map_filename or not Path(map_filename).is_file():
            raise InvocationError(f"File Not Found: {map_filename}")

        logger.info(f"Loading save game: {map_filename}")
        if cluster_folder:
            logger.info(f"Cluster folder: {cluster_folder}")
        return self.backend.load_save_game(map_filename, cluster_folder, self.cluster_max_age)

    def create_pack(self, container: ContentContainer, pack_filter: PackFilter, options: PackOptions) -> ContentPack:
        logger.debug(f"Creating content pack: filter={pack_filter.model_dump()} options={options.model_dump()}")
        return self.backend.create_pack(container, pack_filter, options)

    def extract_stored_tribes(self, save_filename: str, export_folder: Union[str, Path]) -> list[Path]:
        """Write one .arktribe record per stored tribe into export_folder."""
        options = ReadingOptions.for_stored_tribes(self.cluster_max_age)
        return self._extract(save_filename, export_folder, options, "tribes")

    def extract_stored_profiles(self, save_filename: str, export_folder: Union[str, Path]) -> list[Path]:
        """Write one .arkprofile record per stored profile into export_folder."""
        options = ReadingOptions.for_stored_profiles(self.cluster_max_age)
        return self._extract(save_filename, export_folder, options, "profiles")

    def _extract(self, save_filename: str, export_folder: Union[str, Path], options: ReadingOptions, kind: str) -> list[Path]:
        if not save_filename or not Path(save_filename).is_file():
            raise InvocationError(f"File Not Found: {save_filename}")

        folder = ensure_directory(export_folder)
        logger.info(f"Starting stored {kind} extraction for file: {save_filename}")

        try:
            with open(save_filename, "rb") as stream:
                savegame = self.backend.read_savegame(stream, options)
                savegame.file_time = file_timestamp(save_filename)
                if kind == "tribes":
                    written = savegame.extract_stored_tribes(folder)
                else:
                    written = savegame.extract_stored_profiles(folder)
        except (OSError, ValueError) as e:
            raise ExtractionError(f"Stored {kind} extraction failed for {save_filename}: {e}") from e

        logger.info(f"Completed stored {kind} extraction for file: {save_filename} ({len(written)} records)")
        return written
