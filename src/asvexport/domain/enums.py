"""
Export Enumerations

Core enums for type safety and clear interface definitions across the exporter.
"""

from enum import Enum


class Mode(str, Enum):
    """Command-line modes selected by the first argument."""
    PACK = "pack"               # Consolidated content pack from a configuration file
    ARKTRIBE = "arktribe"       # Raw stored-tribe extraction
    ARKPROFILE = "arkprofile"   # Raw stored-profile extraction
    JSON = "json"               # Batch JSON export from a configuration file
    ALL = "all"
    MAP = "map"
    STRUCTURES = "structures"
    LOGS = "logs"
    TRIBES = "tribes"
    PLAYERS = "players"
    WILD = "wild"
    TAMED = "tamed"

    @classmethod
    def parse(cls, value: str) -> "Mode":
        """Case-insensitive lookup; raises ValueError for unknown modes."""
        return cls(value.strip().lower())

    @property
    def is_single_save(self) -> bool:
        """True for modes that load the save directly and export one artifact."""
        return self not in (Mode.PACK, Mode.ARKTRIBE, Mode.ARKPROFILE, Mode.JSON)


class ExportTarget(str, Enum):
    """Targets of the single-save ad-hoc modes."""
    ALL = "all"
    MAP = "map"
    STRUCTURES = "structures"
    LOGS = "logs"
    TRIBES = "tribes"
    PLAYERS = "players"
    WILD = "wild"
    TAMED = "tamed"


class BatchTarget(str, Enum):
    """Targets of the configuration-file batch mode, in export order."""
    TRIBES = "tribes"
    STRUCTURES = "structures"
    MAP_STRUCTURES = "mapStructures"
    PLAYERS = "players"
    WILD = "wild"
    TAMED = "tamed"


class FailurePolicy(str, Enum):
    """What the batch orchestrator does after a target fails."""
    CONTINUE = "continue"   # Attempt every remaining target
    ABORT = "abort"         # Report remaining targets as skipped
