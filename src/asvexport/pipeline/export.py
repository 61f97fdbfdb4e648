"""
ExportOrchestrator - Configuration-driven and Ad-hoc Export Runs

Runs the pack, batch JSON and single-target exports against one loaded save.
Every export target is an ExportStep; steps run sequentially and each yields a
TargetOutcome, so one failing artifact never hides the others. The failure
policy decides whether later steps still run after a failure.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..config.settings import Settings
from ..config_loader import load_json_config, load_pack_config
from ..content.base import ContentPack
from ..diagnostics import record
from ..domain.enums import BatchTarget, ExportTarget, FailurePolicy
from ..domain.models import JsonExportConfig, PackFilter, PackOptions
from ..types import RunResult, TargetExportError, TargetOutcome
from ..utils import ensure_directory, ensure_parent_directory, normalize_pack_filename
from .source import SaveGameSource

logger = logging.getLogger(__name__)

# Fixed pack parameters of the single-save ad-hoc modes
ADHOC_FILTER = PackFilter(tribe_id=0, player_id=0, lat=50, lon=50, radius=100)
ADHOC_OPTIONS = PackOptions()

BATCH_LABELS = {
    BatchTarget.TRIBES: "Tribes",
    BatchTarget.STRUCTURES: "Structures",
    BatchTarget.MAP_STRUCTURES: "Map Structures",
    BatchTarget.PLAYERS: "Players",
    BatchTarget.WILD: "Wilds",
    BatchTarget.TAMED: "Tames",
}


@dataclass(frozen=True)
class ExportStep:
    """One export target: where it goes and how to write it."""
    target: str
    path: Path
    write: Callable[[Path], None]
    is_folder: bool = False


def batch_writer(pack: ContentPack, target: BatchTarget) -> Callable[[Path], None]:
    return {
        BatchTarget.TRIBES: pack.export_json_player_tribes,
        BatchTarget.STRUCTURES: pack.export_json_player_structures,
        BatchTarget.MAP_STRUCTURES: pack.export_json_map_structures,
        BatchTarget.PLAYERS: pack.export_json_players,
        BatchTarget.WILD: pack.export_json_wild,
        BatchTarget.TAMED: pack.export_json_tamed,
    }[target]


def adhoc_writer(pack: ContentPack, target: ExportTarget) -> Callable[[Path], None]:
    return {
        ExportTarget.ALL: pack.export_json_all,
        ExportTarget.MAP: pack.export_json_map_structures,
        ExportTarget.STRUCTURES: pack.export_json_player_structures,
        ExportTarget.LOGS: pack.export_json_player_tribe_logs,
        ExportTarget.TRIBES: pack.export_json_player_tribes,
        ExportTarget.PLAYERS: pack.export_json_players,
        ExportTarget.WILD: pack.export_json_wild,
        ExportTarget.TAMED: pack.export_json_tamed,
    }[target]


def _run_step(step: ExportStep) -> None:
    try:
        if step.is_folder:
            ensure_directory(step.path)
        else:
            ensure_parent_directory(step.path)
        logger.info(f"Exporting {step.target}: {step.path}")
        step.write(step.path)
    except Exception as e:
        raise TargetExportError(step.target, str(step.path), f"{type(e).__name__}: {e}") from e


def run_steps(steps: Sequence[ExportStep], policy: FailurePolicy = FailurePolicy.CONTINUE) -> list[TargetOutcome]:
    """
    Execute export steps in order and collect one outcome per step.

    Destination directories are created on demand. A failing step is recorded
    as a TargetExportError chained to its cause. With FailurePolicy.ABORT the
    steps after the first failure are reported as skipped instead of attempted.
    """
    outcomes = []
    aborted = False

    for step in steps:
        if aborted:
            logger.info(f"Skipping {step.target}: batch aborted after an earlier failure")
            outcomes.append(TargetOutcome(step.target, str(step.path), ok=False, skipped=True))
            continue

        try:
            _run_step(step)
        except TargetExportError as e:
            record(str(e), e, log=logger)
            outcomes.append(TargetOutcome(step.target, str(step.path), ok=False, error=e))
            aborted = policy == FailurePolicy.ABORT
            continue

        outcomes.append(TargetOutcome(step.target, str(step.path), ok=True))

    return outcomes


class ExportOrchestrator:
    """
    Runs export modes against a SaveGameSource.

    Each entry point loads its configuration, loads the save once, builds one
    content pack and runs its export steps. Results are returned, not raised.
    """

    def __init__(self, source: SaveGameSource, settings: Settings):
        self.source = source
        self.settings = settings

    def export_pack(self, config_filename: str) -> RunResult:
        """Write one consolidated .asv content pack described by a configuration file."""
        logger.info(f"Starting pack export for config: {config_filename}")
        config = load_pack_config(config_filename, self.settings.base_dir)
        export_path = normalize_pack_filename(config.export_filename, self.settings.export_folder)

        try:
            ensure_parent_directory(export_path)
            container = self.source.load(config.map_filename, config.cluster_folder)
            pack = self.source.create_pack(container, config.to_filter(), config.to_options())
        except Exception as e:
            return self._failed(f"Error in pack export for config: {config_filename}", e)

        steps = [ExportStep("pack", export_path, pack.export_pack)]
        return self._summarize(f"pack export for config: {config_filename}", run_steps(steps))

    def export_batch(self, config_filename: str) -> RunResult:
        """Write the JSON export targets named by a batch configuration file."""
        logger.info(f"Starting JSON export for config: {config_filename}")
        config = load_json_config(config_filename)

        if not config.map_filename or not Path(config.map_filename).is_file():
            message = f"Save game not found for JSON export: '{config.map_filename}'"
            logger.error(message)
            return RunResult.failure(message)

        try:
            container = self.source.load(config.map_filename, config.cluster_folder)
            pack = self.source.create_pack(container, config.to_filter(), config.to_options())
        except Exception as e:
            return self._failed(f"Error in JSON export for config: {config_filename}", e)

        steps = self.batch_steps(config, pack)
        if not steps:
            logger.warning("No export targets configured; nothing written")
        outcomes = run_steps(steps, self.settings.failure_policy)
        return self._summarize(f"JSON export for config: {config_filename}", outcomes)

    def batch_steps(self, config: JsonExportConfig, pack: ContentPack) -> list[ExportStep]:
        """One step per batch target with a non-empty jsonFilename, in fixed order."""
        steps = []
        for target in BatchTarget:
            descriptor = config.descriptor(target)
            if descriptor.image_filename:
                logger.debug(f"Image export is not supported; ignoring {descriptor.image_filename}")
            if descriptor.enabled:
                steps.append(ExportStep(BATCH_LABELS[target], Path(descriptor.json_filename), batch_writer(pack, target)))
        return steps

    def export_single(
        self,
        target: ExportTarget,
        input_filename: str,
        export_path: str,
        export_folder: str,
        cluster_folder: str = "",
        output_is_folder: bool = False,
    ) -> RunResult:
        """Load a save directly and write one ad-hoc export."""
        try:
            container = self.source.load(input_filename, cluster_folder)
            pack = self.source.create_pack(container, ADHOC_FILTER, ADHOC_OPTIONS)
        except Exception as e:
            return self._failed(f"Error during export process for {input_filename}", e)

        logger.info(f"Exporting JSON ({target.value}) for: {input_filename}")
        if target == ExportTarget.ALL:
            step = ExportStep(target.value, Path(export_folder), adhoc_writer(pack, target), is_folder=True)
        else:
            destination = Path(export_path)
            if output_is_folder or destination.is_dir():
                destination = destination / f"ASV_Export_{target.value.title()}.json"
            step = ExportStep(target.value, destination, adhoc_writer(pack, target))

        return self._summarize(f"export for: {input_filename}", run_steps([step]))

    def _failed(self, message: str, error: BaseException) -> RunResult:
        record(message, error, log=logger)
        return RunResult.failure(message, error=error)

    def _summarize(self, description: str, outcomes: list[TargetOutcome]) -> RunResult:
        result = RunResult.from_outcomes(description, tuple(outcomes))
        written = sum(1 for o in outcomes if o.ok)
        if result.ok:
            logger.info(f"Completed {description} ({written} of {len(outcomes)} targets written)")
        else:
            logger.error(
                f"Failed {description}: {', '.join(result.failed_targets)} "
                f"({written} of {len(outcomes)} targets written)"
            )
        return result


__all__ = [
    "ExportOrchestrator", "ExportStep", "run_steps", "batch_writer", "adhoc_writer",
    "ADHOC_FILTER", "ADHOC_OPTIONS"
]
