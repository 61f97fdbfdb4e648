"""
Command routing: positional tokens to an export operation.

    program <mode> [inputPath] [outputPathOrClusterFolder] [outputPath]

Token 0 is the program name and token 1 the mode (case-insensitive). Token 2 is
the input path. Token 3 is the output path, unless a token 4 exists, in which
case token 3 is the cluster folder and token 4 the output path. An output path
ending in a path separator names a folder; with no output token the default
export folder is used.
"""

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from .config.settings import Settings
from .content.base import ContentBackend
from .diagnostics import record
from .domain.enums import ExportTarget, Mode
from .domain.models import Invocation
from .pipeline.export import ExportOrchestrator
from .pipeline.source import SaveGameSource
from .types import ExportError, InvocationError, RunResult

logger = logging.getLogger(__name__)


def _clean(token: str) -> str:
    return token.strip().replace('"', "")


def _output_location(token: str) -> tuple[str, str, bool]:
    """Output path, its folder, and whether the token itself names a folder."""
    export_path = _clean(token)
    if export_path.endswith(("/", os.sep)):
        return export_path, str(Path(export_path)), True
    return export_path, str(Path(export_path).parent), False


def route(tokens: Sequence[str], default_export_folder: Path) -> Invocation:
    """
    Interpret command tokens.

    Raises:
        InvocationError: If no mode was given (one token or fewer)
    """
    tokens = [t for t in tokens if t]
    if len(tokens) <= 1:
        raise InvocationError("No command line arguments provided")

    logger.info(f"ASV Command Line Started with {len(tokens)} parameters.")
    for index, token in enumerate(tokens):
        logger.info(f"CommandLineArg-{index} = {token}")

    mode = tokens[1].strip().lower()
    input_path = ""
    export_path = str(default_export_folder)
    export_folder = str(default_export_folder)
    export_is_folder = True
    cluster_folder = ""

    if len(tokens) > 2:
        input_path = _clean(tokens[2])
        logger.info(f"Input filename: {input_path}")

    if len(tokens) > 3:
        export_path, export_folder, export_is_folder = _output_location(tokens[3])
        logger.info(f"Export filename: {export_path}")

    if len(tokens) > 4:
        cluster_folder = _clean(tokens[3])
        export_path, export_folder, export_is_folder = _output_location(tokens[4])
        logger.info(f"Cluster folder: {cluster_folder}")

    return Invocation(
        mode=mode,
        input_path=input_path,
        export_path=export_path,
        export_folder=export_folder,
        export_is_folder=export_is_folder,
        cluster_folder=cluster_folder,
        tokens=tuple(tokens),
    )


def dispatch(invocation: Invocation, settings: Settings, backend: ContentBackend) -> RunResult:
    """Run the operation selected by an invocation."""
    source = SaveGameSource(backend, settings.cluster_max_age)
    orchestrator = ExportOrchestrator(source, settings)
    input_path = invocation.input_path

    try:
        mode = Mode.parse(invocation.mode)
    except ValueError:
        if not Path(input_path).is_file():
            message = f"File Not Found: {input_path}"
        else:
            message = f"Unknown export mode: {invocation.mode}"
        logger.error(message)
        return RunResult.failure(message)

    if mode.is_single_save:
        if not Path(input_path).is_file():
            message = f"File Not Found: {input_path}"
            logger.error(message)
            return RunResult.failure(message)

        return orchestrator.export_single(
            ExportTarget(mode.value),
            input_path,
            invocation.export_path,
            invocation.export_folder,
            invocation.cluster_folder,
            output_is_folder=invocation.export_is_folder,
        )

    if mode == Mode.PACK:
        logger.info(f"Exporting ASV pack for configuration: {input_path}")
        return orchestrator.export_pack(input_path)

    if mode == Mode.JSON:
        logger.info(f"Exporting JSON for configuration: {input_path}")
        return orchestrator.export_batch(input_path)

    logger.info(f"Exporting .{mode.value} data from: {input_path}")
    if mode == Mode.ARKTRIBE:
        written = source.extract_stored_tribes(input_path, invocation.export_folder)
    else:
        written = source.extract_stored_profiles(input_path, invocation.export_folder)
    return RunResult(ok=True, message=f"{len(written)} {mode.value} records written")


def run(tokens: Sequence[str], settings: Settings, backend: Optional[ContentBackend] = None) -> RunResult:
    """
    Route and run one command line. Never raises; failures come back as a RunResult.
    """
    try:
        invocation = route(tokens, settings.export_folder)
        backend = backend or settings.create_backend()
        return dispatch(invocation, settings, backend)
    except InvocationError as e:
        record(str(e), e, log=logger)
        return RunResult.failure(str(e), error=e)
    except ExportError as e:
        record(f"Failed export: {e}", e, log=logger)
        return RunResult.failure(str(e), error=e)
    except Exception as e:
        record("Error in command line export", e, log=logger)
        return RunResult.failure(f"{type(e).__name__}: {e}", error=e)
