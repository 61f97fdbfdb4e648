import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from .config.settings import ConfigurationError, Settings
from .diagnostics import install_exception_hook, setup_logging
from .router import run
from .utils import tokenize_command_line

PROGRAM_NAME = "asvexport"

app = typer.Typer(
    help="ASV export: JSON and content pack exports from save games",
    add_completion=False,
)


def version_callback(value: bool):
    """Display version information and exit."""
    if not value:
        return
    try:
        from . import __version__
        typer.echo(f"{PROGRAM_NAME} version: {__version__}")
    except ImportError:
        typer.echo(f"{PROGRAM_NAME} (development version)")
    raise typer.Exit()


def build_tokens(mode: Optional[str], paths: Optional[list[str]], command_line: Optional[str]) -> list[str]:
    """
    Assemble router tokens, program name first.

    A raw --command-line string is tokenized with quote handling and takes
    precedence over positional arguments. Its first token is the program name.
    """
    if command_line:
        return tokenize_command_line(command_line)
    tokens = [PROGRAM_NAME]
    if mode:
        tokens.append(mode)
    tokens.extend(paths or [])
    return [t for t in tokens if t]


@app.command()
def main(
    mode: Annotated[Optional[str], typer.Argument(help="pack | arktribe | arkprofile | json | all | map | structures | logs | tribes | players | wild | tamed")] = None,
    paths: Annotated[Optional[list[str]], typer.Argument(help="inputPath [clusterFolder] [outputPath]")] = None,
    command_line: Annotated[Optional[str], typer.Option("--command-line", help="Raw command line to tokenize. The first token is the program name, followed by mode and paths; double-quoted spans stay whole")] = None,
    log_file: Annotated[Optional[Path], typer.Option("--log-file", help="Diagnostics log file (default: <base>/ASV_Error.log)")] = None,
    env_file: Annotated[Optional[Path], typer.Option("--env-file", help="Explicit .env file with ASV_* settings")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable detailed logging output")] = False,
    version: Annotated[Optional[bool], typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit")] = None,
):
    """
    Export tribes, structures, players and creatures from a save game.

    Examples:
        asvexport tribes "/saves/The Island.ark" /exports/tribes.json
        asvexport all /saves/TheIsland.ark /saves/cluster /exports/all/
        asvexport json export-config.json
        asvexport pack pack-config.json
        asvexport arktribe /saves/TheIsland.ark /exports/tribes/out
    """
    try:
        settings = Settings.from_environment(env_file=env_file)
    except ConfigurationError as e:
        setup_logging(None, verbose)
        logging.error(f"Configuration error: {e}")
        raise typer.Exit(-1)

    setup_logging(log_file or settings.log_file, verbose)
    install_exception_hook()
    logging.debug(f"Settings: {settings!r}")

    result = run(build_tokens(mode, paths, command_line), settings)

    if result.outcomes:
        for outcome in result.outcomes:
            logging.debug(f"  {outcome.target}: {outcome.status} ({outcome.path})")
    if not result.ok:
        logging.error(f"Run failed: {result.message}")
    raise typer.Exit(result.exit_code)


if __name__ == "__main__":
    app()
