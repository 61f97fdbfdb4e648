"""
Consolidated Utilities

Small helpers shared by the router and the export pipeline.

Sections:
- Command-line tokenizing
- Filesystem and path operations
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Union

from .domain.models import DEFAULT_PACK_FILENAME, PACK_EXTENSION

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

# =============================================================================
# Command-line Tokenizing
# =============================================================================

def tokenize_command_line(command_line: str) -> list[str]:
    """
    Split a raw command line into tokens, keeping double-quoted spans whole.

    The line is split on '"'. Even-indexed segments lie outside quotes and are
    split on whitespace; odd-indexed segments lie inside quotes and are kept as
    single tokens, spaces included. An unbalanced quote leaves the rest of the
    line inside quotes. Empty tokens are dropped.

    Example:
        >>> tokenize_command_line('asv tribes "/saves/The Island.ark" out.json')
        ['asv', 'tribes', '/saves/The Island.ark', 'out.json']
    """
    tokens = []
    for index, segment in enumerate(command_line.strip().split('"')):
        if index % 2 == 0:
            tokens.extend(_WHITESPACE.split(segment))
        else:
            tokens.append(segment)
    return [token for token in tokens if token]


# =============================================================================
# Filesystem and Path Operations
# =============================================================================

def ensure_directory(path: Union[str, Path]) -> Path:
    """Create a directory if absent; safe to call repeatedly."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def ensure_parent_directory(file_path: Union[str, Path]) -> Path:
    """Create the directory that will hold file_path and return it."""
    parent = Path(file_path).parent
    return ensure_directory(parent)


def normalize_pack_filename(export_filename: str, default_folder: Path) -> Path:
    """
    Resolve the destination of a content pack.

    A filename without a directory part is placed in default_folder, an empty
    filename becomes the default pack name, and a missing .asv extension is appended.
    """
    if not export_filename:
        return default_folder / DEFAULT_PACK_FILENAME

    path = Path(export_filename)
    if not path.parent.parts:
        path = default_folder / path
    if not path.name.lower().endswith(PACK_EXTENSION.lstrip(".")):
        path = path.with_name(path.name + PACK_EXTENSION)
    return path


def file_timestamp(path: Union[str, Path]) -> datetime:
    """Last-write time of a file as a local datetime."""
    return datetime.fromtimestamp(Path(path).stat().st_mtime)
