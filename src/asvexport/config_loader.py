"""
Tolerant loading of export configuration files.

Configuration files are JSON objects (YAML is accepted for .yml/.yaml files).
Loading never fails: a missing file, unreadable file, or document that is not an
object yields the defaults, and each recognised key overrides its default only
when its value validates. A bad value invalidates that key alone.

    config, ok = parse_config(PackExportConfig, text)
    config = load_pack_config("pack.json", base_dir)
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel, TypeAdapter, ValidationError

from .domain.models import JsonExportConfig, PackExportConfig

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

YAML_SUFFIXES = (".yml", ".yaml")


@lru_cache(maxsize=None)
def _adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation)


def merge_fields(model_cls: type[ModelT], data: dict[str, Any], base: Optional[ModelT] = None) -> ModelT:
    """
    Overlay recognised keys of `data` onto `base` (or the model defaults).

    Keys are matched by alias. Values for nested models must be objects and are
    merged recursively; any other value is validated against the field type and
    dropped when it does not fit.
    """
    base = base if base is not None else model_cls()
    values: dict[str, Any] = {}

    for name, field in model_cls.model_fields.items():
        key = field.alias or name
        if key not in data:
            continue
        raw = data[key]
        annotation = field.annotation

        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            if isinstance(raw, dict):
                values[name] = merge_fields(annotation, raw, getattr(base, name))
            else:
                logger.debug(f"Ignoring '{key}': expected an object, got {type(raw).__name__}")
            continue

        try:
            values[name] = _adapter(annotation).validate_python(raw)
        except ValidationError:
            logger.debug(f"Ignoring '{key}': {raw!r} is not a valid {getattr(annotation, '__name__', annotation)}")

    return base.model_copy(update=values)


def parse_config(
    model_cls: type[ModelT],
    text: str,
    base: Optional[ModelT] = None,
    yaml_format: bool = False,
) -> tuple[ModelT, bool]:
    """
    Parse configuration text.

    Returns:
        Tuple of (config, ok). When ok is False the text could not be parsed as
        an object and config is exactly `base` (or the model defaults).
    """
    base = base if base is not None else model_cls()
    try:
        document = yaml.safe_load(text) if yaml_format else json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.debug(f"Configuration is not parseable: {e}")
        return base, False

    if not isinstance(document, dict):
        logger.debug(f"Configuration root is {type(document).__name__}, expected an object")
        return base, False

    return merge_fields(model_cls, document, base), True


def load_config_file(
    model_cls: type[ModelT],
    path: Union[str, Path, None],
    base: Optional[ModelT] = None,
) -> tuple[ModelT, bool]:
    """Read and parse a configuration file; missing or unreadable files give the defaults."""
    base = base if base is not None else model_cls()
    if not path:
        return base, False

    config_path = Path(path)
    if not config_path.is_file():
        logger.debug(f"Configuration file not found: {config_path}")
        return base, False

    try:
        text = config_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Configuration file unreadable: {config_path}: {e}")
        return base, False

    return parse_config(model_cls, text, base, yaml_format=config_path.suffix.lower() in YAML_SUFFIXES)


def load_pack_config(path: Union[str, Path, None], base_dir: Path) -> PackExportConfig:
    """Load a `pack` mode configuration, falling back to defaults rooted at base_dir."""
    config, ok = load_config_file(PackExportConfig, path, PackExportConfig.with_defaults(base_dir))
    if not ok:
        logger.debug("Using default pack configuration")
    return config


def load_json_config(path: Union[str, Path, None]) -> JsonExportConfig:
    """Load a `json` batch mode configuration, falling back to defaults."""
    config, ok = load_config_file(JsonExportConfig, path)
    if not ok:
        logger.debug("Using default JSON export configuration")
    return config
