"""
Process settings for the save-game exporter.

Usage:
    from asvexport.config.settings import Settings
    settings = Settings()
    backend = settings.create_backend()

Environment Variables:
    ASV_BASE_DIR: Application folder; app-relative paths (Export/, log file) resolve here
    ASV_LOG_FILE: Diagnostics log file
    ASV_CONTENT_BACKEND: Content backend factory as "module:attribute"
    ASV_CLUSTER_MAX_AGE: Maximum age in days of cluster and profile data
    ASV_FAILURE_POLICY: "continue" or "abort" after a failed batch target
"""

import importlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..domain.enums import FailurePolicy
from ..domain.models import DEFAULT_EXPORT_FOLDER
from ..types import BackendError

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "asvexport.content.snapshot:SnapshotBackend"
DEFAULT_LOG_FILENAME = "ASV_Error.log"


class ConfigurationError(Exception):
    """Raised when process settings are invalid or incomplete."""
    pass


@dataclass(frozen=True)
class Settings:
    """
    Process-wide settings resolved once per run.

    Values come from explicit arguments first, then environment variables
    (optionally loaded from `.env.{ENVIRONMENT}` and `.env`), then defaults.

    Example:
        settings = Settings.from_environment()
        settings = Settings(base_dir=Path("/opt/asv"))
    """
    base_dir: Path
    log_file: Path
    backend_path: str = DEFAULT_BACKEND
    cluster_max_age: int = 90
    failure_policy: FailurePolicy = FailurePolicy.CONTINUE

    def __post_init__(self):
        """Validate settings."""
        if self.cluster_max_age < 0:
            raise ConfigurationError("Cluster max age must be non-negative")
        if ":" not in self.backend_path:
            raise ConfigurationError(
                f"Content backend must be given as 'module:attribute', got '{self.backend_path}'"
            )

    @property
    def export_folder(self) -> Path:
        return self.base_dir / DEFAULT_EXPORT_FOLDER

    @classmethod
    def from_environment(cls, env_file: Optional[Path] = None, base_dir: Optional[Path] = None) -> "Settings":
        """Build settings from the environment, loading .env files first."""
        _load_environment_variables(env_file)

        resolved_base = base_dir or Path(os.getenv("ASV_BASE_DIR") or Path.cwd())
        log_file = os.getenv("ASV_LOG_FILE")

        max_age_raw = os.getenv("ASV_CLUSTER_MAX_AGE", "90")
        try:
            cluster_max_age = int(max_age_raw)
        except ValueError:
            raise ConfigurationError(f"ASV_CLUSTER_MAX_AGE must be an integer, got '{max_age_raw}'")

        policy_raw = os.getenv("ASV_FAILURE_POLICY", FailurePolicy.CONTINUE.value)
        try:
            failure_policy = FailurePolicy(policy_raw.strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in FailurePolicy)
            raise ConfigurationError(f"ASV_FAILURE_POLICY must be one of: {allowed}, got '{policy_raw}'")

        return cls(
            base_dir=resolved_base,
            log_file=Path(log_file) if log_file else resolved_base / DEFAULT_LOG_FILENAME,
            backend_path=os.getenv("ASV_CONTENT_BACKEND", DEFAULT_BACKEND),
            cluster_max_age=cluster_max_age,
            failure_policy=failure_policy,
        )

    def create_backend(self):
        """
        Import and instantiate the configured content backend.

        Raises:
            BackendError: If the module or attribute cannot be found
        """
        module_name, _, attribute = self.backend_path.partition(":")
        try:
            module = importlib.import_module(module_name)
            factory = getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            raise BackendError(f"Cannot load content backend '{self.backend_path}': {e}") from e
        return factory()

    def __repr__(self) -> str:
        return (
            f"Settings(base_dir={self.base_dir}, "
            f"backend={self.backend_path}, "
            f"failure_policy={self.failure_policy.value})"
        )


def _load_environment_variables(env_file: Optional[Path]) -> list[str]:
    """Load environment variables from an explicit file or .env files in the working directory."""
    loaded_files = []

    if env_file:
        if not env_file.exists():
            raise ConfigurationError(f"Specified env file not found: {env_file}")
        load_dotenv(env_file)
        loaded_files.append(str(env_file))
    else:
        environment = os.getenv("ENVIRONMENT", "development")
        for candidate in (Path.cwd() / f".env.{environment}", Path.cwd() / ".env"):
            if candidate.exists():
                load_dotenv(candidate)
                loaded_files.append(str(candidate))

    logger.debug(f"Loaded env files: {loaded_files}")
    return loaded_files
