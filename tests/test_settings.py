"""Tests for process settings and content backend resolution."""

import pytest

from asvexport.config.settings import ConfigurationError, Settings
from asvexport.content.snapshot import SnapshotBackend
from asvexport.domain.models import DEFAULT_EXPORT_FOLDER
from asvexport.types import BackendError, ExportError


def test_export_folder_under_base_dir(tmp_path):
    settings = Settings(base_dir=tmp_path, log_file=tmp_path / "ASV_Error.log")
    assert settings.export_folder == tmp_path / DEFAULT_EXPORT_FOLDER


def test_default_backend_resolves(tmp_path):
    settings = Settings(base_dir=tmp_path, log_file=tmp_path / "ASV_Error.log")
    assert isinstance(settings.create_backend(), SnapshotBackend)


@pytest.mark.parametrize("backend_path", ["asvexport.nowhere:Backend", "asvexport.content.snapshot:Missing"])
def test_unresolvable_backend_raises_backend_error(tmp_path, backend_path):
    settings = Settings(base_dir=tmp_path, log_file=tmp_path / "ASV_Error.log", backend_path=backend_path)
    with pytest.raises(BackendError, match="Cannot load content backend") as excinfo:
        settings.create_backend()
    assert isinstance(excinfo.value, ExportError)


def test_backend_path_requires_attribute(tmp_path):
    with pytest.raises(ConfigurationError):
        Settings(base_dir=tmp_path, log_file=tmp_path / "ASV_Error.log", backend_path="asvexport.content")


def test_from_environment_reads_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ASV_CLUSTER_MAX_AGE", "30")
    monkeypatch.setenv("ASV_FAILURE_POLICY", "Abort")
    monkeypatch.delenv("ASV_LOG_FILE", raising=False)
    monkeypatch.delenv("ASV_CONTENT_BACKEND", raising=False)

    settings = Settings.from_environment(base_dir=tmp_path)
    assert settings.cluster_max_age == 30
    assert settings.failure_policy.value == "abort"
    assert settings.log_file == tmp_path / "ASV_Error.log"


def test_from_environment_rejects_bad_age(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ASV_CLUSTER_MAX_AGE", "ninety")
    with pytest.raises(ConfigurationError, match="ASV_CLUSTER_MAX_AGE"):
        Settings.from_environment(base_dir=tmp_path)
