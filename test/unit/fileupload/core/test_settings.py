"""Tests for upload settings."""

import pytest
from pydantic import ValidationError

from fileupload.core.settings import DEFAULT_MAX_FILE_SIZE, Settings, UploadSettings, read_pyproject


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate from FU_* variables and any .env file of the working directory."""
    for name in ("FU_APP_PORT", "FU_UPLOAD_PATH", "FU_UPLOAD_PARAM_NAME", "FU_UPLOAD_MAX_FILE_SIZE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    upload_settings = UploadSettings()

    assert upload_settings.APP_PORT == 8080
    assert upload_settings.UPLOAD_PATH == "upload"
    assert upload_settings.UPLOAD_PARAM_NAME == "files"
    assert upload_settings.UPLOAD_MAX_FILE_SIZE == DEFAULT_MAX_FILE_SIZE == 20 * 1024 * 1024


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FU_APP_PORT", "9090")
    monkeypatch.setenv("FU_UPLOAD_PATH", "incoming")
    monkeypatch.setenv("FU_UPLOAD_PARAM_NAME", "docs")
    monkeypatch.setenv("FU_UPLOAD_MAX_FILE_SIZE", "1024")

    upload_settings = UploadSettings()

    assert upload_settings.APP_PORT == 9090
    assert upload_settings.UPLOAD_PATH == "incoming"
    assert upload_settings.UPLOAD_PARAM_NAME == "docs"
    assert upload_settings.UPLOAD_MAX_FILE_SIZE == 1024


def test_init_values_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FU_APP_PORT", "9090")
    assert UploadSettings(APP_PORT=9191).APP_PORT == 9191


@pytest.mark.parametrize("port", [0, 80, 1023, 65536])
def test_port_out_of_range(port: int) -> None:
    with pytest.raises(ValidationError):
        UploadSettings(APP_PORT=port)


def test_port_lower_bound_accepted() -> None:
    assert UploadSettings(APP_PORT=1024).APP_PORT == 1024


@pytest.mark.parametrize("value", ["", "Upload", "up-load", "up/load", "upload1", "a" * 41])
@pytest.mark.parametrize("field", ["UPLOAD_PATH", "UPLOAD_PARAM_NAME"])
def test_invalid_names(field: str, value: str) -> None:
    with pytest.raises(ValidationError):
        UploadSettings(**{field: value})


def test_upload_config() -> None:
    config = UploadSettings(UPLOAD_PARAM_NAME="docs", UPLOAD_MAX_FILE_SIZE=10).upload_config

    assert config.field_name == "docs"
    assert config.max_size == 10


def test_read_pyproject_missing_file(tmp_path) -> None:
    assert read_pyproject(tmp_path / "pyproject.toml") == {}


def test_service_identity() -> None:
    assert Settings.API_NAME == "robyn-file-upload"
    assert Settings.API_VERSION
