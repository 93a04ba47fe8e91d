"""Unified settings for robyn-file-upload."""

import importlib.metadata
import re
import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fileupload.models.upload import UploadConfig

NAME_PATTERN = r"^[a-z]{1,40}$"
DEFAULT_MAX_FILE_SIZE = 20 * 1024 * 1024


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict, empty when running from an installed wheel."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(project: dict) -> str:
    """Get version from package metadata or fallback to pyproject."""
    try:
        return importlib.metadata.version("robyn-file-upload")
    except importlib.metadata.PackageNotFoundError:
        return project.get("project", {}).get("version", "0.0.0")


class Settings(BaseSettings):
    """Service level settings for robyn-file-upload."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "robyn-file-upload")
    API_DESCRIPTION: ClassVar[str] = PROJECT.get("project", {}).get(
        "description", "Uploads files to the temporary directory via POST request"
    )
    API_VERSION: ClassVar[str] = get_version(PROJECT)

    # Server
    API_HOST: str = "0.0.0.0"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class UploadSettings(BaseSettings):
    """Upload endpoint options, each overridable through a FU_* environment variable."""

    APP_PORT: int = Field(default=8080, ge=1024, le=65535)
    UPLOAD_PATH: str = "upload"
    UPLOAD_PARAM_NAME: str = "files"
    UPLOAD_MAX_FILE_SIZE: int = DEFAULT_MAX_FILE_SIZE

    @field_validator("UPLOAD_PATH", "UPLOAD_PARAM_NAME")
    @classmethod
    def check_name(cls, value: str) -> str:
        if not re.fullmatch(NAME_PATTERN, value):
            raise ValueError(f"value should match '{NAME_PATTERN}'")
        return value

    @property
    def upload_config(self) -> UploadConfig:
        return UploadConfig(field_name=self.UPLOAD_PARAM_NAME, max_size=self.UPLOAD_MAX_FILE_SIZE)

    model_config = SettingsConfigDict(
        env_prefix="FU_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


settings = Settings()  # type: ignore
