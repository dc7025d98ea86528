"""
Environment configuration using Pydantic Settings.

Loaded once per process invocation and read-only afterwards.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import FailurePolicy, PersistenceMode

LOG_LEVEL_CHOICES = ("info", "error", "debug", "warn")


class EnvironmentConfig(BaseSettings):
    """Settings for one conversion run, read from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Default bucket to download files from
    download_bucket_name: str = Field(min_length=1)
    # Where final files are uploaded to
    upload_bucket_name: str = Field(min_length=1)
    log_level: str = "info"
    # Use S3 for upload (default: true); otherwise write local temp files
    use_s3: bool = True

    max_concurrency: Optional[int] = Field(default=None, ge=1)
    failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST

    soffice_path: str = "soffice"
    conversion_timeout: float = Field(default=120.0, gt=0)
    engine_archive_path: Optional[Path] = None
    engine_install_dir: Path = Path("/tmp")
    local_output_dir: Optional[Path] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = str(value).strip().lower()
        if normalized == "warning":
            normalized = "warn"
        if normalized not in LOG_LEVEL_CHOICES:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVEL_CHOICES)}, got {value!r}"
            )
        return normalized

    @field_validator("max_concurrency", "engine_archive_path", "local_output_dir", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def persistence_mode(self) -> PersistenceMode:
        return PersistenceMode.REMOTE if self.use_s3 else PersistenceMode.LOCAL


def load_config(**overrides) -> EnvironmentConfig:
    """
    Build the configuration from the environment, applying explicit overrides.

    Raises:
        ConfigurationError: If a required variable is missing or a value is invalid.
    """
    try:
        return EnvironmentConfig(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
