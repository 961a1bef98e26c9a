"""Configuration Management - Application Settings.

Provides validated configuration for slice decoding, batch loading, display
defaults and logging. Values load from environment variables and an
optional ``.env`` file.
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_WINDOW_CENTER, DEFAULT_WINDOW_WIDTH, DICOM_SUFFIXES


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DecoderConfig(BaseSettings):
    """Per-slice decoding limits.

    Inputs above the size limit are rejected before any parsing happens.
    """

    max_file_size_mb: int = Field(
        default=100, ge=1, le=2048, description="Maximum slice size in MB"
    )

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


class PipelineConfig(BaseSettings):
    """Batch loading configuration."""

    max_workers: int = Field(
        default=4, ge=1, le=64, description="Number of concurrent decode workers"
    )
    file_suffixes: list[str] = Field(
        default_factory=lambda: list(DICOM_SUFFIXES),
        description="File suffixes picked up when scanning directories",
    )
    recursive: bool = Field(
        default=False, description="Descend into sub-directories when scanning"
    )

    @field_validator("file_suffixes")
    @classmethod
    def normalize_suffixes(cls, v: list[str]) -> list[str]:
        """Lower-case suffixes and ensure a leading dot."""
        normalized = []
        for suffix in v:
            suffix = suffix.strip().lower()
            if not suffix:
                continue
            normalized.append(suffix if suffix.startswith(".") else f".{suffix}")
        if not normalized:
            raise ValueError("at least one file suffix is required")
        return normalized


class DisplayConfig(BaseSettings):
    """Viewer window defaults (applied outside the decoder)."""

    window_width: float = Field(
        default=DEFAULT_WINDOW_WIDTH, gt=0, description="Display window width in HU"
    )
    window_center: float = Field(
        default=DEFAULT_WINDOW_CENTER, description="Display window center in HU"
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or console")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"json", "console"}:
            raise ValueError(f"unsupported log format: {v}")
        return v


class Settings(BaseSettings):
    """Main application settings.

    Usage:
        from dicom_stack.core.config import get_settings
        settings = get_settings()
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    decoder: DecoderConfig = Field(default_factory=DecoderConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


_settings: Settings | None = None


def get_settings(force_reload: bool = False) -> Settings:
    """Get application settings (singleton).

    Args:
        force_reload: Force reload settings from environment

    Returns:
        Settings instance

    """
    global _settings
    if _settings is None or force_reload:
        _settings = Settings()
    return _settings
