"""Configuration for portperf loaded from environment variables."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_CONFIDENCE = 0.95
DEFAULT_FREQUENCY = 1


class Settings(BaseSettings):
    """Library configuration.

    All fields are read from ``PORTPERF_``-prefixed environment variables or
    a local ``.env`` file.  The numerical functions never consult these
    values; a host application reads them and passes them in explicitly.
    """

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    DEFAULT_CONFIDENCE: float = DEFAULT_CONFIDENCE
    DEFAULT_FREQUENCY: float = DEFAULT_FREQUENCY

    model_config = {
        "env_prefix": "PORTPERF_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("DEFAULT_CONFIDENCE")
    @classmethod
    def _confidence_in_unit_interval(cls, value: float) -> float:
        if not 0 < value < 1:
            raise ValueError(f"Confidence must be between 0 and 1, got {value}")
        return value

    @field_validator("DEFAULT_FREQUENCY")
    @classmethod
    def _frequency_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"Frequency must be positive, got {value}")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
