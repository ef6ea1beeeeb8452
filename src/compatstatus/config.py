"""
Compat Status Configuration Management

Settings are read from environment variables (or a local .env file).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # === Export Configuration ===
    export_dir: str = Field(
        default=".",
        description="Directory that receives status.dat and objects.cache"
    )
    status_filename: str = Field(default="status.dat")
    objects_filename: str = Field(default="objects.cache")
    export_interval_seconds: int = Field(
        default=15,
        ge=1,
        description="Seconds between two export runs"
    )

    # === Object Graph Input ===
    objects_file: str = Field(
        default="./data/objects.json",
        description="JSON object graph read by the CLI on every tick"
    )

    # === Scheduler Configuration ===
    scheduler_timezone: str = Field(default="UTC")

    # === Logging ===
    log_level: str = Field(default="INFO")
    log_file: str = Field(
        default="",
        description="Optional log file; console only when empty"
    )

    @property
    def status_path(self) -> Path:
        """Full path of the status document."""
        return Path(self.export_dir) / self.status_filename

    @property
    def objects_path(self) -> Path:
        """Full path of the object definition document."""
        return Path(self.export_dir) / self.objects_filename

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
