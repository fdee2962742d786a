"""Note tree configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="NOTEZONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # User data directory
    data_dir: Path = Path.home() / ".notezone"
    notes_dirname: str = "Notes"

    # MCP server
    host: str = "0.0.0.0"
    port: int = 8005

    log_level: str = "INFO"

    @property
    def notes_dir(self) -> Path:
        """Store root holding the folder/note hierarchy."""
        return self.data_dir / self.notes_dirname

    @property
    def settings_file(self) -> Path:
        return self.data_dir / "settings.json"

    @property
    def reminders_file(self) -> Path:
        return self.data_dir / "reminders.json"


settings = Settings()
