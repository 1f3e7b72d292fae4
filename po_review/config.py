from pathlib import Path

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path("config.yaml")


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Record store
    record_store: str = "sql"  # "sql" | "memory"
    database_url: str = "sqlite:///./data/po_review.db"
    database_echo: bool = False
    seed_file: str | None = None

    # Viewer timezone (IANA name); None uses the server's local zone
    timezone: str | None = None

    # HTTP
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"

    # Opik
    opik_workspace: str | None = None
    opik_project: str = "po-review"
    opik_api_key: str | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AppConfig":
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    @classmethod
    def load(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> "AppConfig":
        """Read ``config.yaml`` when present, otherwise env and defaults."""
        if Path(path).exists():
            return cls.from_yaml(path)
        return cls()

    @classmethod
    def for_tests(cls) -> "AppConfig":
        """Pre-configured for tests: in-memory store, UTC viewer."""
        return cls(
            record_store="memory",
            seed_file=None,
            timezone="UTC",
            _env_file=None,
        )
