"""Unit tests for AppConfig."""
from pathlib import Path

import pytest

from po_review.config import AppConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Prevent real env vars and .env file from leaking into tests."""
    monkeypatch.chdir(tmp_path)
    for key in ("RECORD_STORE", "DATABASE_URL", "TIMEZONE", "LOG_LEVEL", "OPIK_API_KEY", "OPIK_WORKSPACE"):
        monkeypatch.delenv(key, raising=False)


class TestAppConfig:
    def test_creates_with_defaults(self):
        config = AppConfig()
        assert config.record_store == "sql"
        assert config.database_url == "sqlite:///./data/po_review.db"
        assert config.database_echo is False
        assert config.seed_file is None
        assert config.timezone is None
        assert config.cors_origins == ["http://localhost:3000"]
        assert config.log_level == "INFO"
        assert config.opik_project == "po-review"

    def test_from_yaml(self, tmp_path):
        yaml_content = """\
record_store: memory
seed_file: seed.yaml
timezone: Europe/Amsterdam
cors_origins:
  - http://dashboard.local
log_level: DEBUG
opik_project: my-project
"""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text(yaml_content)

        config = AppConfig.from_yaml(yaml_file)
        assert config.record_store == "memory"
        assert config.seed_file == "seed.yaml"
        assert config.timezone == "Europe/Amsterdam"
        assert config.cors_origins == ["http://dashboard.local"]
        assert config.log_level == "DEBUG"
        assert config.opik_project == "my-project"

    def test_from_yaml_empty_file_uses_defaults(self, tmp_path):
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("")
        assert AppConfig.from_yaml(yaml_file).record_store == "sql"

    def test_from_yaml_with_real_config(self):
        config_path = Path(__file__).parent.parent.parent / "config.yaml"
        config = AppConfig.from_yaml(config_path)
        assert config.record_store == "sql"
        assert config.database_url.startswith("sqlite")

    def test_load_without_file_falls_back_to_defaults(self):
        config = AppConfig.load()
        assert config.record_store == "sql"

    def test_load_reads_config_yaml_in_cwd(self, tmp_path):
        (tmp_path / "config.yaml").write_text("record_store: memory\n")
        assert AppConfig.load().record_store == "memory"

    def test_env_overrides_defaults(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://po:secret@db/po")
        assert AppConfig().database_url == "postgresql://po:secret@db/po"

    def test_for_tests(self):
        config = AppConfig.for_tests()
        assert config.record_store == "memory"
        assert config.seed_file is None
        assert config.timezone == "UTC"

    def test_opik_api_key_optional(self):
        config = AppConfig()
        assert config.opik_api_key is None
