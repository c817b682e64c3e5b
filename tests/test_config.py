"""
Configuration tests - environment lookups and validation.
"""

from qa_edits.core import config


class TestConfig:
    """Test environment-driven settings."""

    def test_db_path_read_at_call_time(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DB_PATH", str(tmp_path / "x.db"))
        assert config.get_db_path() == str(tmp_path / "x.db")

    def test_ensure_db_directory(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DB_PATH", str(tmp_path / "nested" / "dir" / "x.db"))
        config.ensure_db_directory()
        assert (tmp_path / "nested" / "dir").is_dir()

    def test_flags(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "FALSE")
        monkeypatch.setenv("AUDIT_TRAIL_ENABLED", "True")
        assert config.debug_enabled() is False
        assert config.is_audit_trail_enabled() is True

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MAX_PROJECTS", raising=False)
        monkeypatch.delenv("DEFAULT_USER_NAME", raising=False)
        assert config.get_max_projects() == config.MAX_PROJECTS
        assert config.get_default_user_name() == config.DEFAULT_USER_NAME

    def test_validate_config(self, monkeypatch):
        monkeypatch.setenv("MAX_PROJECTS", "50")
        assert config.validate_config() == []

        monkeypatch.setenv("MAX_PROJECTS", "0")
        assert config.validate_config() == ["MAX_PROJECTS must be >= 1"]

        monkeypatch.setenv("MAX_PROJECTS", "many")
        assert config.validate_config() == ["Invalid MAX_PROJECTS: many"]
