"""Unit tests for environment-driven configuration."""

from delve import config


class TestConfig:
    """Defaults and fallbacks for DELVE_* settings."""

    def test_defaults(self, monkeypatch) -> None:
        for name in [
            "DELVE_ADVENTURE",
            "DELVE_THINKING_DELAY",
            "DELVE_HIT_DELAY",
            "DELVE_BROADCAST_BUFFER",
            "DELVE_LOG_LEVEL",
        ]:
            monkeypatch.delenv(name, raising=False)

        assert config.get_adventure_id() == "dungeon-delve"
        assert config.get_thinking_delay() == 2.0
        assert config.get_hit_delay() == 0.6
        assert config.get_broadcast_buffer() == 64
        assert config.get_log_level() == "INFO"

    def test_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("DELVE_THINKING_DELAY", "0")
        monkeypatch.setenv("DELVE_BROADCAST_BUFFER", "8")
        monkeypatch.setenv("DELVE_LOG_LEVEL", "debug")

        assert config.get_thinking_delay() == 0.0
        assert config.get_broadcast_buffer() == 8
        assert config.get_log_level() == "DEBUG"

    def test_invalid_values_fall_back(self, monkeypatch) -> None:
        monkeypatch.setenv("DELVE_THINKING_DELAY", "soon")
        monkeypatch.setenv("DELVE_HIT_DELAY", "-1")
        monkeypatch.setenv("DELVE_BROADCAST_BUFFER", "0")

        assert config.get_thinking_delay() == 2.0
        assert config.get_hit_delay() == 0.6
        assert config.get_broadcast_buffer() == 64

    def test_cors_origins_are_split(self, monkeypatch) -> None:
        monkeypatch.setenv("DELVE_CORS_ORIGINS", "http://a.test, http://b.test,")

        assert config.get_cors_origins() == ["http://a.test", "http://b.test"]

    def test_adventures_dir_override(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("DELVE_ADVENTURES_DIR", str(tmp_path))

        assert config.get_adventures_dir() == tmp_path
