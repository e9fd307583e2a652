"""Tests for configuration loading."""

from pathlib import Path

from capes_export.core.config import ExporterConfig, get_config


class TestGetConfig:
    """Test environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        for name in (
            "CAPES_EXPORT_NAV_DELAY",
            "CAPES_EXPORT_TIMEOUT",
            "CAPES_EXPORT_STATE_DIR",
            "CAPES_EXPORT_OUTPUT_DIR",
            "CAPES_EXPORT_HTTP_DEBUG",
        ):
            monkeypatch.delenv(name, raising=False)

        config = get_config()

        assert config.navigation_delay == 1.2
        assert config.processing_timeout == 30.0
        assert config.state_dir is None
        assert config.output_dir == Path("./exports")
        assert config.http_debug is False

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CAPES_EXPORT_NAV_DELAY", "0.25")
        monkeypatch.setenv("CAPES_EXPORT_MAX_PAGE_LOADS", "12")
        monkeypatch.setenv("CAPES_EXPORT_STATE_DIR", str(tmp_path))
        monkeypatch.setenv("CAPES_EXPORT_HTTP_DEBUG", "TRUE")

        config = get_config()

        assert config.navigation_delay == 0.25
        assert config.max_page_loads == 12
        assert config.state_dir == tmp_path
        assert config.http_debug is True


class TestValidate:
    """Test configuration validation."""

    def test_valid(self):
        assert ExporterConfig().validate() == []

    def test_invalid_values(self):
        config = ExporterConfig(navigation_delay=-1, processing_timeout=0, max_page_loads=0)
        errors = config.validate()
        assert len(errors) == 3
        assert any("CAPES_EXPORT_TIMEOUT" in e for e in errors)
