"""Tests for the config module."""

from pathlib import Path

from mdconverter.config import Settings, _parse_cors_origins, _parse_output_dir


class TestParseCorsOrigins:
    """Test CORS origins parsing."""

    def test_parse_cors_origins_with_value(self, monkeypatch):
        """Test parsing CORS origins from environment variable."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://localhost:8080")
        result = _parse_cors_origins()
        assert result == ["http://localhost:3000", "http://localhost:8080"]

    def test_parse_cors_origins_without_value(self, monkeypatch):
        """Test default CORS origins when not set."""
        monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
        assert _parse_cors_origins() == ["*"]

    def test_parse_cors_origins_empty_string(self, monkeypatch):
        """Test parsing empty CORS origins defaults to wildcard."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "")
        assert _parse_cors_origins() == ["*"]


class TestParseOutputDir:
    """Test output directory parsing."""

    def test_output_dir_set(self, monkeypatch, tmp_path):
        """Test OUTPUT_DIR becomes a Path."""
        monkeypatch.setenv("OUTPUT_DIR", str(tmp_path))
        assert _parse_output_dir() == tmp_path

    def test_output_dir_unset(self, monkeypatch):
        """Test no OUTPUT_DIR means None."""
        monkeypatch.delenv("OUTPUT_DIR", raising=False)
        assert _parse_output_dir() is None


class TestSettings:
    """Test Settings configuration."""

    def test_settings_explicit_values(self, tmp_path):
        """Test Settings with explicit parameters."""
        settings = Settings(
            default_date_format="MM/DD/YYYY",
            validate_formulas=False,
            generator_name="custom-tool",
            output_dir=tmp_path,
            freeze_headers=False,
            max_column_width=30,
            host="0.0.0.0",
            port=9000,
            debug=True,
        )

        assert settings.default_date_format == "MM/DD/YYYY"
        assert settings.validate_formulas is False
        assert settings.generator_name == "custom-tool"
        assert settings.output_dir == tmp_path
        assert settings.freeze_headers is False
        assert settings.max_column_width == 30
        assert settings.host == "0.0.0.0"
        assert settings.port == 9000
        assert settings.debug is True

    def test_settings_path_handling(self, tmp_path):
        """Test that output_dir strings are converted to Path objects."""
        settings = Settings(output_dir=str(tmp_path / "out"))
        assert isinstance(settings.output_dir, Path)

    def test_settings_fixture(self, test_settings):
        """Test the shared fixture carries the documented defaults."""
        assert test_settings.default_date_format == "DD/MM/YYYY"
        assert test_settings.generator_name == "md-converter"
        assert test_settings.preserve_line_endings is False
        assert test_settings.output_dir is None
