"""
Tests for EngineConfig and style tag resolution.
"""

import logging

import pytest

from report_engine.config import EngineConfig, parse_report_style, resolve_report_style


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_init_when_defaults_then_v3_watermarked(self):
        config = EngineConfig()

        assert config.style_version == "v3"
        assert config.deterministic is False
        assert config.watermark_enabled is True

    def test_init_when_unknown_style_then_raises(self):
        with pytest.raises(ValueError, match="style_version"):
            EngineConfig(style_version="v5")

    def test_from_env_when_variables_set_then_applied(self):
        # Arrange
        env = {"PDF_STYLE_DEFAULT": "V2", "PDF_DETERMINISTIC": "1", "PDF_WATERMARK": "0"}

        # Act
        config = EngineConfig.from_env(env)

        # Assert
        assert config == EngineConfig(style_version="v2", deterministic=True, watermark_enabled=False)

    def test_from_env_when_empty_then_defaults(self):
        assert EngineConfig.from_env({}) == EngineConfig()

    def test_from_env_when_style_unknown_then_warns_and_defaults(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = EngineConfig.from_env({"PDF_STYLE_DEFAULT": "v7"})

        assert config.style_version == "v3"
        assert "PDF_STYLE_DEFAULT" in caplog.text

    def test_from_env_when_os_environ_then_read(self, monkeypatch):
        monkeypatch.setenv("PDF_STYLE_DEFAULT", "v2")

        assert EngineConfig.from_env().style_version == "v2"


class TestStyleResolution:
    """Tests for parse_report_style() and resolve_report_style()."""

    @pytest.mark.parametrize("value, expected", [("v2", "v2"), (" V3 ", "v3"), ("v4", None), ("", None), (None, None)])
    def test_parse_when_value_then_normalized_or_none(self, value, expected):
        assert parse_report_style(value) == expected

    def test_resolve_when_requested_valid_then_requested(self):
        assert resolve_report_style("v2", EngineConfig(style_version="v3")) == "v2"

    def test_resolve_when_requested_invalid_then_config_default(self):
        assert resolve_report_style("legacy", EngineConfig(style_version="v2")) == "v2"
