"""Unit tests for configuration loading and validation."""

import os
from unittest.mock import patch

import pytest

from utils.config import PROJECT_ROOT, load_config, validate_config


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_config()

        assert config["gemini_api_key"] is None
        assert config["gemini_model"] == "gemini-2.0-flash"
        assert (config["bulk_temperature"], config["bulk_top_p"], config["bulk_top_k"]) == (0.7, 0.8, 40)
        assert config["bulk_max_output_tokens"] == 4096
        assert (config["targeted_temperature"], config["targeted_top_p"]) == (0.6, 0.9)
        assert config["targeted_max_output_tokens"] == 2048
        assert config["metadata_max_attempts"] == 3
        assert (config["ytdlp_timeout"], config["render_timeout"]) == (8.0, 45.0)
        assert config["max_clip_duration"] == 60
        assert config["render_enabled"] is False
        assert config["clips_output_dir"] == str(PROJECT_ROOT / "output/clips")

    def test_environment_overrides(self):
        env = {
            "GEMINI_API_KEY": "key",
            "TARGETED_TEMPERATURE": "0.3",
            "MAX_CLIP_DURATION": "45",
            "RENDER_ENABLED": "TRUE",
            "CLIPS_OUTPUT_DIR": "/tmp/clips",
            "LOG_JSON": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        assert config["gemini_api_key"] == "key"
        assert config["targeted_temperature"] == 0.3
        assert config["max_clip_duration"] == 45
        assert config["render_enabled"] is True
        assert config["clips_output_dir"] == "/tmp/clips"
        assert config["log_json"] is True

    def test_server_address(self):
        with patch.dict(os.environ, {"PORT": "10000"}, clear=True):
            config = load_config()

        assert (config["api_host"], config["api_port"]) == ("0.0.0.0", 10000)

    def test_relative_output_dir_is_resolved_from_project_root(self):
        with patch.dict(os.environ, {"CLIPS_OUTPUT_DIR": "renders"}, clear=True):
            config = load_config()

        assert config["clips_output_dir"] == str(PROJECT_ROOT / "renders")


@pytest.mark.unit
class TestValidateConfig:
    """Tests for validate_config()."""

    def test_valid(self, sample_config):
        assert validate_config(sample_config) == []

    def test_missing_api_key(self, sample_config):
        sample_config["gemini_api_key"] = None
        assert "GEMINI_API_KEY is required" in validate_config(sample_config)

    def test_out_of_range_sampling(self, sample_config):
        sample_config["bulk_temperature"] = 3.0
        sample_config["targeted_top_p"] = 0.0

        errors = validate_config(sample_config)

        assert any("BULK_TEMPERATURE" in e for e in errors)
        assert any("TARGETED_TOP_P" in e for e in errors)

    def test_non_positive_limits(self, sample_config):
        sample_config["max_clip_duration"] = 0
        sample_config["request_timeout_seconds"] = 0
        sample_config["metadata_max_attempts"] = 0

        assert len(validate_config(sample_config)) == 3

    def test_render_output_dir_is_created(self, sample_config, temp_dir):
        sample_config["render_enabled"] = True
        sample_config["clips_output_dir"] = str(temp_dir / "nested" / "clips")

        assert validate_config(sample_config) == []
        assert (temp_dir / "nested" / "clips").is_dir()
