"""
Unit tests for detection config_loader module.

Tests configuration loading, validation, and default values.
"""

import pytest
import yaml
from pydantic import ValidationError

from src.detection.config_loader import (
    BlurConfig,
    CandidateConfig,
    Config,
    DetectionModuleConfig,
    EdgeConfig,
    get_default_config,
    load_config,
)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_default_config(self):
        """Test loading the default configuration file."""
        config = get_default_config()

        assert isinstance(config, Config)
        assert isinstance(config.detection, DetectionModuleConfig)
        assert config.detection.channel_mode == "per_channel"
        assert config.detection.downscale.target_max_dimension == 600
        assert config.detection.blur.method == "median"
        assert config.detection.blur.kernel_size == 9
        assert config.detection.edges.canny_low == 10
        assert config.detection.edges.canny_high == 20
        assert config.detection.thresholds.levels == 3
        assert config.detection.candidate.min_area_ratio == 0.2
        assert config.detection.candidate.max_area_ratio == 0.98
        assert config.detection.candidate.max_cosine == 0.3
        assert config.detection.candidate.largest_contours_limit is None

    def test_default_file_matches_model_defaults(self):
        """Test that config.yaml and the model defaults agree."""
        assert get_default_config().detection == DetectionModuleConfig()

    def test_load_custom_config(self, tmp_path):
        """Test loading a custom configuration file."""
        custom_config = {
            "channel_mode": "grayscale",
            "downscale": {"target_max_dimension": 800, "interpolation": "area"},
            "blur": {"method": "gaussian", "kernel_size": 5},
            "candidate": {"max_cosine": 0.2, "largest_contours_limit": 10},
        }
        config_path = tmp_path / "custom.yaml"
        with open(config_path, "w") as f:
            yaml.dump(custom_config, f)

        config = load_config(config_path)

        assert config.detection.channel_mode == "grayscale"
        assert config.detection.downscale.target_max_dimension == 800
        assert config.detection.downscale.interpolation == "area"
        assert config.detection.blur.method == "gaussian"
        assert config.detection.candidate.max_cosine == 0.2
        assert config.detection.candidate.largest_contours_limit == 10
        # Unspecified sections keep their defaults
        assert config.detection.edges.canny_high == 20

    def test_load_empty_config(self, tmp_path):
        """Test that an empty file yields the defaults."""
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")

        assert load_config(config_path).detection == DetectionModuleConfig()

    def test_load_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_load_invalid_values(self, tmp_path):
        """Test that invalid values fail validation."""
        config_path = tmp_path / "invalid.yaml"
        with open(config_path, "w") as f:
            yaml.dump({"blur": {"kernel_size": 4}}, f)

        with pytest.raises(ValidationError):
            load_config(config_path)


class TestConfigValidation:
    """Tests for the individual configuration models."""

    def test_even_blur_kernel_rejected(self):
        """Test that blur kernels must be odd."""
        with pytest.raises(ValidationError, match="must be odd"):
            BlurConfig(kernel_size=8)

    def test_canny_order_enforced(self):
        """Test that canny_low cannot exceed canny_high."""
        with pytest.raises(ValidationError, match="must not exceed"):
            EdgeConfig(canny_low=50, canny_high=10)

    def test_area_range_enforced(self):
        """Test that min_area_ratio must be below max_area_ratio."""
        with pytest.raises(ValidationError, match="must be less than"):
            CandidateConfig(min_area_ratio=0.9, max_area_ratio=0.5)

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_max_cosine_bounds(self, value):
        """Test that max_cosine lies in [0, 1]."""
        with pytest.raises(ValidationError):
            CandidateConfig(max_cosine=value)

    def test_unknown_channel_mode(self):
        """Test that channel_mode is restricted."""
        with pytest.raises(ValidationError):
            DetectionModuleConfig(channel_mode="hsv")
