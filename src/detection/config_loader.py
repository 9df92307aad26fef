"""
Configuration loader with Pydantic validation for the Detection module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class DownscaleConfig(BaseModel):
    """Working-copy resolution.

    Attributes:
        target_max_dimension: Longest side of the working copy in pixels.
        interpolation: Resampling method used to produce the working copy.
    """

    target_max_dimension: float = Field(default=600.0, gt=0)
    interpolation: Literal["linear", "cubic", "nearest", "area", "lanczos"] = "linear"


class BlurConfig(BaseModel):
    """Denoising applied to the working copy before edge/threshold passes.

    Attributes:
        method: "median", "gaussian" or "none".
        kernel_size: Odd kernel size.
    """

    method: Literal["median", "gaussian", "none"] = "median"
    kernel_size: int = Field(default=9, ge=1)

    @field_validator("kernel_size")
    @classmethod
    def _validate_odd(cls, v: int) -> int:
        if v % 2 == 0:
            raise ValueError(f"kernel_size must be odd, got {v}")
        return v


class EdgeConfig(BaseModel):
    """Canny pass (threshold level 0).

    Attributes:
        canny_low: Lower hysteresis threshold.
        canny_high: Upper hysteresis threshold.
        dilation_kernel_size: Side of the square dilation kernel.
        dilation_iterations: Number of dilation passes.
    """

    canny_low: float = Field(default=10.0, ge=0.0)
    canny_high: float = Field(default=20.0, ge=0.0)
    dilation_kernel_size: int = Field(default=3, ge=1)
    dilation_iterations: int = Field(default=1, ge=0)

    @model_validator(mode="after")
    def _validate_thresholds(self) -> "EdgeConfig":
        if self.canny_low > self.canny_high:
            raise ValueError(
                f"canny_low ({self.canny_low}) must not exceed canny_high ({self.canny_high})"
            )
        return self


class ThresholdLevelConfig(BaseModel):
    """Binary-threshold passes.

    Level 0 is the Canny pass; levels 1..levels-1 binarize at
    ``level * max_value / levels``.

    Attributes:
        levels: Total number of passes per plane (>= 1).
        max_value: Value assigned to pixels above the cut.
    """

    levels: int = Field(default=3, ge=1)
    max_value: float = Field(default=255.0, gt=0.0, le=255.0)


class CandidateConfig(BaseModel):
    """Rules a polygon must satisfy to count as a document candidate.

    Attributes:
        approx_epsilon_ratio: Douglas-Peucker tolerance as a fraction of perimeter.
        min_area_ratio: Minimum polygon area relative to the working image.
        max_area_ratio: Maximum polygon area relative to the working image.
        max_cosine: Largest allowed |cos| of any vertex angle.
        largest_contours_limit: Only fit polygons to this many largest
            contours per pass (None keeps all).
    """

    approx_epsilon_ratio: float = Field(default=0.02, gt=0.0, lt=1.0)
    min_area_ratio: float = Field(default=0.2, ge=0.0, le=1.0)
    max_area_ratio: float = Field(default=0.98, gt=0.0, le=1.0)
    max_cosine: float = Field(default=0.3, ge=0.0, le=1.0)
    largest_contours_limit: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _validate_area_range(self) -> "CandidateConfig":
        if self.min_area_ratio >= self.max_area_ratio:
            raise ValueError(
                f"min_area_ratio ({self.min_area_ratio}) must be less than "
                f"max_area_ratio ({self.max_area_ratio})"
            )
        return self


class DetectionModuleConfig(BaseModel):
    """Complete detection module configuration.

    Attributes:
        channel_mode: "per_channel" searches every colour plane separately,
            "grayscale" runs a single luminance pass.
        downscale: Working-copy configuration.
        blur: Denoising configuration.
        edges: Canny pass configuration.
        thresholds: Binary threshold passes.
        candidate: Rectangle acceptance rules.
    """

    channel_mode: Literal["per_channel", "grayscale"] = "per_channel"
    downscale: DownscaleConfig = Field(default_factory=DownscaleConfig)
    blur: BlurConfig = Field(default_factory=BlurConfig)
    edges: EdgeConfig = Field(default_factory=EdgeConfig)
    thresholds: ThresholdLevelConfig = Field(default_factory=ThresholdLevelConfig)
    candidate: CandidateConfig = Field(default_factory=CandidateConfig)


class Config(BaseModel):
    """Root configuration object.

    Attributes:
        detection: Detection module configuration.
    """

    detection: DetectionModuleConfig = DetectionModuleConfig()


def load_config(config_path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file.

    Returns:
        Validated Config object with all settings.

    Raises:
        FileNotFoundError: If config file does not exist.
        yaml.YAMLError: If YAML parsing fails.
        pydantic.ValidationError: If configuration validation fails.

    Example:
        >>> config = load_config(Path("src/detection/config.yaml"))
        >>> print(config.detection.candidate.max_cosine)
        0.3
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    # Wrap flat YAML structure in 'detection' key for Config model
    return Config(detection=DetectionModuleConfig(**config_dict))


def get_default_config() -> Config:
    """Get default configuration from bundled config.yaml file.

    Returns:
        Config object loaded from src/detection/config.yaml.
    """
    default_config_path = Path(__file__).parent / "config.yaml"
    if default_config_path.exists():
        return load_config(default_config_path)
    else:
        # Fallback to hardcoded defaults if config file is missing
        return Config()
