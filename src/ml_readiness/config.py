"""Centralized configuration management for the readiness assessment."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator


DEFAULT_STORAGE_KEY = "ml-assessment-storage"

# Storage keys become file stems
STORAGE_KEY_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"


class ScoringConfig(BaseModel):
    """Constants used by the section scoring rules."""
    rating_max: int = Field(
        5,
        ge=2,
        description="Highest value on the 1-N rating scale"
    )
    choice_credit: int = Field(
        3,
        description="Flat credit given to each psychometric single-choice answer"
    )


class RecommendationThresholdsConfig(BaseModel):
    """Confidence score cut-offs for the final recommendation.

    A confidence score at or above ``yes_threshold`` is a "yes", one below
    ``no_threshold`` is a "no", anything in between is a "maybe".
    """
    yes_threshold: int = Field(
        75,
        description="Minimum confidence score (0-100) for a 'yes' recommendation"
    )
    no_threshold: int = Field(
        50,
        description="Confidence scores below this (0-100) give a 'no' recommendation"
    )

    @model_validator(mode="after")
    def _check_order(self) -> "RecommendationThresholdsConfig":
        if not 0 <= self.no_threshold <= self.yes_threshold <= 100:
            raise ValueError("thresholds must satisfy 0 <= no_threshold <= yes_threshold <= 100")
        return self


class StorageConfig(BaseModel):
    """Where the session snapshot is saved between runs."""
    directory: Path = Field(
        default_factory=lambda: Path.home() / ".local" / "share" / "ml-readiness",
        description="Directory holding saved session files"
    )
    key: str = Field(
        DEFAULT_STORAGE_KEY,
        pattern=STORAGE_KEY_PATTERN,
        description="Storage key (file stem) of the saved session"
    )


class AssessmentConfig(BaseModel):
    """Complete configuration for the readiness assessment."""
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    thresholds: RecommendationThresholdsConfig = Field(default_factory=RecommendationThresholdsConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    strict: bool = Field(
        False,
        description="Raise on unknown section/question ids instead of logging and ignoring them"
    )
    log_level: str = Field("WARNING", description="Logging level for the CLI")


# Global config instance
_config: Optional[AssessmentConfig] = None


def get_config() -> AssessmentConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = AssessmentConfig()
    return _config


def load_config(path: Path) -> AssessmentConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded AssessmentConfig.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    _config = AssessmentConfig.model_validate(data or {})
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = AssessmentConfig()


def find_config_file() -> Optional[Path]:
    """Find an assessment configuration file.

    Looks in (order of priority):
    1. ML_READINESS_CONFIG environment variable
    2. ./readiness-config.yaml
    3. ./readiness-config.yml
    4. ~/.config/ml-readiness/config.yaml
    """
    env_path = os.environ.get("ML_READINESS_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    for name in ["readiness-config.yaml", "readiness-config.yml"]:
        path = Path(name)
        if path.exists():
            return path

    user_config = Path.home() / ".config" / "ml-readiness" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    Args:
        path: Path where to save the configuration.
    """
    config = AssessmentConfig()
    data = config.model_dump(mode="json")

    yaml_content = """# ML Readiness Assessment Configuration
# =====================================
#
# This file configures scoring constants, recommendation thresholds,
# and where the session is saved between runs.
#
# Copy this file to one of these locations:
#   - ./readiness-config.yaml (current directory)
#   - ~/.config/ml-readiness/config.yaml (user config)
#
# Or set the ML_READINESS_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
