"""
Configuration management for nifgraph.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


class PathsConfig(BaseModel):
    """Project paths configuration."""

    output_dir: Path = Path("./output")
    shapes_path: Path | None = None  # None = bundled nif-shapes.ttl


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["turtle", "nt", "xml"] = "turtle"


class ValidationConfig(BaseModel):
    """Validation configuration.

    Structural checks always run when validation is enabled; SHACL
    shapes are checked only when shacl is also set.
    """

    enabled: bool = True
    shacl: bool = True


class Settings(BaseSettings):
    """Main configuration class."""

    model_config = SettingsConfigDict(
        env_prefix="NIF_",
        env_nested_delimiter="__",
    )

    paths: PathsConfig = Field(default_factory=PathsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Settings object with loaded configuration
    """
    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        config_dict = {}

    # Create settings, which will also load from environment variables
    settings = Settings(**config_dict)

    return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings
