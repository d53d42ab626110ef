"""
Configuration management for Proven message construction.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from proven_message.model.bundle import DEFAULT_MODEL_DIR
from proven_message.model.files import MODEL_REGISTRY_FILE

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"


class ModelConfig(BaseModel):
    """Message model bundle location."""

    model_dir: Path = DEFAULT_MODEL_DIR
    registry_file: str = MODEL_REGISTRY_FILE


class MessageConfig(BaseModel):
    """Defaults applied to built messages."""

    default_domain: str = "proven"
    default_source: str | None = None


class RulesConfig(BaseModel):
    """SHACL rule processing.

    Disabling rules passes normalized graphs straight to projection.
    """

    enabled: bool = True
    iterate_rules: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Path | None = None


class Settings(BaseSettings):
    """Main configuration class."""

    model_config = SettingsConfigDict(
        env_prefix="PROVEN_",
        env_nested_delimiter="__",
    )

    model: ModelConfig = Field(default_factory=ModelConfig)
    message: MessageConfig = Field(default_factory=MessageConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


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
        with open(config_file, "r") as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        config_dict = {}

    # Create settings, which will also load from environment variables
    settings = Settings(**config_dict)

    return settings


# Global settings instance (CLI only; builds receive their model explicitly)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings
