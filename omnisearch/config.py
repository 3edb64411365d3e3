"""omnisearch Configuration.

Includes:
- AppConfig: Application settings with environment variable support

Environment Variables:
    OMNISEARCH_PROJECT_PATH: Project directory path
    OMNISEARCH_TOOLS_FILE: YAML tool registry used instead of the built-in tools
    OMNISEARCH_MAX_QUERY_LENGTH: Longest query the CLI accepts, in characters
    OMNISEARCH_LOG_LEVEL: Logging level name (DEBUG, INFO, WARNING, ...)
"""

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.tools import ToolRegistry

logger = logging.getLogger(__name__)

CONFIG_DIR = ".omnisearch"
CONFIG_FILE = "config.yaml"

# Longer queries are rejected by the CLI
DEFAULT_MAX_QUERY_LENGTH = 100_000


class AppConfig(BaseSettings):
    """Application configuration with environment variable support.

    Configuration is loaded from environment variables with OMNISEARCH_ prefix.
    For example, OMNISEARCH_TOOLS_FILE sets tools_file.

    Precedence (highest to lowest):
        1. Environment variables (OMNISEARCH_*)
        2. Config file (.omnisearch/config.yaml)
        3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="OMNISEARCH_",
        extra="ignore",
    )

    project_path: Path = Field(default_factory=Path.cwd)
    tools_file: Optional[Path] = None
    max_query_length: int = Field(default=DEFAULT_MAX_QUERY_LENGTH, gt=0)
    log_level: str = "WARNING"

    @field_validator("log_level", mode="after")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def config_file(self) -> Path:
        return self.project_path / CONFIG_DIR / CONFIG_FILE

    @classmethod
    def load(cls, path: Path) -> "AppConfig":
        """Load configuration from .omnisearch/config.yaml if it exists.

        Environment variables still take precedence over file values.

        Args:
            path: Project path to load configuration for

        Returns:
            AppConfig with file values applied (or defaults if no config exists)

        Raises:
            ValueError: If the config file is malformed.
        """
        from ruamel.yaml import YAML

        config_file = path / CONFIG_DIR / CONFIG_FILE
        file_values: dict[str, Any] = {}

        if config_file.exists():
            yaml = YAML(typ="safe")
            try:
                with config_file.open() as f:
                    data = yaml.load(f)
            except Exception as e:
                logger.error("Failed to load config %s: %s", config_file, e)
                raise ValueError(f"Invalid configuration file {config_file}: {e}") from e

            if data and not isinstance(data, dict):
                raise ValueError(f"Invalid configuration file {config_file}: expected a mapping")
            file_values = dict(data or {})

        # Environment wins: only pass file values for unset variables
        env_config = cls(project_path=path)
        overrides = {
            key: value
            for key, value in file_values.items()
            if key in ("tools_file", "max_query_length", "log_level")
            and key not in env_config.model_fields_set
        }

        if "tools_file" in overrides and overrides["tools_file"] is not None:
            tools_file = Path(str(overrides["tools_file"])).expanduser()
            if not tools_file.is_absolute():
                tools_file = path / tools_file
            overrides["tools_file"] = tools_file

        try:
            return cls(project_path=path, **overrides)
        except Exception as e:
            raise ValueError(f"Invalid configuration file {config_file}: {e}") from e

    def save(self) -> None:
        """Save configuration to .omnisearch/config.yaml in the project path."""
        from ruamel.yaml import YAML

        config_dir = self.project_path / CONFIG_DIR
        config_dir.mkdir(parents=True, exist_ok=True)

        yaml = YAML()
        yaml.default_flow_style = False

        data: dict[str, Any] = {
            "max_query_length": self.max_query_length,
            "log_level": self.log_level,
        }
        if self.tools_file is not None:
            data["tools_file"] = str(self.tools_file)

        with self.config_file.open("w") as f:
            yaml.dump(data, f)

    def build_registry(self) -> ToolRegistry:
        """Return the configured tool registry.

        Raises:
            RegistryError: If tools_file is set but cannot be loaded.
        """
        if self.tools_file is None:
            return ToolRegistry.default()
        return ToolRegistry.from_yaml(self.tools_file)
