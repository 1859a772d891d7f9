"""
Configuration for pip-follow.

Settings come from, lowest to highest precedence: built-in defaults, the TOML
config file, the PIP_FOLLOW_LOG_LEVEL environment variable, and CLI flags.

Example config.toml:

    title = "regex:^Picture-in-Picture$"
    app_id = "regex:firefox$"
    backend = "auto"
    log_level = "info"
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError, ErrorCode
from .matcher import WindowMatcher
from .pattern import compile_pattern

logger = logging.getLogger(__name__)

DEFAULT_TITLE_PATTERN = "regex:^Picture-in-Picture$"
DEFAULT_APP_ID_PATTERN = "regex:firefox$"

LOG_LEVEL_ENV = "PIP_FOLLOW_LOG_LEVEL"

LogLevel = Literal["trace", "debug", "info", "warn", "error"]
Backend = Literal["auto", "niri", "sway"]


def default_config_path() -> Path:
    """$XDG_CONFIG_HOME/pip-follow/config.toml (~/.config when unset)."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "pip-follow" / "config.toml"


class FollowConfig(BaseModel):
    """Runtime settings for the follow daemon."""

    title: str = Field(DEFAULT_TITLE_PATTERN, description="Pattern the window title must match")
    app_id: str = Field(DEFAULT_APP_ID_PATTERN, description="Pattern the app_id must match when present")
    backend: Backend = Field("auto", description="Compositor backend")
    socket_path: Optional[Path] = Field(None, description="Compositor IPC socket override")
    log_level: LogLevel = Field("info", description="Log verbosity")

    model_config = {"extra": "forbid"}

    @field_validator("title", "app_id")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Validate pattern syntax."""
        compile_pattern(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "warning":
                return "warn"
        return v

    def build_matcher(self) -> WindowMatcher:
        return WindowMatcher(
            title_rule=compile_pattern(self.title),
            app_id_rule=compile_pattern(self.app_id),
        )


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read settings from a TOML file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Config file not found: {path}",
            file_path=str(path),
            code=ErrorCode.CONFIG_LOAD_FAILED,
        )
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(
            f"Failed to read config file: {e}",
            file_path=str(path),
            code=ErrorCode.CONFIG_LOAD_FAILED,
        )


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> FollowConfig:
    """
    Resolve the effective configuration.

    Args:
        config_path: Explicit config file (must exist); the default path is
            used only if it exists
        overrides: Values from CLI flags; None entries are ignored

    Returns:
        Validated FollowConfig

    Raises:
        ConfigurationError: If a file or value is invalid
    """
    data: Dict[str, Any] = {}
    source = None

    if config_path is not None:
        data.update(read_config_file(config_path))
        source = config_path
    else:
        path = default_config_path()
        if path.exists():
            data.update(read_config_file(path))
            source = path

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        data["log_level"] = env_level

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        config = FollowConfig(**data)
    except ValidationError as e:
        pattern_error = any(error["loc"][:1] in (("title",), ("app_id",)) for error in e.errors())
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            file_path=str(source) if source else None,
            suggestion="Patterns use regex:, glob: or literal: prefixes",
            code=ErrorCode.INVALID_PATTERN if pattern_error else ErrorCode.CONFIG_INVALID,
        )

    if source:
        logger.debug(f"Loaded configuration from {source}")

    return config
