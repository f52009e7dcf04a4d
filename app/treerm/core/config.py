"""User configuration for treerm.

Configuration is stored in ~/.config/treerm/config.toml and controls
dry-run behaviour, the protected path list, and confirmation prompts.
Command-line flags override values read from the file.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from treerm.core.paths import get_config_path
from treerm.filesystem.protected import DEFAULT_PROTECTED_PATTERNS

logger = logging.getLogger(__name__)


class TreermConfig(BaseModel):
    """Settings for the interactive file remover.

    Attributes:
        dry_run: Report deletions without touching the filesystem.
        protected_patterns: Glob patterns that may never be deleted.
        confirm_remove_all: Ask before removing every selected entry.
    """

    model_config = ConfigDict(extra="forbid")

    dry_run: Annotated[
        bool,
        Field(description="Log deletions instead of performing them"),
    ] = False
    protected_patterns: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_PROTECTED_PATTERNS),
            description="Glob patterns refused by delete operations (~ expanded)",
        ),
    ]
    confirm_remove_all: Annotated[
        bool,
        Field(description="Ask for confirmation before removing all selected entries"),
    ] = True

    @field_validator("protected_patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Reject empty patterns, which would never match anything useful."""
        cleaned = [p.strip() for p in v]
        if any(not p for p in cleaned):
            msg = "protected_patterns cannot contain empty patterns"
            raise ValueError(msg)
        return cleaned


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> TreermConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated TreermConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return TreermConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> TreermConfig:
    """Load configuration, falling back to defaults when no file exists.

    Parse and schema errors are still raised so a broken file is never
    silently ignored.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Loaded or default TreermConfig.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return get_default_config()


def save_config(config: TreermConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The TreermConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        # os.replace() is atomic on POSIX
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    logger.info("Saved config to %s", config_path)
    return config_path


def get_default_config() -> TreermConfig:
    """Create a default TreermConfig.

    Returns:
        TreermConfig with default settings.
    """
    return TreermConfig()
