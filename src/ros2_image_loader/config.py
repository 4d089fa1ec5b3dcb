"""
Loader Settings
===============

Settings for the image loader, read from an optional YAML file and the
process environment.

Resolution Order:
    environment variable > YAML file > model default

Environment Variables:
    ROS2_IMAGE_LOADER_CONFIG         path of the YAML file
    ROS2_IMAGE_LOADER_LOG_LEVEL      logging.level
    ROS2_IMAGE_LOADER_LOG_FORMAT     logging.format
    ROS2_IMAGE_LOADER_ERROR_POLICY   loader.error_policy
    ROS2_IMAGE_LOADER_NUM_ROWS_HINT  loader.default_num_rows

When no path is given, `ros2_image_loader.yaml` (or `.yml`) in the working
directory is used if present.

Example:
    from ros2_image_loader.config import get_settings, setup_logging

    settings = get_settings()
    setup_logging(settings)
    loader = ChannelLoader.from_config(registry, settings.loader)
"""

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


ENV_PREFIX = "ROS2_IMAGE_LOADER_"

DEFAULT_CONFIG_FILES = ("ros2_image_loader.yaml", "ros2_image_loader.yml")

# env suffix -> (section, key)
_ENV_FIELDS: Dict[str, Tuple[str, str]] = {
    "ERROR_POLICY": ("loader", "error_policy"),
    "NUM_ROWS_HINT": ("loader", "default_num_rows"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FORMAT": ("logging", "format"),
}

_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# =============================================================================
# Settings Models
# =============================================================================

class ParserConfig(BaseModel):
    """Options passed to every message parser."""

    timestamp_timeline: str = Field(
        default="timestamp",
        min_length=1,
        description="Timeline the message header stamp is registered under",
    )
    log_every_n_frames: int = Field(
        default=0,
        ge=0,
        description="Debug-log parser progress every N frames (0 disables)",
    )


class LoaderConfig(BaseModel):
    """Options for the host-side channel loader."""

    error_policy: Literal["abort", "skip"] = Field(
        default="abort",
        description="On a bad message: 'abort' the channel or 'skip' the message",
    )
    default_num_rows: int = Field(
        default=0,
        ge=0,
        description="Row-count hint used when the message count is unknown",
    )


class LoggingConfig(BaseModel):
    """Root logger options."""

    level: str = Field(default="INFO", description="Level name, e.g. DEBUG")
    format: Literal["json", "text"] = Field(
        default="text",
        description="Record layout: one JSON object per line, or plain text",
    )


class Settings(BaseModel):
    """All loader settings, one section per component."""

    parser: ParserConfig = Field(default_factory=ParserConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Loading
# =============================================================================

def _find_config_file(config_path: Optional[str]) -> Optional[Path]:
    if config_path is None:
        config_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return None
        return path

    for name in DEFAULT_CONFIG_FILES:
        path = Path(name)
        if path.exists():
            return path
    return None


def _read_yaml(path: Path) -> Dict[str, Any]:
    logger.info(f"Loading config from: {path}")
    with path.open("r") as f:
        data = yaml.safe_load(f)
    return data or {}


def _env_overrides() -> Dict[str, Dict[str, str]]:
    overrides: Dict[str, Dict[str, str]] = {}
    for suffix, (section, key) in _ENV_FIELDS.items():
        value = os.environ.get(f"{ENV_PREFIX}{suffix}")
        if value:
            overrides.setdefault(section, {})[key] = value
    return overrides


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Build Settings from file and environment.

    Args:
        config_path: YAML file to read. Falls back to
            ROS2_IMAGE_LOADER_CONFIG, then DEFAULT_CONFIG_FILES.

    Returns:
        Validated Settings

    Raises:
        pydantic.ValidationError: If a value is out of range or of the
            wrong type (string env values are coerced by the models)
    """
    path = _find_config_file(config_path)
    data = _read_yaml(path) if path is not None else {}
    if path is None:
        logger.debug("No config file, using defaults and environment")

    for section, values in _env_overrides().items():
        data.setdefault(section, {}).update(values)

    return Settings.model_validate(data)


class JsonFormatter(logging.Formatter):
    """One JSON object per record; the message is escaped by json.dumps."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(settings: Settings) -> None:
    """Configure the root logger from settings.logging."""
    level = getattr(logging, settings.logging.level.upper(), logging.INFO)
    datefmt = "%Y-%m-%dT%H:%M:%S"

    handler = logging.StreamHandler()
    if settings.logging.format == "json":
        handler.setFormatter(JsonFormatter(datefmt=datefmt))
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt=datefmt))

    logging.basicConfig(level=level, handlers=[handler])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return load_config()
