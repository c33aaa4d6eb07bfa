"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants that are
used across the entire application: logging format, the container extension used
to discover and clean up files, and the location of the optional user configuration
file. It also provides the loader for that YAML file, which allows the operator to
tune thresholds, word lists and tool locations without modifying the source code.
"""
from pathlib import Path
from typing import Any, Dict

import yaml
from loguru import logger

from ..domain.exceptions import ConfigurationException

# --- User-Defined Configuration ---
# An optional 'config.user.yaml' at the project root (or a file passed with
# --config) can override any of the defaults defined in this package.

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"


# --- Logging Configuration ---

# The format string for the Loguru logger. It defines the structure and appearance
# of log messages, including timestamp, level, module name, and the message itself.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# Plain format used for the optional log file sink.
LOGGER_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
)


# --- Files and External Tools ---

# Files are selected (and staged files cleaned up) by this fragment of their name.
CONTAINER_EXTENSION = ".mkv"

# Executable names. When `paths.ffmpeg_dir` is set in the user config, they are
# resolved inside that directory instead of the system PATH.
FFMPEG_BINARY = "ffmpeg"
FFPROBE_BINARY = "ffprobe"


def load_user_config(config_path: Path | None = None) -> Dict[str, Any]:
    """
    Loads the YAML user configuration.

    Args:
        config_path: An explicit configuration file. When None, the default
                     `config.user.yaml` at the project root is used if it exists.

    Returns:
        The parsed mapping, or an empty dict when no configuration file is present.

    Raises:
        ConfigurationException: If an explicitly requested file is missing, cannot
                                be parsed, or does not contain a mapping.
    """
    path = config_path or USER_CONFIG_PATH
    if not path.is_file():
        if config_path is not None:
            raise ConfigurationException(f"Configuration file not found: {config_path}")
        logger.debug(f"User config '{path}' not found. Using built-in defaults.")
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationException(f"Could not load or parse '{path}': {e}") from e

    if user_config is None:
        return {}
    if not isinstance(user_config, dict):
        raise ConfigurationException(
            f"'{path}' must contain a mapping at the top level, got {type(user_config).__name__}."
        )
    logger.debug(f"Loaded user config from '{path}'.")
    return user_config
