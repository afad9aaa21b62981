"""
Configuration file loading utilities.

Sessions can be described in a TOML file, by default under a
``[diagnostics]`` table:

    [diagnostics]
    name = "worker"
    interval = 2000
    threshold = 500_000_000
    target = 250_000_000
    monitor_event_loop = true
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import SessionConfig
from ..validation import ErrorSeverity, handle_config_error
from .validators import validate_session_config

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "diagnostics"


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_session_config(
    config_path: Path,
    section: str = DEFAULT_SECTION,
    overrides: Optional[Dict[str, Any]] = None,
) -> SessionConfig:
    """
    Load a SessionConfig from a TOML file.

    Args:
        config_path: Path to the TOML file
        section: Name of the table holding the session options
        overrides: Options that take precedence over the file, None values are ignored

    Returns:
        Validated SessionConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the options are invalid
    """
    data = load_toml_file(Path(config_path), "diagnostics configuration file")
    options = dict(data.get(section, {}))
    if overrides:
        options.update({key: value for key, value in overrides.items() if value is not None})
    return validate_session_config(options)
