#!/usr/bin/env python3
"""
Environment variable loader with .env file support.

Loads variables from a .env file in the project root when present.
Variables already set in the environment take precedence.
"""

import os
from pathlib import Path
import logging
from typing import Optional

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def load_env_file(env_file_path: str = ".env", root: Optional[Path] = None) -> int:
    """
    Load environment variables from .env file if it exists.

    Args:
        env_file_path: Path to .env file relative to the project root
        root: Override project root (used by tests)

    Returns:
        Number of variables loaded
    """
    env_path = (root or PROJECT_ROOT) / env_file_path

    if not env_path.exists():
        logger.debug(f"No .env file found at {env_path}")
        return 0

    try:
        lines = env_path.read_text(encoding='utf-8').splitlines()
    except OSError as e:
        logger.error(f"Error loading .env file {env_path}: {e}")
        return 0

    loaded_count = 0
    for line_num, line in enumerate(lines, 1):
        line = line.strip()

        if not line or line.startswith('#'):
            continue

        if '=' not in line:
            logger.warning(f"Invalid .env format at line {line_num}: {line}")
            continue

        key, value = line.split('=', 1)
        key = key.strip()
        value = _strip_quotes(value.strip())

        if key not in os.environ:
            os.environ[key] = value
            loaded_count += 1
            logger.debug(f"Loaded {key} from .env")
        else:
            logger.debug(f"Skipped {key} (already in environment)")

    logger.info(f"Loaded {loaded_count} variables from {env_path}")
    return loaded_count


def get_env_var(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required validation.

    Args:
        key: Environment variable name
        default: Default value if not found
        required: Whether the variable is required

    Returns:
        Environment variable value

    Raises:
        ConfigurationError: If required variable is missing
    """
    value = os.environ.get(key, default)

    if required and not value:
        raise ConfigurationError(key, "required environment variable is not set")

    return value


# Auto-load .env file when module is imported
load_env_file()
