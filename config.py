# config.py

import os
import json
import logging

from pydantic import ValidationError

from errors import ConfigIOError, ConfigParseError, ConfigValidationError
from models.site_config import SiteConfig

logger = logging.getLogger(__name__)

# Process-level settings come from the environment; the site itself is described by the JSON file.
DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"
BIND_HOST = os.getenv("BIND_HOST", "0.0.0.0")
LOG_DB_PATH = os.getenv("LOG_DB_PATH", "")
RATE_LIMIT_INTERVAL = int(os.getenv("RATE_LIMIT_INTERVAL", "10"))
SLACK_WEBHOOK_URL = os.getenv("SLACK_WEBHOOK_URL", "")


def load_config(path: str) -> SiteConfig:
    """
    Load and validate the site configuration from a JSON file.

    Args:
        path: Location of the JSON configuration file.

    Returns:
        SiteConfig: The validated, read-only configuration.

    Raises:
        ConfigIOError: The file could not be read.
        ConfigParseError: The file is not valid JSON or has wrongly typed fields.
        ConfigValidationError: Required values are missing; lists every problem.
    """
    try:
        with open(path, 'rb') as f:
            content = f.read()
    except OSError as e:
        raise ConfigIOError(f"error reading config file: {e}") from e

    try:
        site_config = SiteConfig.model_validate(json.loads(content))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        raise ConfigParseError(f"error parsing config file: {e}") from e

    problems = site_config.validate_settings()
    if problems:
        raise ConfigValidationError(problems)

    if SLACK_WEBHOOK_URL:
        site_config = site_config.model_copy(
            update={"notifications": site_config.notifications.model_copy(
                update={"slack_webhook_url": SLACK_WEBHOOK_URL}
            )}
        )

    logger.info(f"Configuration loaded successfully from '{path}'.")
    return site_config
