"""Configuration management"""
import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from gamedo.exceptions import ConfigurationError

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Calendar days ("today", streak boundaries) are resolved in this zone
GAMEDO_TIMEZONE: str = os.getenv("GAMEDO_TIMEZONE", "UTC")

# Export/import document format
EXPORT_FORMAT_VERSION: str = os.getenv("EXPORT_FORMAT_VERSION", "1.0.0")


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if not isinstance(logging.getLevelName(LOG_LEVEL.upper()), int):
        raise ConfigurationError(f"Unknown LOG_LEVEL '{LOG_LEVEL}'", config_key="LOG_LEVEL")
    try:
        ZoneInfo(GAMEDO_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown GAMEDO_TIMEZONE '{GAMEDO_TIMEZONE}'",
            config_key="GAMEDO_TIMEZONE",
            cause=e,
        )
