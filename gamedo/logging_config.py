"""Logging setup for applications embedding the engine"""
import logging
from typing import Optional

from gamedo.config import LOG_LEVEL

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the standard GameDo format"""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    )
