"""
Logging setup shared by the API process.

Every module logs through ``logging.getLogger(__name__)``; this module only
decides the root level and format once at startup.
"""

import logging
from typing import Optional

from linkstats_app.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from settings (idempotent)."""
    level_value = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(level=level_value, format=LOG_FORMAT)
    logging.getLogger().setLevel(level_value)
