import logging
from typing import Optional

from cropdoctor.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging once; level defaults to LOG_LEVEL from settings."""
    level = (level or get_settings().LOG_LEVEL).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
