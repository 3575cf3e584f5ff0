"""
Basecamp Backend — Logging Configuration
==========================================

What:  Configures standard-library logging for the whole process.
When:  Called once at the start of the lifespan handler (and by run()).

Format: 2024-01-15T12:00:00 [INFO] basecamp.database: MongoDB connected: ...
"""

import logging
import sys
from typing import Optional

from basecamp.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Libraries that log every operation at DEBUG/INFO
NOISY_LOGGERS = ("uvicorn.access", "pymongo", "cloudinary", "urllib3", "multipart")


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
