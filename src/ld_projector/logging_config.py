from __future__ import annotations

import logging

from .settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    level = (level or settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
