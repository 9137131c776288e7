from __future__ import annotations

import json
import logging

from app.bookflow.core.config import settings

_APP_LOGGERS = ("bookflow", "app.bookflow")


def configure_logging() -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")
    # basicConfig is a no-op once the root logger has handlers (alembic's fileConfig installs one).
    for name in _APP_LOGGERS:
        logging.getLogger(name).setLevel(level)


def log_json(logger: logging.Logger, payload: dict) -> None:
    logger.info(json.dumps(payload, ensure_ascii=False, default=str))
