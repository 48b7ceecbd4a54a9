"""Logging setup driven by application settings."""

import json
import logging
from datetime import datetime, timezone

from app.core.config import LogFormatEnum, Settings

SIMPLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        details = getattr(record, "consistency_details", None)
        if details:
            payload["details"] = details
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(config: Settings) -> None:
    """Configure the root logger once from ``log_level`` and ``log_format``."""
    handler = logging.StreamHandler()
    if config.log_format == LogFormatEnum.json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))

    logging.basicConfig(level=config.log_level.value, handlers=[handler], force=True)
