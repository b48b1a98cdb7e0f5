import json
import logging
from datetime import datetime, timezone

from pos_analytics.config import get_settings

# Keys callers may attach through ``extra=`` and that the JSON output keeps.
CONTEXT_FIELDS = ("report", "token", "current_token", "rows", "page")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def setup_logging(level: str | None = None) -> None:
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    root_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler()
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.setLevel(root_level)
    root.handlers.clear()
    root.addHandler(handler)

    # Statement logging only when asked for; it drowns the report logs otherwise.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.LOG_SQL else logging.WARNING)


__all__ = ["CONTEXT_FIELDS", "JsonFormatter", "setup_logging"]
