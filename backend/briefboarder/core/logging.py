import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

_LOGGING_CONFIGURED = False

NOISY_LOGGERS = ("httpx", "httpcore", "botocore", "urllib3", "openai")


class JsonFormatter(logging.Formatter):
    """
    Minimal JSON formatter for structured logs.

    Structured context is passed through `extra={...}` at the call-site and
    copied onto the record for the whitelisted fields below.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": getattr(record, "service", "briefboarder_backend"),
        }

        # Common structured fields
        for field in ("brief_id", "request_id", "approach", "model", "step"):
            if hasattr(record, field):
                log_record[field] = getattr(record, field)

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


def configure_logging(level: int | str = logging.INFO) -> None:
    """
    Configure root logger once with JSON output.

    `level` accepts a logging constant or a name such as "DEBUG".

    Safe to call multiple times – subsequent calls are no-ops.
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # Per-request transport chatter drowns out step logs
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
