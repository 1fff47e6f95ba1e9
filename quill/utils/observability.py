# quill/utils/observability.py

"""
Logging setup: JSON lines in production, plain text for local runs.

Called once from the application lifespan.
"""

import json
import logging
from datetime import datetime, timezone

# Extra fields that are copied into JSON records when present
EXTRA_FIELDS = ("user_id", "post_id", "comment_id", "path", "error_code")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            value = record.__dict__.get(key)
            if value is not None:
                log[key] = value
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    root = logging.getLogger()
    # Reloads (uvicorn --reload, repeated lifespans in tests) must not stack handlers
    for handler in list(root.handlers):
        if getattr(handler, "_quill", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._quill = True
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
