"""Logging for sheikh.

Everything under the ``sheikh`` logger goes to ``~/.sheikh/logs/sheikh.log``
as one JSON object per line. Plan runs and model calls are additionally
appended to ``audit.jsonl`` through the ``sheikh.audit`` logger, which is
usable even when :func:`setup_logging` was never called (library use).
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime
from pathlib import Path

from sheikh.config import LOGS_DIR

AUDIT_LOG_FILE = LOGS_DIR / "audit.jsonl"
APP_LOG_FILE = LOGS_DIR / "sheikh.log"

MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

AUDIT_LOGGER_NAME = "sheikh.audit"

# Record attributes copied into the JSON entry when a caller passes them via ``extra``.
_EXTRA_FIELDS = (
    "plan_id", "step_id", "agent", "status", "provider", "model",
    "duration_s", "usage", "errors",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record. Only whitelisted ``extra`` keys are kept."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({k: getattr(record, k) for k in _EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def _json_file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        str(path), maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT,
    )
    handler.setFormatter(JSONFormatter())
    return handler


def _writes_to(logger: logging.Logger, path: Path) -> bool:
    return any(getattr(h, "baseFilename", None) == os.path.abspath(path) for h in logger.handlers)


def setup_logging(verbose: bool = False) -> None:
    """(Re)configure the ``sheikh`` logger. Safe to call more than once.

    With ``verbose`` set, warnings and errors are also echoed to stderr.
    """
    app_logger = logging.getLogger("sheikh")
    app_logger.setLevel(logging.DEBUG)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    app_logger.addHandler(_json_file_handler(APP_LOG_FILE))

    if verbose:
        stderr = logging.StreamHandler()
        stderr.setLevel(logging.WARNING)
        stderr.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
        app_logger.addHandler(stderr)


def get_audit_logger() -> logging.Logger:
    audit = logging.getLogger(AUDIT_LOGGER_NAME)
    audit.setLevel(logging.INFO)
    if not _writes_to(audit, AUDIT_LOG_FILE):
        audit.addHandler(_json_file_handler(AUDIT_LOG_FILE))
    return audit


def log_plan_execution(plan_id: str, status: str, errors: list[str], duration_s: float) -> None:
    get_audit_logger().info(
        "Plan %s finished: %s", plan_id, status,
        extra={"plan_id": plan_id, "status": status, "errors": errors,
               "duration_s": round(duration_s, 3)},
    )


def log_model_call(provider: str, model: str, usage: dict, duration_s: float) -> None:
    get_audit_logger().info(
        "%s/%s responded", provider, model,
        extra={"provider": provider, "model": model, "usage": usage,
               "duration_s": round(duration_s, 3)},
    )
