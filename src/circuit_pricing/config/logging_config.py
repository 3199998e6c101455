"""
Logging configuration for the circuit pricing service.
Call setup_logging() once at app startup.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .settings import Settings, get_settings


class JSONFormatter(logging.Formatter):
    """Structured JSON log lines for machine parsing."""
    def format(self, record):
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        for key in ("circuit_quote_id", "carrier_quote_id", "recipient", "carriers"):
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry, default=str)


HUMAN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_configured = False


def setup_logging(settings: Optional[Settings] = None, force: bool = False):
    """Configure the root logger once; a no-op if something else already did."""
    global _configured
    if _configured and not force:
        return

    settings = settings or get_settings()
    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(HUMAN_FORMAT, datefmt="%H:%M:%S"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        handlers=[handler],
        force=force,
    )
    _configured = True
