"""
Centralized Logging

Architectural Intent:
- One handler on the "pymup" logger, human-readable or JSON lines
- Records about a remote server carry it as extra={"host": ...};
  both formats show it, so adapters never splice hosts into messages
- Level comes from --verbose/--debug or the tool config
"""

import json
import logging
import sys
from datetime import datetime, UTC

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(host_label)s%(message)s"


class HostFilter(logging.Filter):
    """Sets host_label to "[host] " for records about a remote server."""

    def filter(self, record: logging.LogRecord) -> bool:
        host = getattr(record, "host", None)
        record.host_label = f"[{host}] " if host else ""
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record; "host" only when the record has one."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        host = getattr(record, "host", None)
        if host:
            log_entry["host"] = host
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(level: int = logging.INFO, json_format: bool = False) -> None:
    root = logging.getLogger("pymup")
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(HostFilter())
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))

    root.addHandler(handler)
