"""
Logging setup shared by the launcher, the environment and the agents.

Modules grab a logger at import time with ``get_logger(__name__)``; the
entry point calls ``configure_logging()`` once to attach handlers. Until
then records propagate to whatever the host application configured.
"""

from __future__ import annotations

import json as _json
import logging
import time
from pathlib import Path
from typing import Any, Dict

from paths import LOG_DIR

__all__ = ["LOG_DIR", "configure_logging", "get_logger", "JsonFormatter"]

ROOT_LOGGER_NAME = "skirmish"
_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# LogRecord attributes that are not user-supplied "extra" fields.
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return _json.dumps(payload, default=str, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the project namespace.

    ``arena.mechanics.pathfinding`` becomes ``skirmish.arena.mechanics.pathfinding``
    so a single configure call controls every module.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: str | int = "INFO",
    json: bool = False,
    log_file: str | Path | None = None,
    to_file: bool = True,
) -> logging.Logger:
    """
    Configure console (and optionally file) logging for the project.

    Calling it again replaces the previous handlers, so it is safe to call
    from both the launcher and ``__main__`` blocks.

    Args:
        level: Log level name or number
        json: Emit JSON lines instead of plain text
        log_file: Explicit log file path (default: storage/logs/skirmish.log)
        to_file: Set False to log to the console only

    Returns:
        The configured project root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level if isinstance(level, int) else level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter: logging.Formatter = JsonFormatter() if json else logging.Formatter(_TEXT_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if to_file:
        path = Path(log_file) if log_file is not None else LOG_DIR / "skirmish.log"
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = False
    return root
