"""Logging setup for applications driving the toolkit.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are installed by the application through :func:`configure_logging`.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import IO, Any, Mapping

from .settings import Settings, get_settings

__all__ = ["JSONFormatter", "configure_logging", "LOG_FILE_NAME"]

LOG_FILE_NAME = "evokit.log"

_PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
# attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}
_installed: list[logging.Handler] = []


class JSONFormatter(logging.Formatter):
    """One JSON object per record, merged with a fixed context and ``extra`` fields."""

    def __init__(self, *, default_context: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._default_context = dict(default_context or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self._default_context,
        }
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    *,
    settings: Settings | None = None,
    level: int | str | None = None,
    structured: bool | None = None,
    module_levels: Mapping[str, int | str] | None = None,
    stream: IO[str] | None = None,
    context: Mapping[str, Any] | None = None,
    write_file: bool = True,
) -> None:
    """Replace the root handlers with a stream handler and, optionally, a file handler.

    ``level`` and ``structured`` default to ``settings.log_level`` and
    ``settings.structured_logging``. The file handler appends to
    ``settings.logs_dir / "evokit.log"``. ``module_levels`` sets per-logger
    levels such as ``{"evokit.ga.selection": "DEBUG"}``; ``context`` is added
    to every JSON record.
    """

    settings = settings or get_settings()
    level = settings.log_level if level is None else level
    structured = settings.structured_logging if structured is None else structured

    formatter: logging.Formatter
    if structured:
        formatter = JSONFormatter(default_context=context)
    else:
        formatter = logging.Formatter(_PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
    if write_file:
        settings.logs_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.logs_dir / LOG_FILE_NAME, encoding="utf-8"))

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler in _installed:
            handler.close()
    _installed[:] = handlers
    root.setLevel(logging.DEBUG)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for logger_name, logger_level in (module_levels or {}).items():
        logging.getLogger(logger_name).setLevel(logger_level)
