import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from .errors import SchedulingError

# Context a scheduling run or a task rejection may carry.
_CONTEXT_KEYS = ("run", "task", "anchor", "code")
_TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record with the bound scheduling context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
        }
        payload.update(
            {key: getattr(record, key) for key in _CONTEXT_KEYS if hasattr(record, key)}
        )
        return json.dumps(payload, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Adapter carrying run and task context into every record."""

    def bind(self, **kwargs: Any) -> "ContextLogger":
        return ContextLogger(self.logger, {**self.extra, **kwargs})

    def process(self, msg: Any, kwargs: Dict[str, Any]):
        kwargs.setdefault("extra", {}).update(self.extra)
        return msg, kwargs

    def rejected(self, exc: SchedulingError) -> None:
        """Record why a task or a run was turned down."""
        self.bind(code=exc.code).info(exc.hint)


def get_logger(**context: Any) -> ContextLogger:
    """Return a context-aware logger for the ``projsched`` namespace."""
    return ContextLogger(logging.getLogger("projsched"), context)


def init_logging(
    verbosity: int = 0,
    stream: Optional[TextIO] = None,
    json_lines: bool = True,
) -> logging.Logger:
    """Route ``projsched`` records to ``stream`` (stdout by default).

    ``verbosity`` 0 shows warnings, 1 adds info and 2 or more adds debug
    records.  With ``json_lines`` off records are written as plain text.
    """

    level = {0: logging.WARNING, 1: logging.INFO}.get(max(verbosity, 0), logging.DEBUG)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter() if json_lines else logging.Formatter(_TEXT_FORMAT))

    logger = logging.getLogger("projsched")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = ["ContextLogger", "get_logger", "init_logging"]
