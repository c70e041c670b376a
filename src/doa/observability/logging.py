"""
Logging — Structured logging with validation run IDs.

Every Automaton.validate call opens a RunContext, so records emitted
by the store and the property validators during that call share a
run_id.
"""

import logging
import json
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4


ROOT_LOGGER = "doa"

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)


def get_run_id() -> str | None:
    """Get run ID from current context."""
    return _run_id.get()


class RunIdFilter(logging.Filter):
    """Stamps run_id on log records."""
    
    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = get_run_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.
    
    Structured fields passed as extra={"extra_data": {...}} are merged
    into the top level.
    """
    
    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", None),
        }
        
        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)
        
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        
        return json.dumps(log_data, default=str)


class ReadableFormatter(logging.Formatter):
    """Single-line formatter for development."""
    
    def format(self, record: logging.LogRecord) -> str:
        run_id = getattr(record, "run_id", "-")
        run_short = run_id[:8] if run_id and run_id != "-" else "-"
        
        base = f"{record.levelname:<7} [{run_short}] {record.name}: {record.getMessage()}"
        
        extra = getattr(record, "extra_data", None)
        if extra:
            fields = " ".join(f"{k}={v}" for k, v in extra.items())
            base += f" ({fields})"
        
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        
        return base


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    stream: Any = None,
) -> None:
    """
    Configure the doa logger tree.
    
    Args:
        level: Logging level
        json_format: Emit JSON lines instead of readable text
        stream: Output stream (default: stderr)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(RunIdFilter())
    
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ReadableFormatter())
    
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the doa namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class RunContext:
    """
    Context manager scoping a run ID.
    
    A fresh UUID is generated when none is given.
    
    Usage:
        with RunContext() as ctx:
            logger.info("validating")  # carries ctx.run_id
    """
    
    def __init__(self, run_id: UUID | str | None = None):
        self.run_id = str(run_id) if run_id else str(uuid4())
        self._token = None
    
    def __enter__(self) -> "RunContext":
        self._token = _run_id.set(self.run_id)
        return self
    
    def __exit__(self, *args) -> None:
        if self._token is not None:
            _run_id.reset(self._token)
            self._token = None
