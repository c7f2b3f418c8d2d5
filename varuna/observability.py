"""
Logging setup and correlation-ID helpers for agent actions.

Every unit of work carries a correlation ID; agent log records attach it
(plus the agent name and action) as structured ``extra`` fields so the JSON
formatter can emit them alongside the message.
"""

import json
import logging
import sys
from typing import Any, Optional
from uuid import uuid4

from .config import Settings

logger = logging.getLogger("varuna.agents")

# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

SIMPLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def new_correlation_id() -> str:
    return str(uuid4())


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["stack"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(settings: Settings) -> None:
    """Install root handlers according to ``log_format`` / ``log_level`` / ``log_file``."""
    if settings.log_format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(SIMPLE_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=settings.log_level.upper(),
        handlers=handlers,
        force=True,
    )

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def log_agent_action(
    agent: str,
    action: str,
    correlation_id: Optional[str] = None,
    **data: Any,
) -> str:
    """Log an agent action. Returns the correlation ID used (a fresh one if none given)."""
    correlation_id = correlation_id or new_correlation_id()
    details = ", ".join(f"{k}={v}" for k, v in data.items())
    logger.info(
        f"[{agent}] {action}" + (f" ({details})" if details else ""),
        extra={"agent": agent, "action": action, "correlation_id": correlation_id, "data": data},
    )
    return correlation_id


def log_agent_handoff(from_agent: str, to_agent: str, correlation_id: str, **data: Any) -> None:
    logger.info(
        f"[{from_agent}] -> [{to_agent}] handoff",
        extra={
            "agent": from_agent,
            "action": "handoff",
            "to_agent": to_agent,
            "correlation_id": correlation_id,
            "data": data,
        },
    )


def log_agent_error(agent: str, error: BaseException, correlation_id: Optional[str] = None) -> None:
    logger.error(
        f"[{agent}] {type(error).__name__}: {error}",
        exc_info=(type(error), error, error.__traceback__),
        extra={"agent": agent, "action": "error", "correlation_id": correlation_id},
    )
