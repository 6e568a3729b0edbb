"""Logging utilities for the portal configuration service.

This module provides:
- Logging configuration from PortalSettings
- Safe, bounded previews of configuration objects
- Structured (JSON) or plain-text formatting
- Automatic identity/portal propagation through a logger adapter
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel

from .config import LogLevel, PortalSettings

_CONTEXT_FIELDS = ("identity", "portal")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", *_CONTEXT_FIELDS,
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a single-line, length-bounded preview of a value for logging.

    Pydantic models are dumped as JSON, dicts and lists as JSON, anything
    else through ``str()``. Whitespace is collapsed and the result is
    truncated with an ellipsis.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, BaseModel):
        s = value.model_dump_json()
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"
    return s


class PortalLogFormatter(logging.Formatter):
    """Formatter that lifts identity/portal context into the output.

    JSON mode emits one object per record with every ``extra`` field
    previewed; plain mode emits ``[time] LEVEL logger identity=.. : msg``.
    """

    def __init__(self, json_format: bool = True, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {}
        for key in _CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value:
                context[key] = str(value)
        log_data.update(context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = safe_preview(value)

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            log_data["level"],
            log_data["logger"],
        ]
        parts.extend(f"{key}={value}" for key, value in context.items())
        parts.append(f": {log_data['message']}")
        text = " ".join(parts)
        if "exception" in log_data:
            text = f"{text}\n{log_data['exception']}"
        return text


class PortalLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds identity and portal to every record.

    Usage:
        logger = get_portal_logger(__name__, identity="mary", portal="classic")
        logger.info("Resolved navigations")
        logger.info("Override portal", portal="intranet")
    """

    def __init__(
        self,
        logger: logging.Logger,
        identity: Optional[str] = None,
        portal: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.identity = identity
        self.portal = portal

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        identity = kwargs.pop("identity", self.identity)
        portal = kwargs.pop("portal", self.portal)

        extra = dict(kwargs.get("extra") or {})
        if identity:
            extra["identity"] = identity
        if portal:
            extra["portal"] = portal
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    settings: Optional[PortalSettings] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure the root logger from PortalSettings.

    Args:
        settings: PortalSettings instance (if None, loads from environment)
        json_format: Override ``settings.log_json``
    """
    if settings is None:
        from .config import load_settings_from_env

        settings = load_settings_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(LogLevel(settings.log_level), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        PortalLogFormatter(json_format=settings.log_json if json_format is None else json_format)
    )
    root_logger.addHandler(console_handler)

    if settings.service_name:
        logging.getLogger(settings.service_name).setLevel(log_level)


def get_portal_logger(
    name: str,
    identity: Optional[str] = None,
    portal: Optional[str] = None,
) -> PortalLoggerAdapter:
    """Get a logger adapter bound to an identity and/or portal.

    Args:
        name: Logger name (typically __name__)
        identity: Optional identity to include in all logs
        portal: Optional portal name to include in all logs

    Returns:
        PortalLoggerAdapter instance
    """
    return PortalLoggerAdapter(logging.getLogger(name), identity=identity, portal=portal)


__all__ = [
    "PortalLogFormatter",
    "PortalLoggerAdapter",
    "get_portal_logger",
    "safe_preview",
    "setup_logging",
]
