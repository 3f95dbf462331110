"""Centralized logging utilities for the permission & inheritance engine.

This module provides:
- Logging configuration from LegacyConfig
- Safe preview utilities for opaque metadata
- Secret redaction
- Structured logging with rule_id / content_id propagation
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional
from uuid import UUID

from .config import LegacyConfig, LogLevel


# Patterns for detecting secrets in free-form metadata
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|key|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=]+)',
    r'(?i)(?:sk-|pk-)[a-zA-Z0-9]{32,}',
]

_CONTEXT_FIELDS = ("rule_id", "content_id")

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", *_CONTEXT_FIELDS,
}


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Event data and rule metadata are opaque blobs supplied by callers, so
    they are never logged in full.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A safe, truncated single-line string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    # Normalize whitespace
    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret patterns (passwords, tokens, API keys) from text."""
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)

    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview + optional redaction. Use this for any caller-supplied blob."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class LegacyFormatter(logging.Formatter):
    """Formatter that includes rule_id / content_id and optional JSON output."""

    def __init__(
        self,
        include_context: bool = True,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_context = include_context
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context: dict[str, str] = {}
        if self.include_context:
            for field in _CONTEXT_FIELDS:
                value = getattr(record, field, None)
                if value:
                    context[field] = str(value) if isinstance(value, UUID) else value
        log_data.update(context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        for field, value in context.items():
            parts.append(f"{field}={value}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class LegacyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds rule_id and content_id to log records.

    Usage:
        logger = get_legacy_logger(__name__)
        logger.info("Processing rule", rule=rule)
    """

    def __init__(
        self,
        logger: logging.Logger,
        rule_id: Optional[UUID | str] = None,
        content_id: Optional[UUID | str] = None,
    ):
        super().__init__(logger, {})
        self.rule_id = rule_id
        self.content_id = content_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        rule_id = kwargs.pop("rule_id", self.rule_id)
        content_id = kwargs.pop("content_id", self.content_id)

        # Anything rule-shaped (InheritanceRule) carries both ids
        rule = kwargs.pop("rule", None)
        if rule is not None:
            rule_id = rule_id or getattr(rule, "id", None)
            content_id = content_id or getattr(rule, "content_id", None)

        extra = kwargs.get("extra", {})
        if rule_id:
            extra["rule_id"] = rule_id
        if content_id:
            extra["content_id"] = content_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[LegacyConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Configure root logging from LegacyConfig.

    Args:
        config: LegacyConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_config_from_env
        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        LegacyFormatter(
            include_context=True,
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_legacy_logger(
    name: str,
    rule_id: Optional[UUID | str] = None,
    content_id: Optional[UUID | str] = None,
) -> LegacyLoggerAdapter:
    """Get a logger adapter that stamps rule_id / content_id on records.

    Example:
        logger = get_legacy_logger(__name__)
        logger.info("Materialized %d recipients", n, rule=rule)
    """
    logger = logging.getLogger(name)
    return LegacyLoggerAdapter(logger, rule_id=rule_id, content_id=content_id)


__all__ = [
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "LegacyFormatter",
    "LegacyLoggerAdapter",
    "setup_logging",
    "get_legacy_logger",
]
