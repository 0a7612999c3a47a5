"""Structured JSON logging with credential redaction."""

import logging
import sys
from typing import Any, Dict

import structlog

REDACTED = "REDACTED"

# Substrings matched against lower-cased keys. Covers password hashes,
# JWT secrets, bearer headers, and access/refresh tokens in either case style.
SENSITIVE_KEYS = ("authorization", "password", "secret", "token")


def _is_sensitive(key: Any) -> bool:
    key_lower = str(key).lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def _scrub(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: REDACTED if _is_sensitive(k) else _scrub(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_scrub(item) for item in value]
    return value


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """structlog processor replacing credential values with "REDACTED".

    Nested dicts and lists are walked as well, so a logged request payload
    such as ``body={"email": ..., "password": ...}`` is scrubbed too.
    """
    for key, value in list(event_dict.items()):
        event_dict[key] = REDACTED if _is_sensitive(key) else _scrub(value)
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Send one JSON object per line to stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            # UUIDs and datetimes render as plain strings
            structlog.processors.JSONRenderer(default=str),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
