"""Structured JSON logging with credential redaction.

Credentials never reach the output. Fields named like a credential are
replaced wholesale, at any nesting depth, and anything shaped like a JWT is
masked wherever it appears, including inside free-form error messages.
"""

import logging
import re
import sys
from typing import Any, Dict

import structlog

REDACTED = "REDACTED"

SENSITIVE_KEYS = (
    "password",
    "secret",
    "token",
    "authorization",
)

# header.payload.signature, base64url segments; JWT headers always start with eyJ
JWT_PATTERN = re.compile(r"eyJ[\w-]*\.[\w-]+\.[\w-]+")


def _is_sensitive(key: Any) -> bool:
    key_lower = str(key).lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def _scrub(value: Any) -> Any:
    if isinstance(value, str):
        return JWT_PATTERN.sub(REDACTED, value)
    if isinstance(value, dict):
        return {k: REDACTED if _is_sensitive(k) else _scrub(v) for k, v in value.items()}
    if type(value) in (list, tuple):
        return type(value)(_scrub(v) for v in value)
    return value


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Redact credentials from log entries.

    Keys containing password, secret, token or authorization (any case) are
    replaced with REDACTED; nested dicts and lists are walked, and JWT-shaped
    substrings in any string value are masked.
    """
    for key in list(event_dict.keys()):
        if _is_sensitive(key):
            event_dict[key] = REDACTED
        else:
            event_dict[key] = _scrub(event_dict[key])

    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog for JSON output with request ID support.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, optionally bound to a component name."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
