"""Structured logging for formulab: console + JSONL file, with contact details masked.

Every event passes through ``redact_sensitive`` before it is rendered, so a
call site can log a whole request or inquiry without leaking the contact
email or the client's free-text concept.
"""

import logging
from collections.abc import Callable
from typing import Any

import structlog

from formulab.config import LOG_FILE, LOG_LEVEL, VERBOSE_LOGGING

# Model SDK and HTTP client request logs drown out generation events at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "google_genai", "anthropic", "urllib3")

_configured = False


def mask_email(value: Any) -> Any:
    """b***@example.com: keep the first character and the domain."""
    if not isinstance(value, str) or "@" not in value:
        return "***"
    local, _, domain = value.partition("@")
    return f"{local[:1]}***@{domain}"


def _summarize_text(value: Any) -> Any:
    if not isinstance(value, str):
        return "***"
    return f"<{len(value)} chars>"


SENSITIVE_FIELDS: dict[str, Callable[[Any], Any]] = {
    "email": mask_email,
    "concept": _summarize_text,
}


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: SENSITIVE_FIELDS[k](v) if k in SENSITIVE_FIELDS else _redact(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def redact_sensitive(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor: mask sensitive keys at any depth of the event."""
    return _redact(event_dict)


def _level() -> int:
    if VERBOSE_LOGGING:
        return logging.DEBUG
    if LOG_LEVEL.isdigit():
        return int(LOG_LEVEL)
    return getattr(logging, LOG_LEVEL, logging.INFO)


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_sensitive,
    ]


def _handler(handler: logging.Handler, renderer: Any, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def _configure_logging() -> None:
    """Route structlog and stdlib records to the console and to LOG_FILE as JSON lines."""
    global _configured
    if _configured:
        return

    level = _level()
    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(_handler(logging.StreamHandler(), structlog.dev.ConsoleRenderer(colors=True), level))
    root.addHandler(
        _handler(
            logging.FileHandler(LOG_FILE, encoding="utf-8"),
            structlog.processors.JSONRenderer(ensure_ascii=False),
            level,
        )
    )
    logging.captureWarnings(True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "formulab", **bindings: Any):
    _configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


def bind_context(**context: Any) -> None:
    """Bind context variables (e.g. command, session_id) to every following event."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def log_step(component: str, step: str, data: Any = None) -> None:
    """Log a pipeline step. The payload is attached only when VERBOSE_LOGGING is on."""
    logger = get_logger(component=component)
    if data is not None and VERBOSE_LOGGING:
        logger.debug(step, data=data)
    else:
        logger.info(step)
