"""Structured logging for stockroom: structlog over stdlib logging, console + JSONL file."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

from stockroom.config import LOG_FILE, LOG_LEVEL, LOG_TO_FILE, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

_configured = False

# Third-party loggers that flood the console at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "urllib3", "uvicorn.access")


def _coerce_level(level_name: str) -> int:
    if level_name.isdigit():
        return int(level_name)
    return getattr(logging, level_name.upper(), logging.INFO)


def _build_handlers(level: int, pre_chain: list[Any]) -> list[logging.Handler]:
    console = logging.StreamHandler()
    console.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=pre_chain,
        )
    )
    handlers: list[logging.Handler] = [console]
    if LOG_TO_FILE:
        jsonl = logging.FileHandler(LOG_FILE, encoding="utf-8")
        jsonl.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=pre_chain,
            )
        )
        handlers.append(jsonl)
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def _configure_logging() -> None:
    """Install handlers on the root logger and configure structlog once per process."""
    global _configured
    if _configured:
        return

    level = logging.DEBUG if VERBOSE_LOGGING else _coerce_level(LOG_LEVEL)
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        timestamper,
    ]

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in _build_handlers(level, pre_chain):
        root_logger.addHandler(handler)
    logging.captureWarnings(True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "stockroom", **bindings: Any) -> BoundLogger:
    """Return a structured logger named ``stockroom.<area>``, optionally pre-bound."""
    if not _configured:
        _configure_logging()
    logger = structlog.get_logger(name)
    if bindings:
        logger = logger.bind(**bindings)
    return logger


def bind_context(**context: Any) -> None:
    """Bind context variables to be included with every log entry."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def scoped_context(**context: Any) -> Iterator[None]:
    """Bind context for the duration of a block (one HTTP request, one sweep run)."""
    tokens = structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def log_transition(
    logger: BoundLogger,
    entity: str,
    entity_id: Any,
    from_status: Any,
    to_status: Any,
    **extra: Any,
) -> None:
    """Emit the ``<entity>.transition`` event used for every status change the engine makes."""
    logger.info(
        f"{entity}.transition",
        entity_id=entity_id,
        from_status=getattr(from_status, "value", from_status),
        to_status=getattr(to_status, "value", to_status),
        **extra,
    )
