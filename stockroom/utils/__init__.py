"""Utility modules."""

from stockroom.utils.logger import bind_context, get_logger, log_transition, scoped_context
from stockroom.utils.tracing import init_tracing, shutdown_tracing, traced

__all__ = [
    "get_logger",
    "bind_context",
    "scoped_context",
    "log_transition",
    "init_tracing",
    "shutdown_tracing",
    "traced",
]
