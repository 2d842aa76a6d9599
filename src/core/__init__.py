"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Request tracing middleware (``core.middleware``, imported on demand)
"""

from core.logging import bind_context, clear_context, configure_logging, get_logger

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
]
