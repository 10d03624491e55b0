"""
Logging for the blog backend.

Usage
-----
>>> from blogapi.monitoring import get_logger
>>> logger = get_logger(__name__)
"""

from blogapi.monitoring.logging import (
    bind_request_id,
    clear_context,
    configure_logging,
    get_logger,
    redact_pii,
    sanitize_headers,
    sanitize_log_message,
)

__all__ = [
    "bind_request_id",
    "clear_context",
    "configure_logging",
    "get_logger",
    "redact_pii",
    "sanitize_headers",
    "sanitize_log_message",
]
