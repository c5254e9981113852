"""
Utility modules for the hosting API client.

This package contains logging and configuration helpers used throughout the
client codebase.
"""

from hostapi_client.utils.logging import (
    configure_logging,
    get_logger,
    log_with_context
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_with_context"
]
