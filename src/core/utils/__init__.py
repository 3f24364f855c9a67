"""
Shared utilities for logging and event filtering.
"""

from src.core.utils.event_filter import FilterResult, should_process_event
from src.core.utils.logging import configure_logging, log_operation

__all__ = [
    "FilterResult",
    "configure_logging",
    "log_operation",
    "should_process_event",
]
