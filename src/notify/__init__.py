"""
Notification sinks
"""

from .log_sink import LoggingEventSink

__all__ = ["LoggingEventSink"]
