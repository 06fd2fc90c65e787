"""Event sink that turns notifications into log lines"""
from __future__ import annotations

from typing import List, Tuple

from config import get_logger
from src.core.ports import EventLevel

log = get_logger("events")

class LoggingEventSink:
    """
    Publish toast-style events to the application log

    The most recent events are kept in memory for inspection.

    Attributes:
        enabled: When False, events are dropped
        history: (level, title, description) of the most recent events

    Raises:
        ValueError: If keep is less than 1
    """

    def __init__(self, enabled: bool = True, keep: int = 20) -> None:
        if keep < 1:
            raise ValueError("keep must be at least 1")
        self.enabled = enabled
        self.keep = keep
        self.history: List[Tuple[EventLevel, str, str]] = []

    def publish(self, title: str, description: str, level: EventLevel = "info") -> None:
        if not self.enabled:
            return
        if level == "error":
            log.warning(f"{title}: {description}")
        else:
            log.info(f"{title}: {description}")
        self.history.append((level, title, description))
        del self.history[:-self.keep]
