"""Ports for user-facing notifications"""
from typing import Literal, Protocol

EventLevel = Literal["info", "error"]

class EventSink(Protocol):
    """Receives toast-style notifications"""

    def publish(self, title: str, description: str, level: EventLevel = "info") -> None:
        ...
