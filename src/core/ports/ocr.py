"""Ports for the text recognition engine"""
from typing import Callable, Protocol, Tuple

class RecognitionEngine(Protocol):
    """One engine instance, used for a single extraction and then closed"""

    async def recognize(self, image: bytes) -> Tuple[str, float]:
        """Return raw (text, confidence 0-100) for an encoded image"""
        ...

    async def close(self) -> None:
        ...

EngineFactory = Callable[[], RecognitionEngine]
