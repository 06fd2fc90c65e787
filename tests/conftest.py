"""Fake collaborators shared by the test suite"""
from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Tuple

import numpy as np
import pytest
from PIL import Image

from src.core import AnalysisResult, CameraConstraints, RecordStoreError, StoredAnalysis
from src.ocr import OCRExtractor


class FakeHandle:
    def __init__(self, size: Tuple[int, int] = (64, 48)) -> None:
        self._size = size
        self.stop_calls = 0
        self.reads = 0

    @property
    def frame_size(self) -> Tuple[int, int]:
        return self._size

    def read_frame(self) -> Image.Image:
        self.reads += 1
        return Image.effect_noise(self._size, 64).convert("RGB")

    def stop(self) -> None:
        self.stop_calls += 1


class FakeCamera:
    """Camera that hands out FakeHandles, optionally failing or waiting on a gate"""

    def __init__(self, error: Optional[Exception] = None, gate: Optional[asyncio.Event] = None) -> None:
        self.error = error
        self.gate = gate
        self.requests: List[CameraConstraints] = []
        self.handles: List[FakeHandle] = []

    async def request(self, constraints: CameraConstraints) -> FakeHandle:
        self.requests.append(constraints)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        handle = FakeHandle((constraints.width // 20, constraints.height // 20))
        self.handles.append(handle)
        return handle


class FakeEngine:
    def __init__(self, text: str = "", confidence: float = 0.0, error: Optional[Exception] = None) -> None:
        self.text = text
        self.confidence = confidence
        self.error = error
        self.images: List[bytes] = []
        self.close_calls = 0

    async def recognize(self, image: bytes) -> Tuple[str, float]:
        self.images.append(image)
        if self.error is not None:
            raise self.error
        return self.text, self.confidence

    async def close(self) -> None:
        self.close_calls += 1


class EngineFactory:
    """Builds a new FakeEngine per call and remembers them all"""

    def __init__(self, text: str = "", confidence: float = 0.0, error: Optional[Exception] = None) -> None:
        self.text = text
        self.confidence = confidence
        self.error = error
        self.engines: List[FakeEngine] = []

    def __call__(self) -> FakeEngine:
        engine = FakeEngine(self.text, self.confidence, self.error)
        self.engines.append(engine)
        return engine


class RecordingSink:
    def __init__(self) -> None:
        self.events: List[Tuple[str, str, str]] = []

    def publish(self, title: str, description: str, level: str = "info") -> None:
        self.events.append((level, title, description))


class MemoryStore:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.saved: List[AnalysisResult] = []

    def save(self, result: AnalysisResult) -> StoredAnalysis:
        if self.fail:
            raise RecordStoreError(message="disk full")
        self.saved.append(result)
        return StoredAnalysis(**result.model_dump(), id=str(len(self.saved)), created_at="2026-01-01T00:00:00Z")



# Minimal stand-ins for cv2.VideoCapture and the cv2 module

class FakeVideoCapture:
    def __init__(self, opened=True, readable=True):
        self.opened = opened
        self.readable = readable
        self.props = {}
        self.released = 0

    def isOpened(self):
        return self.opened

    def set(self, prop, value):
        self.props[prop] = value

    def get(self, prop):
        return self.props.get(prop, 0)

    def read(self):
        if not self.readable:
            return False, None
        frame = np.zeros((4, 6, 3), dtype=np.uint8)
        frame[..., 0] = 255  # blue in BGR
        return True, frame

    def release(self):
        self.released += 1


class FakeCV2:
    CAP_PROP_FRAME_WIDTH = 3
    CAP_PROP_FRAME_HEIGHT = 4
    COLOR_BGR2RGB = 4

    def __init__(self, capture, delay=0.0):
        self.capture = capture
        self.delay = delay
        self.indexes = []

    def VideoCapture(self, index):
        self.indexes.append(index)
        if self.delay:
            time.sleep(self.delay)
        return self.capture

    def cvtColor(self, frame, code):
        return frame[..., ::-1].copy()


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_extractor():
    def _make(text: str = "", confidence: float = 0.0, error: Optional[Exception] = None):
        factory = EngineFactory(text, confidence, error)
        return OCRExtractor(factory), factory
    return _make
