"""OpenCV-backed camera device"""
from __future__ import annotations

import asyncio
import sys
from typing import Any, Tuple

from PIL import Image

from config import get_logger
from src.core import (
    CameraConstraints,
    DeviceBusyError,
    DeviceNotFoundError,
    PermissionDeniedError,
    UnsupportedPlatformError,
)

log = get_logger("capture.opencv")

def _load_cv2() -> Any:
    try:
        import cv2
    except ImportError as e:
        raise UnsupportedPlatformError() from e
    return cv2

class OpenCVHandle:
    """An opened cv2.VideoCapture; stop() releases it once"""

    def __init__(self, capture: Any, cv2: Any, frame_size: Tuple[int, int]) -> None:
        self._capture = capture
        self._cv2 = cv2
        self._frame_size = frame_size

    @property
    def frame_size(self) -> Tuple[int, int]:
        return self._frame_size

    def read_frame(self) -> Image.Image:
        if self._capture is None:
            raise DeviceNotFoundError(message="Camera has been released")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise DeviceBusyError(message="The camera stopped delivering frames.")
        return Image.fromarray(self._cv2.cvtColor(frame, self._cv2.COLOR_BGR2RGB))

    def stop(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None

class OpenCVCamera:
    """
    Camera capability backed by cv2.VideoCapture

    OpenCV has no facing-mode concept; the device index picks the camera and
    facing_mode is only logged.

    Args:
        index: Device index passed to cv2.VideoCapture
    """

    def __init__(self, index: int = 0) -> None:
        self.index = index

    def _open_sync(self, constraints: CameraConstraints) -> OpenCVHandle:
        cv2 = _load_cv2()
        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            if sys.platform == "darwin":
                # macOS reports a denied TCC prompt as a device that never opens
                raise PermissionDeniedError()
            raise DeviceNotFoundError()

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, constraints.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, constraints.height)

        ok, _ = capture.read()
        if not ok:
            capture.release()
            raise DeviceBusyError()

        size = (
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        log.info(f"Opened camera {self.index} at {size[0]}x{size[1]} (requested {constraints.facing_mode})")
        return OpenCVHandle(capture, cv2, size)

    async def request(self, constraints: CameraConstraints) -> OpenCVHandle:
        return await asyncio.to_thread(self._open_sync, constraints)
