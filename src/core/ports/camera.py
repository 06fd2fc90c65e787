"""Ports for the camera device capability"""
from typing import Protocol, Tuple

from PIL import Image

from src.core import CameraConstraints

class DeviceHandle(Protocol):
    """An acquired camera stream, held exclusively until stop()"""

    @property
    def frame_size(self) -> Tuple[int, int]:
        """Negotiated (width, height) of the stream"""
        ...

    def read_frame(self) -> Image.Image:
        """Return the current frame as an RGB image"""
        ...

    def stop(self) -> None:
        """Release the device"""
        ...

class CameraDevice(Protocol):
    """Host camera capability"""

    async def request(self, constraints: CameraConstraints) -> DeviceHandle:
        """
        Acquire the camera

        Raises:
            PermissionDeniedError, DeviceNotFoundError, DeviceBusyError,
            UnsupportedPlatformError
        """
        ...
