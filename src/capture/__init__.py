"""
Camera capture module
"""

from .session import CaptureSession, CaptureSessionSlot
from .devices import OpenCVCamera

__all__ = [
    "CaptureSession",
    "CaptureSessionSlot",
    "OpenCVCamera",
]
