"""
Collaborator interfaces used by the core
"""
from .analysis import IAnalysisService
from .camera import CameraDevice, DeviceHandle
from .ocr import EngineFactory, RecognitionEngine
from .storage import RecordStore
from .notify import EventLevel, EventSink

__all__ = [
    "IAnalysisService",
    "CameraDevice",
    "DeviceHandle",
    "EngineFactory",
    "RecognitionEngine",
    "RecordStore",
    "EventLevel",
    "EventSink",
]
