"""
Core domain layer
"""
from .models import (
    AnalysisInput,
    AnalysisResult,
    CameraConstraints,
    OCRResult,
    SentimentScore,
    SessionState,
    StoredAnalysis,
)
from .exceptions import (
    AppError,
    InvalidInputError,
    EmptyInputError,
    NoTextExtractedError,
    AnalysisFailedError,
    CaptureError,
    PermissionDeniedError,
    DeviceNotFoundError,
    DeviceBusyError,
    UnsupportedPlatformError,
    UnknownCaptureError,
    InvalidStateError,
    OCRError,
    EngineUnavailableError,
    RecognitionFailedError,
    RecordStoreError,
)

__all__ = [
    "AnalysisInput",
    "AnalysisResult",
    "CameraConstraints",
    "OCRResult",
    "SentimentScore",
    "SessionState",
    "StoredAnalysis",
    "AppError",
    "InvalidInputError",
    "EmptyInputError",
    "NoTextExtractedError",
    "AnalysisFailedError",
    "CaptureError",
    "PermissionDeniedError",
    "DeviceNotFoundError",
    "DeviceBusyError",
    "UnsupportedPlatformError",
    "UnknownCaptureError",
    "InvalidStateError",
    "OCRError",
    "EngineUnavailableError",
    "RecognitionFailedError",
    "RecordStoreError",
]
