"""Custom exceptions for the sentiment analysis application"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base exception for all application errors

    Attributes:
        message: Human-readable error message
        code: Short error code for identification
    """

    code: str = "GENERAL_ERROR"
    message: str = "An application error occurred"

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs: Any
    ):
        self.code = code or self.code
        self.message = message or self.message
        self.extra = kwargs
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for response"""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                **self.extra,
            }
        }
    
    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

# Input resolution

class InvalidInputError(AppError):
    """Raised when input data is invalid (unknown provenance, malformed payload, etc.)"""
    code = "INVALID_INPUT"
    message = "The provided input is invalid or malformed"

class EmptyInputError(InvalidInputError):
    """Raised when there is nothing to analyze (blank text, empty file)"""
    code = "EMPTY_INPUT"
    message = "Please enter text to analyze."

class NoTextExtractedError(AppError):
    """Raised when OCR ran but recognized no text"""
    code = "NO_TEXT_EXTRACTED"
    message = "Unable to extract text from the image."

class AnalysisFailedError(AppError):
    """Raised when the analysis pipeline fails unexpectedly"""
    code = "ANALYSIS_FAILED"
    message = "Failed to process the input. Please try again later"

# Camera capture

class CaptureError(AppError):
    """Base class for camera acquisition failures"""
    code = "CAPTURE_ERROR"
    message = "Unable to access camera. Please check permissions."

class PermissionDeniedError(CaptureError):
    code = "PERMISSION_DENIED"
    message = "Camera access denied. Please allow camera permissions in your settings."

class DeviceNotFoundError(CaptureError):
    code = "DEVICE_NOT_FOUND"
    message = "No camera found on this device."

class DeviceBusyError(CaptureError):
    code = "DEVICE_BUSY"
    message = "Camera is already in use by another application."

class UnsupportedPlatformError(CaptureError):
    code = "UNSUPPORTED_PLATFORM"
    message = "Camera capture is not supported on this platform."

class UnknownCaptureError(CaptureError):
    code = "UNKNOWN"

class InvalidStateError(AppError):
    """Raised when a capture session operation is called from the wrong state"""
    code = "INVALID_STATE"
    message = "Operation is not allowed in the current session state"

# OCR

class OCRError(AppError):
    """Base class for text recognition failures"""
    code = "OCR_ERROR"
    message = "Text recognition failed"

class EngineUnavailableError(OCRError):
    """Raised when the recognition engine cannot be instantiated"""
    code = "ENGINE_UNAVAILABLE"
    message = "The text recognition engine is not available"

class RecognitionFailedError(OCRError):
    """Raised when the engine fails while recognizing an image"""
    code = "RECOGNITION_FAILED"
    message = "Failed to recognize text in the image"

# Collaborators

class RecordStoreError(AppError):
    """Raised by record store adapters; never fatal to an analysis"""
    code = "RECORD_STORE_FAILURE"
    message = "Failed to access saved analyses"
