"""Core data models for the sentiment analysis system"""
from datetime import datetime
from enum import Enum
from typing import Optional, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SentimentType = Literal["positive", "neutral", "negative"]
SourceType = Literal["text", "file", "camera"]
FacingMode = Literal["environment", "user"]

class SessionState(str, Enum):
    """Lifecycle states of a camera capture session"""
    IDLE = "idle"
    ACQUIRING = "acquiring"
    STREAMING = "streaming"
    CAPTURED = "captured"
    CLOSED = "closed"
    ERROR = "error"

class CameraConstraints(BaseModel):
    """Preferred stream parameters sent with a device request"""
    model_config = ConfigDict(frozen=True)

    width: int = Field(1280, gt=0)
    height: int = Field(720, gt=0)
    facing_mode: FacingMode = "environment"

class OCRResult(BaseModel):
    """Text recognized in one image"""
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Recognized text, trimmed")
    confidence: int = Field(..., ge=0, le=100, description="Engine confidence, rounded")

class SentimentScore(BaseModel):
    """Output of the lexicon classifier"""
    model_config = ConfigDict(frozen=True)

    sentiment: SentimentType
    confidence: int = Field(..., ge=0, le=100)
    summary: str

class AnalysisResult(BaseModel):
    """Sentiment of one input, tagged with where its text came from"""
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Text that was classified")
    sentiment: SentimentType = Field(
        ...,
        description="Detected sentiment: 'positive', 'neutral' or 'negative'"
    )
    confidence: int = Field(
        ...,
        ge=0,
        le=100,
        description="Classifier confidence in percent"
    )
    summary: str = Field(..., description="Human-readable explanation of the label")
    source: SourceType = Field(
        ...,
        description="Provenance of the text: 'text', 'file' or 'camera'"
    )
    ocr_confidence: Optional[int] = Field(
        None,
        ge=0,
        le=100,
        description="OCR confidence in percent; set only when the text came from OCR"
    )

    @model_validator(mode="after")
    def _ocr_only_for_images(self) -> "AnalysisResult":
        if self.source == "text" and self.ocr_confidence is not None:
            raise ValueError("ocr_confidence is only valid for file or camera sources")
        if self.source == "camera" and self.ocr_confidence is None:
            raise ValueError("camera results always carry ocr_confidence")
        return self

class StoredAnalysis(AnalysisResult):
    """An AnalysisResult as persisted by the record store"""
    id: str
    created_at: datetime

class AnalysisInput(BaseModel):
    """Provenance-tagged analysis request"""
    model_config = ConfigDict(frozen=True)

    source: SourceType
    text: Optional[str] = None
    data: Optional[bytes] = None
    content_type: Optional[str] = None
    filename: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> "AnalysisInput":
        return cls(source="text", text=text)

    @classmethod
    def from_file(
        cls,
        data: bytes,
        content_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> "AnalysisInput":
        return cls(source="file", data=data, content_type=content_type, filename=filename)

    @classmethod
    def from_camera(cls, image: bytes) -> "AnalysisInput":
        return cls(source="camera", data=image, content_type="image/jpeg")

    @property
    def is_image(self) -> bool:
        """True when the payload must go through OCR"""
        if self.source == "camera":
            return True
        return (self.content_type or "").lower().startswith("image/")
