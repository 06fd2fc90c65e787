"""Analysis service: resolve text, file and camera inputs and classify them"""
from __future__ import annotations

import codecs
from typing import Optional

from config import logger
from src.core import (
    AppError,
    AnalysisFailedError,
    AnalysisInput,
    AnalysisResult,
    EmptyInputError,
    InvalidInputError,
    NoTextExtractedError,
    OCRResult,
    RecordStoreError,
)
from src.core.ports import EventLevel, EventSink, RecordStore
from src.analysis.classifier import classify
from src.capture.session import CaptureSession
from src.ocr.extractor import OCRExtractor

# Title shown for each failure kind, mirroring the dashboard toasts
_FAILURE_TITLES = {
    "EMPTY_INPUT": "No input provided",
    "NO_TEXT_EXTRACTED": "No text found",
}

def _decode_text_file(data: bytes) -> str:
    """Decode an uploaded text file as UTF-8, tolerating a BOM and bad bytes"""
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]
    return data.decode("utf-8", errors="replace")

class AnalysisService:
    """
    Service for analyzing text from any of the three input channels

    Orchestrates the analysis pipeline:
    1. Resolve the input to plain text (as-is, decoded file, or OCR)
    2. Classify the text with the lexicon classifier
    3. Assemble a provenance-tagged AnalysisResult
    4. Notify the event sink and optionally save to the record store

    Attributes:
        extractor: OCRExtractor used for image files and camera captures
        store: Optional RecordStore for saving results
        events: Optional EventSink for user-facing notifications
        auto_save: Save every successful result when a store is set
    """
    def __init__(
        self,
        extractor: OCRExtractor,
        store: Optional[RecordStore] = None,
        events: Optional[EventSink] = None,
        auto_save: bool = True,
    ) -> None:
        self.extractor = extractor
        self.store = store
        self.events = events
        self.auto_save = auto_save

    def _publish(self, title: str, description: str, level: EventLevel = "info") -> None:
        if self.events is None:
            return
        try:
            self.events.publish(title, description, level)
        except Exception:
            logger.exception("Failed to publish event")

    async def _ocr(self, image: bytes, empty_message: str) -> OCRResult:
        ocr = await self.extractor.extract(image)
        if not ocr.text.strip():
            raise NoTextExtractedError(message=empty_message)
        return ocr

    async def _resolve(self, request: AnalysisInput) -> tuple[str, Optional[OCRResult]]:
        if request.source == "text":
            text = (request.text or "").strip()
            if not text:
                raise EmptyInputError(message="Please enter text to analyze.")
            return text, None

        if request.source == "camera":
            if not request.data:
                raise EmptyInputError(message="No image was captured.")
            ocr = await self._ocr(request.data, "Unable to extract text from the captured image.")
            return ocr.text, ocr

        if request.source == "file":
            if not request.data:
                raise EmptyInputError(message="Please upload a file to analyze.")
            if request.is_image:
                ocr = await self._ocr(request.data, "Unable to extract text from the image.")
                return ocr.text, ocr
            return _decode_text_file(request.data), None

        raise InvalidInputError(message=f"Unknown input source: {request.source}")

    def _save(self, result: AnalysisResult) -> None:
        if self.store is None or not self.auto_save:
            return
        try:
            self.store.save(result)
        except RecordStoreError as e:
            logger.warning(f"Record store failure: {e}")
            self._publish("Save failed", e.message, "error")
        except Exception:
            logger.exception("Unexpected record store failure")
            self._publish("Save failed", RecordStoreError().message, "error")

    async def analyze(self, request: AnalysisInput) -> AnalysisResult:
        """
        Analyze one provenance-tagged input

        Args:
            request: AnalysisInput built with from_text, from_file or from_camera

        Returns:
            AnalysisResult containing:
                - text that was classified
                - sentiment: 'positive', 'neutral' or 'negative'
                - confidence and summary from the classifier
                - source, and ocr_confidence when OCR was used

        Raises:
            EmptyInputError: If there is no text or file content to analyze
            NoTextExtractedError: If OCR recognized no text in the image
            OCRError: If the recognition engine is unavailable or fails
            AnalysisFailedError: If the pipeline fails unexpectedly
        """
        logger.info(f"Running analysis ({request.source})")

        try:
            text, ocr = await self._resolve(request)
            score = classify(text)
            result = AnalysisResult(
                text=text,
                sentiment=score.sentiment,
                confidence=score.confidence,
                summary=score.summary,
                source=request.source,
                ocr_confidence=ocr.confidence if ocr is not None else None,
            )
        except AppError as e:
            logger.warning(f"Analysis rejected: {e}")
            self._publish(_FAILURE_TITLES.get(e.code, "Processing Error"), e.message, "error")
            raise
        except Exception as e:
            logger.exception("Unexpected failure")
            error = AnalysisFailedError()
            self._publish("Processing Error", error.message, "error")
            raise error from e

        self._publish(
            "Analysis Complete",
            f"{result.sentiment.capitalize()} sentiment detected ({result.confidence}% confidence)",
        )
        self._save(result)
        return result

    async def analyze_capture(self, session: CaptureSession) -> AnalysisResult:
        """
        Confirm a captured frame and analyze it as camera input

        The session is closed whether or not confirmation succeeds.
        """
        try:
            image = session.confirm()
        finally:
            session.close()
        return await self.analyze(AnalysisInput.from_camera(image))
