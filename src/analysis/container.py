"""Container for the analysis service with dependency injection"""
from functools import lru_cache, partial

from config import settings
from src.core import CameraConstraints
from src.analysis.service import AnalysisService
from src.capture import CaptureSessionSlot, OpenCVCamera
from src.notify import LoggingEventSink
from src.ocr import OCRExtractor
from src.ocr.engines import TesseractEngine
from src.storage import JsonRecordStore

@lru_cache(maxsize=1)
def get_event_sink() -> LoggingEventSink:
    """
    Get singleton LoggingEventSink instance

    Returns:
        LoggingEventSink enabled according to settings.notifications_enabled
    """
    return LoggingEventSink(enabled=settings.notifications_enabled)

@lru_cache(maxsize=1)
def get_record_store() -> JsonRecordStore:
    """
    Get singleton JsonRecordStore instance

    Returns:
        JsonRecordStore writing to settings.records_path
    """
    return JsonRecordStore(path=settings.records_path)

@lru_cache(maxsize=1)
def get_ocr_extractor() -> OCRExtractor:
    """
    Get singleton OCRExtractor instance

    The extractor is shared; each extract() call still builds and releases
    its own TesseractEngine from settings.ocr_language / settings.tesseract_cmd
    """
    return OCRExtractor(
        engine_factory=partial(
            TesseractEngine,
            language=settings.ocr_language,
            tesseract_cmd=settings.tesseract_cmd,
        )
    )

@lru_cache(maxsize=1)
def get_session_slot() -> CaptureSessionSlot:
    """
    Get singleton CaptureSessionSlot instance

    Returns:
        Slot creating sessions on the OpenCV camera at settings.camera_index
        with the preferred resolution and JPEG quality from settings
    """
    return CaptureSessionSlot(
        camera=OpenCVCamera(index=settings.camera_index),
        constraints=CameraConstraints(
            width=settings.camera_width,
            height=settings.camera_height,
            facing_mode=settings.camera_facing_mode,
        ),
        jpeg_quality=settings.jpeg_quality,
        events=get_event_sink(),
    )

@lru_cache(maxsize=1)
def get_analysis_service() -> AnalysisService:
    """
    Get singleton AnalysisService instance with all dependencies wired

    Returns:
        AnalysisService instance with extractor, record store and event sink injected
        Subsequent calls return the same cached instance
    """
    return AnalysisService(
        extractor=get_ocr_extractor(),
        store=get_record_store(),
        events=get_event_sink(),
        auto_save=settings.auto_save,
    )
