"""
Analysis module
"""

from .classifier import classify, POSITIVE_WORDS, NEGATIVE_WORDS
from .service import AnalysisService
from .container import (
    get_event_sink,
    get_record_store,
    get_ocr_extractor,
    get_session_slot,
    get_analysis_service,
)

__all__ = [
    "classify",
    "POSITIVE_WORDS",
    "NEGATIVE_WORDS",
    "AnalysisService",
    "get_event_sink",
    "get_record_store",
    "get_ocr_extractor",
    "get_session_slot",
    "get_analysis_service",
]
