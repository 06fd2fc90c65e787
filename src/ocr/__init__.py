"""
OCR module
"""

from .extractor import OCRExtractor

__all__ = [
    "OCRExtractor",
]
