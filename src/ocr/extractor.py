"""OCR extractor: image bytes to text with a per-call engine instance"""
from __future__ import annotations

import math
from contextlib import asynccontextmanager
from typing import AsyncIterator

from config import get_logger
from src.core import (
    AppError,
    EngineUnavailableError,
    OCRResult,
    RecognitionFailedError,
)
from src.core.ports import EngineFactory, RecognitionEngine

log = get_logger("ocr")

class OCRExtractor:
    """
    Extract text from encoded images

    A fresh engine is created for every call and closed before the call
    returns, whatever the outcome. No engine outlives its extraction.

    Attributes:
        engine_factory: Callable returning a new RecognitionEngine
    """

    def __init__(self, engine_factory: EngineFactory) -> None:
        self.engine_factory = engine_factory

    @asynccontextmanager
    async def _engine(self) -> AsyncIterator[RecognitionEngine]:
        try:
            engine = self.engine_factory()
        except AppError:
            raise
        except Exception as e:
            log.exception("Failed to start recognition engine")
            raise EngineUnavailableError() from e

        try:
            yield engine
        finally:
            try:
                await engine.close()
            except Exception:
                log.exception("Failed to release recognition engine")

    async def extract(self, image: bytes) -> OCRResult:
        """
        Recognize text in an image

        Args:
            image: Encoded image bytes (JPEG, PNG, ...)

        Returns:
            OCRResult with trimmed text (possibly empty) and confidence
            rounded to the nearest integer in 0..100

        Raises:
            EngineUnavailableError: If the engine cannot be instantiated
            RecognitionFailedError: If the engine fails on this image
        """
        async with self._engine() as engine:
            try:
                text, confidence = await engine.recognize(image)
            except AppError:
                raise
            except Exception as e:
                log.exception("Text recognition failed")
                raise RecognitionFailedError() from e

        result = OCRResult(
            text=(text or "").strip(),
            confidence=max(0, min(100, int(math.floor(confidence + 0.5)))),
        )
        log.info(f"Recognized {len(result.text)} characters ({result.confidence}% confidence)")
        return result
