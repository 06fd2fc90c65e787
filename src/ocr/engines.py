"""Tesseract-backed recognition engine"""
from __future__ import annotations

import asyncio
import io
from typing import Optional, Tuple

import pytesseract
from PIL import Image, UnidentifiedImageError

from config import get_logger
from src.core import EngineUnavailableError, RecognitionFailedError

log = get_logger("ocr.tesseract")

def _mean_word_confidence(data: dict) -> float:
    """Average the per-word confidences, ignoring Tesseract's -1 layout rows"""
    scores = []
    for conf, word in zip(data.get("conf", []), data.get("text", [])):
        try:
            value = float(conf)
        except (TypeError, ValueError):
            continue
        if value >= 0 and str(word).strip():
            scores.append(value)
    return sum(scores) / len(scores) if scores else 0.0

class TesseractEngine:
    """
    Single-use wrapper around the tesseract binary

    Args:
        language: Tesseract language code (default 'eng')
        tesseract_cmd: Optional path to the tesseract executable

    Raises:
        EngineUnavailableError: If the tesseract binary cannot be found
    """

    def __init__(self, language: str = "eng", tesseract_cmd: Optional[str] = None) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        try:
            self.version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise EngineUnavailableError(
                message="Tesseract is not installed or not on PATH"
            ) from e
        self.language = language
        self._closed = False
        log.debug(f"Started tesseract {self.version} ({self.language})")

    def _recognize_sync(self, image: bytes) -> Tuple[str, float]:
        try:
            with Image.open(io.BytesIO(image)) as img:
                img = img.convert("RGB")
                text = pytesseract.image_to_string(img, lang=self.language)
                data = pytesseract.image_to_data(
                    img,
                    lang=self.language,
                    output_type=pytesseract.Output.DICT,
                )
        except UnidentifiedImageError as e:
            raise RecognitionFailedError(message="The image could not be decoded") from e
        return text, _mean_word_confidence(data)

    async def recognize(self, image: bytes) -> Tuple[str, float]:
        if self._closed:
            raise RecognitionFailedError(message="Engine has already been released")
        return await asyncio.to_thread(self._recognize_sync, image)

    async def close(self) -> None:
        # pytesseract spawns one process per call; nothing stays resident
        self._closed = True
