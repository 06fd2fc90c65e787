"""Ports (interface) for the analysis service"""
from typing import Protocol
from src.core import AnalysisInput, AnalysisResult

class IAnalysisService(Protocol):
    """Interface for the analysis service"""

    async def analyze(self, request: AnalysisInput) -> AnalysisResult:
        """
        Resolve a provenance-tagged input to text and classify it

        Args:
            request (AnalysisInput): Raw text, uploaded file bytes or a captured image

        Returns:
            AnalysisResult: Sentiment, confidence and summary tagged with the source
        """
        ...
