"""Ports for persisted analyses"""
from typing import List, Optional, Protocol

from src.core import AnalysisResult, StoredAnalysis

class RecordStore(Protocol):
    """Interface for the analysis history store"""

    def save(self, result: AnalysisResult) -> StoredAnalysis:
        ...

    def list(self, limit: Optional[int] = None) -> List[StoredAnalysis]:
        """Saved analyses, newest first"""
        ...

    def search(self, query: str) -> List[StoredAnalysis]:
        """Saved analyses whose text or summary contains query, newest first"""
        ...

    def delete(self, record_id: str) -> bool:
        """Delete a record; False if it did not exist"""
        ...
