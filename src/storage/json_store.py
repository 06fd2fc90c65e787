"""JSON file record store for saved analyses"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from pydantic import ValidationError

from config import get_logger
from src.core import AnalysisResult, RecordStoreError, StoredAnalysis

log = get_logger("storage")

class JsonRecordStore:
    """
    Keep analyses in a single JSON array on disk

    Rows follow the record schema {id, text, sentiment, confidence, summary,
    source, ocr_confidence, created_at}.
    """

    def __init__(self, path: str = "data/analyses.json") -> None:
        self.path = Path(path)

    def _read(self) -> List[StoredAnalysis]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                rows = json.load(handle)
            return [StoredAnalysis.model_validate(row) for row in rows]
        except (OSError, ValueError, ValidationError) as e:
            raise RecordStoreError(message=f"Cannot read records from {self.path}") from e

    def _write(self, records: List[StoredAnalysis]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as handle:
                json.dump([r.model_dump(mode="json") for r in records], handle, indent=2)
        except OSError as e:
            raise RecordStoreError(message=f"Cannot write records to {self.path}") from e

    @staticmethod
    def _newest_first(records: List[StoredAnalysis]) -> List[StoredAnalysis]:
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def save(self, result: AnalysisResult) -> StoredAnalysis:
        record = StoredAnalysis(
            **result.model_dump(),
            id=str(uuid4()),
            created_at=datetime.now(timezone.utc),
        )
        records = self._read()
        records.append(record)
        self._write(records)
        log.info(f"Saved analysis {record.id} ({record.source}, {record.sentiment})")
        return record

    def list(self, limit: Optional[int] = None) -> List[StoredAnalysis]:
        records = self._newest_first(self._read())
        return records if limit is None else records[:limit]

    def search(self, query: str) -> List[StoredAnalysis]:
        needle = query.strip().lower()
        records = self._newest_first(self._read())
        if not needle:
            return records
        return [r for r in records if needle in r.text.lower() or needle in r.summary.lower()]

    def delete(self, record_id: str) -> bool:
        records = self._read()
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            return False
        self._write(kept)
        log.info(f"Deleted analysis {record_id}")
        return True
