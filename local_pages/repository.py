"""Content repository interface and local adapters."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .models import PageRecord

LOGGER = logging.getLogger(__name__)

PAGE_FIELDS = ("title", "body", "excerpt", "slug", "parent_id", "meta")


class RepositoryError(RuntimeError):
    """Raised when a page could not be read or written."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ContentRepository:
    """Narrow page store interface the orchestrator depends on.

    Pages are keyed by ``(region, sub_region)``; a region page has no
    sub-region. Lookups are exact matches.
    """

    def find(self, region: str, sub_region: Optional[str] = None) -> Optional[PageRecord]:
        raise NotImplementedError

    def create(self, fields: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, page_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def list_all(self) -> List[PageRecord]:
        raise NotImplementedError

    def delete(self, page_id: int) -> bool:
        raise NotImplementedError

    def list_by(self, region: str, sub_region: Optional[str] = None) -> List[PageRecord]:
        """All pages for ``region`` (region page plus sub-region pages), or one sub-region's pages."""

        return [
            record
            for record in self.list_all()
            if record.region == region and (sub_region is None or record.sub_region == sub_region)
        ]


class InMemoryRepository(ContentRepository):
    """Dictionary-backed repository, used for dry runs and tests."""

    def __init__(self, records: Optional[List[PageRecord]] = None):
        self._records: Dict[int, PageRecord] = {}
        for record in records or []:
            self._records[record.id] = record
        self._next_id = max(self._records, default=0) + 1

    def find(self, region: str, sub_region: Optional[str] = None) -> Optional[PageRecord]:
        for record in self._records.values():
            if record.region == region and record.sub_region == sub_region:
                return record
        return None

    def create(self, fields: Mapping[str, Any]) -> int:
        region = fields.get("region")
        if not region:
            raise RepositoryError("Cannot create a page without a region")
        page_id = self._next_id
        self._next_id += 1
        record = PageRecord(id=page_id, region=region, sub_region=fields.get("sub_region"))
        self._apply(record, fields)
        self._records[page_id] = record
        try:
            self._persist()
        except RepositoryError:
            del self._records[page_id]
            self._next_id = page_id
            raise
        return page_id

    def update(self, page_id: int, fields: Mapping[str, Any]) -> bool:
        record = self._records.get(page_id)
        if record is None:
            raise RepositoryError(f"Page {page_id} not found", status_code=404)
        snapshot = PageRecord.from_dict(record.to_dict())
        self._apply(record, fields)
        try:
            self._persist()
        except RepositoryError:
            self._records[page_id] = snapshot
            raise
        return True

    def list_all(self) -> List[PageRecord]:
        return [self._records[key] for key in sorted(self._records)]

    def delete(self, page_id: int) -> bool:
        if self._records.pop(page_id, None) is None:
            return False
        self._persist()
        return True

    def get(self, page_id: int) -> Optional[PageRecord]:
        return self._records.get(page_id)

    @staticmethod
    def _apply(record: PageRecord, fields: Mapping[str, Any]) -> None:
        for name in PAGE_FIELDS:
            if name not in fields:
                continue
            if name == "meta":
                record.meta.update(fields["meta"] or {})
            else:
                setattr(record, name, fields[name])

    def _persist(self) -> None:
        """Hook for subclasses that write through to storage."""


class JsonFileRepository(InMemoryRepository):
    """Repository persisted to a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> List[PageRecord]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            raise RepositoryError(f"Failed to load page store {self.path}: {exc}") from exc
        return [PageRecord.from_dict(item) for item in payload]

    def _persist(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as handle:
                json.dump([record.to_dict() for record in self.list_all()], handle, indent=2, ensure_ascii=False)
        except OSError as exc:
            raise RepositoryError(f"Failed to write page store {self.path}: {exc}") from exc
        LOGGER.debug("Stored %d pages in %s", len(self._records), self.path)


__all__ = [
    "ContentRepository",
    "InMemoryRepository",
    "JsonFileRepository",
    "RepositoryError",
]
