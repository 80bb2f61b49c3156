from __future__ import annotations

from typing import Iterable, Optional

from ..core.constants import RECENT_SCANS_LIMIT
from .model import ScanRecord


class RecentScansLog:
    """Bounded, most-recent-first list of scan outcomes for one operator session."""

    def __init__(self, limit: int = RECENT_SCANS_LIMIT, entries: Optional[Iterable[ScanRecord]] = None):
        if limit <= 0:
            raise ValueError("limit must be positive")
        self._limit = int(limit)
        self._entries: list[ScanRecord] = list(entries or [])[: self._limit]

    @property
    def limit(self) -> int:
        return self._limit

    def add(self, record: ScanRecord) -> None:
        self._entries.insert(0, record)
        del self._entries[self._limit:]

    def entries(self) -> list[ScanRecord]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def to_list(self) -> list[dict]:
        return [e.to_dict() for e in self._entries]

    @classmethod
    def from_list(cls, data: Optional[Iterable[dict]], limit: int = RECENT_SCANS_LIMIT) -> "RecentScansLog":
        return cls(limit=limit, entries=[ScanRecord.from_dict(d) for d in (data or [])])
