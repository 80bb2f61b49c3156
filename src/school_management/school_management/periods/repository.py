from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from .model import Period


class PeriodRepository(Protocol):
    def list_all(self) -> Sequence[Period]:
        """Ordered by period_number ascending."""

        raise NotImplementedError

    def get_by_id(self, period_id: int) -> Optional[Period]:
        raise NotImplementedError

    def upsert(self, *, period_number: int, start_time: time, end_time: time) -> int:
        """Create or update the period with this number. Returns period_id."""

        raise NotImplementedError

    def delete(self, period_id: int) -> bool:
        raise NotImplementedError
