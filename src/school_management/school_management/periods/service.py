from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from ..common.datetime_utils import parse_hhmm
from ..core.exceptions import NotFoundError, ValidationError
from .model import Period
from .repository import PeriodRepository


class PeriodService:
    def __init__(self, periods: PeriodRepository):
        self._periods = periods

    def list_all(self) -> Sequence[Period]:
        return self._periods.list_all()

    def save_periods(self, items: Iterable[Mapping[str, object]]) -> list[int]:
        """Save a full period table; every row needs a start and an end time."""

        items = list(items)
        if not items:
            raise ValidationError("At least one period is required")

        parsed = []
        for item in items:
            start_s = str(item.get("start_time") or "").strip()
            end_s = str(item.get("end_time") or "").strip()
            if not start_s or not end_s:
                raise ValidationError("Please provide start and end times for all periods")

            try:
                number = int(item.get("period_number") or 0)
            except (TypeError, ValueError):
                raise ValidationError("Period number must be a whole number")
            if number <= 0:
                raise ValidationError("Period number must be positive")

            start = parse_hhmm(start_s, "Start time")
            end = parse_hhmm(end_s, "End time")
            if end <= start:
                raise ValidationError(f"Period {number} must end after it starts")
            parsed.append((number, start, end))

        numbers = [p[0] for p in parsed]
        if len(set(numbers)) != len(numbers):
            raise ValidationError("Period numbers must be unique")

        return [self._periods.upsert(period_number=n, start_time=s, end_time=e) for n, s, e in parsed]

    def delete(self, period_id: int) -> None:
        if not self._periods.delete(int(period_id)):
            raise NotFoundError("Period not found")
