from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from .model import BusAssignment, BusRoute, BusStop


class BusRouteRepository(Protocol):
    def list_all(self, *, active_only: bool = False) -> Sequence[BusRoute]:
        raise NotImplementedError

    def get_by_id(self, route_id: int) -> Optional[BusRoute]:
        raise NotImplementedError

    def get_by_code(self, route_code: str) -> Optional[BusRoute]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        route_code: str,
        driver_name: Optional[str],
        driver_phone: Optional[str],
        departure_time: Optional[time],
        return_time: Optional[time],
    ) -> int:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError


class BusStopRepository(Protocol):
    def list_for_route(self, route_id: int) -> Sequence[BusStop]:
        """Ordered by stop_order."""

        raise NotImplementedError

    def get_by_id(self, stop_id: int) -> Optional[BusStop]:
        raise NotImplementedError

    def create(
        self,
        *,
        route_id: int,
        name: str,
        location: Optional[str],
        arrival_time: Optional[time],
        stop_order: int,
    ) -> int:
        raise NotImplementedError


class BusAssignmentRepository(Protocol):
    def get_active_for_student(self, student_id: int) -> Optional[BusAssignment]:
        raise NotImplementedError

    def has_active(self, *, student_id: int, route_id: int) -> bool:
        raise NotImplementedError

    def create(self, *, student_id: int, route_id: int, stop_id: Optional[int]) -> int:
        raise NotImplementedError

    def end(self, assignment_id: int) -> bool:
        """Mark the assignment inactive."""

        raise NotImplementedError

    def list_active_for_route(self, route_id: int) -> Sequence[BusAssignment]:
        raise NotImplementedError
