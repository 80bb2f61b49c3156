from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import optional_text, require_max_length, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import BusAssignment, BusRoute, BusStop
from .repository import BusAssignmentRepository, BusRouteRepository, BusStopRepository

logger = logging.getLogger(__name__)


def _optional_time(value: Optional[str], field_name: str):
    value = optional_text(value)
    return parse_hhmm(value, field_name) if value else None


class TransportService:
    def __init__(
        self,
        routes: BusRouteRepository,
        stops: BusStopRepository,
        assignments: BusAssignmentRepository,
    ):
        self._routes = routes
        self._stops = stops
        self._assignments = assignments

    def list_routes(self, *, active_only: bool = False) -> Sequence[BusRoute]:
        return self._routes.list_all(active_only=active_only)

    def get_route(self, route_id: int) -> BusRoute:
        route = self._routes.get_by_id(int(route_id))
        if not route:
            raise NotFoundError("Bus route not found")
        return route

    def create_route(
        self,
        *,
        name: str,
        route_code: str,
        driver_name: Optional[str] = None,
        driver_phone: Optional[str] = None,
        departure_time: Optional[str] = None,
        return_time: Optional[str] = None,
    ) -> int:
        name = require_non_empty(name, "Route name")
        route_code = require_non_empty(route_code, "Route code").upper()
        require_max_length(route_code, "Route code", 20)

        if self._routes.get_by_code(route_code):
            raise ValidationError("A route with this code already exists")

        route_id = self._routes.create(
            name=name,
            route_code=route_code,
            driver_name=optional_text(driver_name),
            driver_phone=optional_text(driver_phone),
            departure_time=_optional_time(departure_time, "Departure time"),
            return_time=_optional_time(return_time, "Return time"),
        )
        logger.info("Created bus route %s (%s)", route_code, route_id)
        return route_id

    def list_stops(self, route_id: int) -> Sequence[BusStop]:
        return self._stops.list_for_route(int(route_id))

    def add_stop(
        self,
        route_id: int,
        *,
        name: str,
        location: Optional[str] = None,
        arrival_time: Optional[str] = None,
        stop_order: Optional[int] = None,
    ) -> int:
        self.get_route(route_id)
        name = require_non_empty(name, "Stop name")
        if stop_order is None:
            stop_order = len(self._stops.list_for_route(int(route_id))) + 1
        if int(stop_order) <= 0:
            raise ValidationError("Stop order must be positive")

        return self._stops.create(
            route_id=int(route_id),
            name=name,
            location=optional_text(location),
            arrival_time=_optional_time(arrival_time, "Arrival time"),
            stop_order=int(stop_order),
        )

    def assign_student(self, *, student_id: int, route_id: int, stop_id: Optional[int] = None) -> int:
        """Give a student an active assignment, ending any previous one."""

        route = self.get_route(route_id)
        if not route.is_active:
            raise ValidationError("Bus route is not active")
        if stop_id is not None:
            stop = self._stops.get_by_id(int(stop_id))
            if not stop or stop.route_id != route.route_id:
                raise ValidationError("Stop does not belong to this route")

        current = self._assignments.get_active_for_student(int(student_id))
        if current:
            if current.route_id == route.route_id and current.stop_id == stop_id:
                return current.assignment_id
            self._assignments.end(current.assignment_id)

        return self._assignments.create(student_id=int(student_id), route_id=route.route_id, stop_id=stop_id)

    def end_assignment(self, assignment_id: int) -> None:
        if not self._assignments.end(int(assignment_id)):
            raise NotFoundError("Bus assignment not found")

    def active_assignment(self, student_id: int) -> Optional[BusAssignment]:
        return self._assignments.get_active_for_student(int(student_id))

    def route_students(self, route_id: int) -> Sequence[BusAssignment]:
        self.get_route(route_id)
        return self._assignments.list_active_for_route(int(route_id))

    def count_active_routes(self) -> int:
        return self._routes.count_active()
