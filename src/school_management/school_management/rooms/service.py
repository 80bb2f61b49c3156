from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from ..common.validators import (
    optional_text,
    parse_optional_int,
    require_in_range,
    require_max_length,
    require_non_empty,
)
from ..core.constants import ROOM_BUILDING_MAX, ROOM_CAPACITY_RANGE, ROOM_FLOOR_RANGE, ROOM_NAME_MAX
from ..core.exceptions import BackendError, NotFoundError, ValidationError
from ..database.mysql_base import is_duplicate_key
from .model import NewRoom, Room
from .repository import RoomRepository

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("name", "building", "floor", "capacity")
CSV_TEMPLATE_ROWS = (
    ("Room 101", "Main Building", "1", "30"),
    ("Room 102", "Main Building", "1", "35"),
    ("Lab A", "Science Block", "2", "25"),
)


@dataclass(frozen=True)
class RoomImportResult:
    inserted: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def build_room(fields: Mapping[str, object]) -> NewRoom:
    """Validate raw form/CSV fields into a NewRoom.

    Raises ValidationError on the first failing field.
    """

    name = require_non_empty(fields.get("name"), "Room name")
    require_max_length(name, "Room name", ROOM_NAME_MAX)

    building = optional_text(fields.get("building"))
    require_max_length(building, "Building name", ROOM_BUILDING_MAX)

    floor = parse_optional_int(fields.get("floor"), "Floor")
    require_in_range(floor, "Floor", *ROOM_FLOOR_RANGE)

    capacity = parse_optional_int(fields.get("capacity"), "Capacity")
    require_in_range(capacity, "Capacity", *ROOM_CAPACITY_RANGE)

    return NewRoom(name=name, building=building, floor=floor, capacity=capacity)


class RoomService:
    def __init__(self, rooms: RoomRepository):
        self._rooms = rooms

    def list_all(self) -> Sequence[Room]:
        return self._rooms.list_all()

    def get(self, room_id: int) -> Room:
        room = self._rooms.get_by_id(int(room_id))
        if not room:
            raise NotFoundError("Room not found")
        return room

    def create(self, fields: Mapping[str, object]) -> int:
        room = build_room(fields)
        if self._rooms.get_by_name(room.name):
            raise ValidationError("A room with this name already exists")
        try:
            return self._rooms.create(room)
        except BackendError as e:
            if is_duplicate_key(e):
                raise ValidationError("A room with this name already exists") from e
            raise

    def update(self, room_id: int, fields: Mapping[str, object]) -> None:
        self.get(room_id)
        room = build_room(fields)

        clash = self._rooms.get_by_name(room.name)
        if clash and clash.room_id != int(room_id):
            raise ValidationError("A room with this name already exists")

        if not self._rooms.update(int(room_id), room):
            raise ValidationError("Failed to update room")

    def delete(self, room_id: int) -> None:
        if not self._rooms.delete(int(room_id)):
            raise NotFoundError("Room not found")

    @staticmethod
    def csv_template() -> str:
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(CSV_COLUMNS)
        writer.writerows(CSV_TEMPLATE_ROWS)
        return out.getvalue()

    def import_csv(self, text: str) -> RoomImportResult:
        """Bulk-import rooms from CSV text.

        Rows without a name are skipped. Every other row is validated first; a
        single invalid row rejects the whole file. Valid files are written in
        one batch insert.
        """

        reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
        if not reader.fieldnames or "name" not in [f.strip() for f in reader.fieldnames]:
            raise ValidationError("CSV must have a 'name' column")

        rooms: list[NewRoom] = []
        errors: list[str] = []
        for raw in reader:
            row = {(k or "").strip(): v for k, v in raw.items()}
            if not (row.get("name") or "").strip():
                continue
            try:
                rooms.append(build_room(row))
            except ValidationError as e:
                errors.append(f"Row {reader.line_num}: {e}")

        if errors:
            logger.info("Room import rejected with %d error(s)", len(errors))
            return RoomImportResult(inserted=0, errors=errors)

        if not rooms:
            raise ValidationError("No valid rooms found in CSV file")

        names = [r.name for r in rooms]
        if len(set(names)) != len(names):
            return RoomImportResult(errors=["Some rooms appear more than once in the file"])

        try:
            inserted = self._rooms.create_many(rooms)
        except BackendError as e:
            if is_duplicate_key(e):
                return RoomImportResult(errors=["Some rooms already exist with the same name"])
            raise

        logger.info("Imported %d room(s)", inserted)
        return RoomImportResult(inserted=inserted)
