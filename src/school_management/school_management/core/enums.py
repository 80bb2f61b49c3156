from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for access checks."""

    ADMIN = "admin"
    TEACHER = "teacher"


class RecordStatus(str, Enum):
    """Soft status shared by students, bus routes and bus assignments."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceType(str, Enum):
    CLASSROOM = "classroom"
    BUS = "bus"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class ConflictKind(str, Enum):
    """Which resource two schedule entries collide on."""

    TEACHER = "teacher"
    ROOM = "room"
    CLASS = "class"


class ChangeAction(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
