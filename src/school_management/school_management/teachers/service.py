from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..rooms.model import Room
from ..rooms.repository import RoomRepository
from ..schedules.model import ScheduleSlot
from ..schedules.service import ScheduleService
from .model import Teacher
from .repository import TeacherRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    teacher_id: int
    full_name: str
    role: Role


@dataclass(frozen=True)
class ClassroomSession:
    """A teacher signed in on a classroom device."""

    user: SessionUser
    room: Room
    slots: Sequence[ScheduleSlot]

    @property
    def scan_path(self) -> str:
        return f"/attendance/scan/{self.room.room_id}/{self.user.teacher_id}"


class AuthService:
    """Use case: authenticate teacher/admin (login)."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def authenticate(self, username: str, password: str) -> SessionUser:
        teacher = self._teachers.get_by_username((username or "").strip())
        if not teacher or not teacher.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(teacher.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Invalid username or password")

        return SessionUser(teacher_id=teacher.teacher_id, full_name=teacher.full_name, role=teacher.role)


class ClassroomLoginService:
    """Sign a teacher in on the device mounted in a room."""

    def __init__(self, auth: AuthService, rooms: RoomRepository, schedules: ScheduleService):
        self._auth = auth
        self._rooms = rooms
        self._schedules = schedules

    def classroom_login(self, room_id: int, username: str, password: str, *, today: date) -> ClassroomSession:
        room = self._rooms.get_by_id(int(room_id))
        if not room:
            raise NotFoundError("Room not found")

        user = self._auth.authenticate(username, password)
        slots = [s for s in self._schedules.today_for_room(room.room_id, today) if s.teacher_id == user.teacher_id]
        logger.info("Teacher %s signed in on room %s (%d period(s) today)", user.teacher_id, room.name, len(slots))
        return ClassroomSession(user=user, room=room, slots=slots)


class TeacherService:
    """Use case: manage teacher accounts (admin)."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def create_teacher(
        self,
        *,
        full_name: str,
        username: str,
        password: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> int:
        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", 6)

        if self._teachers.get_by_username(username):
            raise ValidationError("Username already exists")

        return self._teachers.create(
            full_name=full_name,
            username=username,
            password_hash=generate_password_hash(password),
            role=Role.TEACHER,
            email=optional_text(email),
            phone=optional_text(phone),
            subject=optional_text(subject),
        )

    def list(self) -> Sequence[Teacher]:
        return self._teachers.list_all()

    def get(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def deactivate(self, *, current_role: Role, teacher_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        teacher = self.get(teacher_id)
        if teacher.role == Role.ADMIN:
            raise ValidationError("Cannot deactivate an admin account")

        if not self._teachers.set_active(teacher.teacher_id, is_active=False):
            raise ValidationError("Failed to deactivate teacher")

    def count_active(self) -> int:
        return self._teachers.count_active()
