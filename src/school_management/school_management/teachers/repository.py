from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Teacher


class TeacherRepository(Protocol):
    """Teacher repository interface.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create(
        self,
        *,
        full_name: str,
        username: str,
        password_hash: str,
        role: Role,
        email: Optional[str],
        phone: Optional[str],
        subject: Optional[str],
    ) -> int:
        raise NotImplementedError

    def set_active(self, teacher_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError
