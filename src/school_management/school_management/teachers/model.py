from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a staff login (teacher or admin).

    Plain data object, no DB access.
    """

    teacher_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    email: Optional[str] = None
    phone: Optional[str] = None
    subject: Optional[str] = None
    is_active: bool = True
