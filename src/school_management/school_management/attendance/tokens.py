from __future__ import annotations

from typing import Optional

from ..core.constants import STUDENT_TOKEN_PREFIX


def make_student_token(student_code: str) -> str:
    return f"{STUDENT_TOKEN_PREFIX}{student_code}"


def parse_student_token(raw: Optional[str]) -> Optional[str]:
    """Return the student identifier carried by a scanned token.

    None when the payload lacks the STUDENT: prefix or carries nothing after it.
    """

    if raw is None:
        return None
    raw = raw.strip()
    if not raw.startswith(STUDENT_TOKEN_PREFIX):
        return None
    code = raw[len(STUDENT_TOKEN_PREFIX):].strip()
    return code or None
