from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendError,
    DomainError,
    NotFoundError,
    ScheduleConflictError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong, please try again"


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums and date/time values into JSON-friendly data."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    return value


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True}
    if data is not None:
        body["data"] = to_jsonable(data)
    body.update({k: to_jsonable(v) for k, v in extra.items()})
    return jsonify(body), status


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update({k: to_jsonable(v) for k, v in extra.items()})
    return jsonify(body), status


def payload() -> dict:
    """JSON body or form fields of the current request."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def current_teacher_id():
    value = session.get("teacher_id")
    return int(value) if value is not None else None


def current_role():
    value = session.get("role")
    return Role(value) if value else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "teacher_id" not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "teacher_id" not in session:
            return fail("Please sign in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("You do not have permission", 403)
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ScheduleConflictError)
    def _schedule_conflict(e: ScheduleConflictError):
        return fail(
            str(e),
            400,
            conflicts=[{"kind": c.kind, "message": c.message, "existing": c.existing} for c in e.conflicts],
        )

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return fail(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return fail(str(e), 403)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), 400)

    @app.errorhandler(BackendError)
    def _backend(e: BackendError):
        logger.exception("Backend failure on %s %s", request.method, request.path)
        return fail(GENERIC_FAILURE, 503)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail(GENERIC_FAILURE, 500)
