from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables
from .database.connection import DBConfig
from .guardians.controller import register as register_guardians
from .notifications.controller import register as register_notifications
from .periods.controller import register as register_periods
from .reports.controller import register as register_reports
from .rooms.controller import register as register_rooms
from .schedules.controller import register as register_schedules
from .students.controller import register as register_students
from .teachers.controller import register as register_teachers
from .transport.controller import register as register_transport

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Pass a container to run against in-memory repositories; otherwise one is
    built from the configured MySQL database.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SCAN_LOG_LIMIT"] = int(getattr(settings, "SCAN_LOG_LIMIT", 10))

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    if container is None:
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_accounts(db_config)
            logger.info("Demo seed ready")

        container = build_container(db_config=db_config)
        atexit.register(container.schedule_catalog.close)

    app.extensions["container"] = container
    register_error_handlers(app)

    register_teachers(app, container)
    register_students(app, container)
    register_classes(app, container)
    register_rooms(app, container)
    register_periods(app, container)
    register_schedules(app, container)
    register_transport(app, container)
    register_attendance(app, container)
    register_guardians(app, container)
    register_notifications(app, container)
    register_reports(app, container)

    return app
