"""Example: drive the service layer directly (no Flask).

Scans the first demo student into today's first period for room 1 and
prints the operator log.
"""

import importlib

from config import get_settings_module

from src.school_management.school_management.attendance.scan_log import RecentScansLog
from src.school_management.school_management.common.datetime_utils import now_local
from src.school_management.school_management.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    slots = container.schedule_service.today_for_room(1, now_local().date())
    if not slots:
        print("No periods scheduled in room 1 today")
        return

    log = RecentScansLog(limit=settings.SCAN_LOG_LIMIT)
    outcome = container.attendance_service.scan_classroom(
        "STUDENT:STU0001",
        slots[0].schedule_id,
        actor_id=slots[0].teacher_id,
        log=log,
    )
    print(outcome.scan.message)
    for entry in log.entries():
        print(entry.to_dict())


if __name__ == "__main__":
    main()
