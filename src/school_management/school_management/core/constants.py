"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STUDENT_TOKEN_PREFIX = "STUDENT:"
STUDENT_CODE_PREFIX = "STU"

RECENT_SCANS_LIMIT = 10
DEFAULT_HISTORY_DAYS = 30

SCHEDULE_WEEKS = (1, 2, 3, 4)
SCHOOL_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")

ROOM_NAME_MAX = 50
ROOM_BUILDING_MAX = 50
ROOM_FLOOR_RANGE = (-10, 100)
ROOM_CAPACITY_RANGE = (1, 1000)

DEFAULT_SUBJECT = "General"
DEFAULT_ROOM_NUMBER = "TBD"

ALL_GRADES = (
    "KG1",
    "KG2",
    "Grade 1",
    "Grade 2",
    "Grade 3",
    "Grade 4",
    "Grade 5",
    "Grade 6",
    "Grade 7",
    "Grade 8",
    "Grade 9",
    "Grade 10",
    "Grade 11",
    "Grade 12",
)
ALL_SECTIONS = ("A", "B", "C", "D", "E", "F")
