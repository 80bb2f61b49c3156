from __future__ import annotations

from dataclasses import asdict, replace
from datetime import date, datetime, time
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.school_management.school_management.attendance.model import (
    AttendanceRecord,
    AttendanceReportRow,
    NewAttendanceRecord,
)
from src.school_management.school_management.classes.model import SchoolClass
from src.school_management.school_management.container import Repositories, build_services
from src.school_management.school_management.core.enums import ChangeAction, RecordStatus, Role
from src.school_management.school_management.guardians.model import Guardian
from src.school_management.school_management.notifications.model import Notification
from src.school_management.school_management.periods.model import Period
from src.school_management.school_management.realtime.feed import ChangeFeed
from src.school_management.school_management.rooms.model import Room
from src.school_management.school_management.schedules.model import ScheduleEntry, ScheduleSlot
from src.school_management.school_management.students.model import Student
from src.school_management.school_management.teachers.model import Teacher
from src.school_management.school_management.transport.model import BusAssignment, BusRoute, BusStop


class InMemoryStudents:
    def __init__(self):
        self.rows: dict[int, Student] = {}
        self._id = 0

    def add(self, student: Student) -> Student:
        self.rows[student.student_id] = student
        self._id = max(self._id, student.student_id)
        return student

    def get_by_id(self, student_id):
        return self.rows.get(student_id)

    def get_by_code(self, student_code):
        return next((s for s in self.rows.values() if s.student_code == student_code), None)

    def get_by_token(self, qr_code):
        return next((s for s in self.rows.values() if s.qr_code == qr_code), None)

    def get_many(self, student_ids):
        return [self.rows[i] for i in student_ids if i in self.rows]

    def create(self, *, full_name, student_code, qr_code, grade, section, date_of_birth, gender, photo_url) -> int:
        self._id += 1
        self.rows[self._id] = Student(
            student_id=self._id,
            full_name=full_name,
            student_code=student_code,
            qr_code=qr_code,
            grade=grade,
            section=section,
            date_of_birth=date_of_birth,
            gender=gender,
            photo_url=photo_url,
        )
        return self._id

    def update(self, student_id, *, full_name, grade, section, date_of_birth, gender, photo_url) -> bool:
        s = self.rows.get(student_id)
        if not s:
            return False
        self.rows[student_id] = replace(
            s,
            full_name=full_name,
            grade=grade,
            section=section,
            date_of_birth=date_of_birth,
            gender=gender,
            photo_url=photo_url,
        )
        return True

    def set_status(self, student_id, status) -> bool:
        s = self.rows.get(student_id)
        if not s:
            return False
        self.rows[student_id] = replace(s, status=status)
        return True

    def search(self, flt):
        out = []
        for s in self.rows.values():
            if flt.query and flt.query.lower() not in (s.full_name + " " + s.student_code).lower():
                continue
            if flt.grade and s.grade != flt.grade:
                continue
            if flt.section and s.section != flt.section:
                continue
            if flt.status and s.status != flt.status:
                continue
            out.append(s)
        return sorted(out, key=lambda s: s.full_name)

    def count_active(self) -> int:
        return sum(1 for s in self.rows.values() if s.is_active)


class InMemoryTeachers:
    def __init__(self):
        self.rows: dict[int, Teacher] = {}

    def add(self, teacher: Teacher) -> Teacher:
        self.rows[teacher.teacher_id] = teacher
        return teacher

    def get_by_id(self, teacher_id):
        return self.rows.get(teacher_id)

    def get_by_username(self, username):
        return next((t for t in self.rows.values() if t.username == username), None)

    def create(self, *, full_name, username, password_hash, role, email, phone, subject) -> int:
        teacher_id = max(self.rows, default=0) + 1
        self.rows[teacher_id] = Teacher(
            teacher_id=teacher_id,
            full_name=full_name,
            username=username,
            password_hash=password_hash,
            role=role,
            email=email,
            phone=phone,
            subject=subject,
        )
        return teacher_id

    def set_active(self, teacher_id, *, is_active) -> bool:
        t = self.rows.get(teacher_id)
        if not t:
            return False
        self.rows[teacher_id] = replace(t, is_active=is_active)
        return True

    def list_all(self):
        return list(self.rows.values())

    def count_active(self) -> int:
        return sum(1 for t in self.rows.values() if t.is_active and t.role == Role.TEACHER)


class InMemoryClasses:
    def __init__(self):
        self.rows: dict[int, SchoolClass] = {}

    def add(self, cls: SchoolClass) -> SchoolClass:
        self.rows[cls.class_id] = cls
        return cls

    def list_all(self):
        return list(self.rows.values())

    def get_by_id(self, class_id):
        return self.rows.get(class_id)

    def get_many(self, class_ids):
        return [self.rows[c] for c in class_ids if c in self.rows]

    def create(self, *, grade, section, subject, room_number) -> int:
        class_id = max(self.rows, default=0) + 1
        self.rows[class_id] = SchoolClass(class_id, grade, section, subject, room_number)
        return class_id

    def update_fields(self, class_id, *, subject, room_number) -> bool:
        c = self.rows.get(class_id)
        if not c:
            return False
        self.rows[class_id] = replace(c, subject=subject, room_number=room_number)
        return True

    def list_incomplete(self):
        return [c for c in self.rows.values() if c.is_incomplete]


class InMemoryEnrollments:
    def __init__(self):
        self.pairs: set[tuple[int, int]] = set()

    def is_enrolled(self, *, student_id, class_id) -> bool:
        return (student_id, class_id) in self.pairs

    def enroll(self, *, student_id, class_id) -> bool:
        if (student_id, class_id) in self.pairs:
            return False
        self.pairs.add((student_id, class_id))
        return True

    def unenroll(self, *, student_id, class_id) -> bool:
        if (student_id, class_id) not in self.pairs:
            return False
        self.pairs.discard((student_id, class_id))
        return True

    def count_for_class(self, class_id) -> int:
        return sum(1 for _, c in self.pairs if c == class_id)

    def class_ids_for_student(self, student_id):
        return sorted(c for s, c in self.pairs if s == student_id)

    def student_ids_for_class(self, class_id):
        return sorted(s for s, c in self.pairs if c == class_id)


class InMemoryRooms:
    def __init__(self, feed: ChangeFeed):
        self.rows: dict[int, Room] = {}
        self._feed = feed
        self.fail_create_many: Optional[Exception] = None

    def add(self, room: Room) -> Room:
        self.rows[room.room_id] = room
        return room

    def list_all(self):
        return sorted(self.rows.values(), key=lambda r: r.name)

    def get_by_id(self, room_id):
        return self.rows.get(room_id)

    def get_by_name(self, name):
        return next((r for r in self.rows.values() if r.name == name), None)

    def create(self, room) -> int:
        room_id = max(self.rows, default=0) + 1
        self.rows[room_id] = Room(room_id, room.name, room.building, room.floor, room.capacity)
        self._feed.notify("rooms", ChangeAction.INSERT, room_id)
        return room_id

    def create_many(self, rooms) -> int:
        if self.fail_create_many:
            raise self.fail_create_many
        for room in rooms:
            room_id = max(self.rows, default=0) + 1
            self.rows[room_id] = Room(room_id, room.name, room.building, room.floor, room.capacity)
        self._feed.notify("rooms", ChangeAction.INSERT)
        return len(rooms)

    def update(self, room_id, room) -> bool:
        if room_id not in self.rows:
            return False
        self.rows[room_id] = Room(room_id, room.name, room.building, room.floor, room.capacity)
        self._feed.notify("rooms", ChangeAction.UPDATE, room_id)
        return True

    def delete(self, room_id) -> bool:
        if self.rows.pop(room_id, None) is None:
            return False
        self._feed.notify("rooms", ChangeAction.DELETE, room_id)
        return True


class InMemoryPeriods:
    def __init__(self, feed: ChangeFeed):
        self.rows: dict[int, Period] = {}
        self._feed = feed

    def add(self, period: Period) -> Period:
        self.rows[period.period_id] = period
        return period

    def list_all(self):
        return sorted(self.rows.values(), key=lambda p: p.period_number)

    def get_by_id(self, period_id):
        return self.rows.get(period_id)

    def upsert(self, *, period_number, start_time, end_time) -> int:
        existing = next((p for p in self.rows.values() if p.period_number == period_number), None)
        period_id = existing.period_id if existing else max(self.rows, default=0) + 1
        self.rows[period_id] = Period(period_id, period_number, start_time, end_time)
        self._feed.notify("periods", ChangeAction.UPDATE, period_id)
        return period_id

    def delete(self, period_id) -> bool:
        if self.rows.pop(period_id, None) is None:
            return False
        self._feed.notify("periods", ChangeAction.DELETE, period_id)
        return True


class InMemorySchedules:
    def __init__(self, periods: InMemoryPeriods, classes: InMemoryClasses, rooms: InMemoryRooms, teachers: InMemoryTeachers):
        self.rows: dict[int, ScheduleEntry] = {}
        self._periods = periods
        self._classes = classes
        self._rooms = rooms
        self._teachers = teachers

    def add(self, entry: ScheduleEntry) -> ScheduleEntry:
        self.rows[entry.schedule_id] = entry
        return entry

    def list_all(self):
        return list(self.rows.values())

    def get_by_id(self, schedule_id):
        return self.rows.get(schedule_id)

    def create_many(self, entries):
        ids = []
        for e in entries:
            schedule_id = max(self.rows, default=0) + 1
            self.rows[schedule_id] = ScheduleEntry(
                schedule_id, e.class_id, e.teacher_id, e.room_id, e.period_id, e.day, e.week_number
            )
            ids.append(schedule_id)
        return ids

    def update(self, schedule_id, entry) -> bool:
        if schedule_id not in self.rows:
            return False
        self.rows[schedule_id] = ScheduleEntry(
            schedule_id, entry.class_id, entry.teacher_id, entry.room_id, entry.period_id, entry.day, entry.week_number
        )
        return True

    def delete(self, schedule_id) -> bool:
        return self.rows.pop(schedule_id, None) is not None

    def _slot(self, e: ScheduleEntry) -> ScheduleSlot:
        p = self._periods.get_by_id(e.period_id)
        c = self._classes.get_by_id(e.class_id)
        r = self._rooms.get_by_id(e.room_id)
        t = self._teachers.get_by_id(e.teacher_id)
        return ScheduleSlot(
            schedule_id=e.schedule_id,
            day=e.day,
            week_number=e.week_number,
            period_id=p.period_id,
            period_number=p.period_number,
            start_time=p.start_time,
            end_time=p.end_time,
            class_id=c.class_id,
            grade=c.grade,
            section=c.section,
            subject=c.subject,
            room_id=r.room_id,
            room_name=r.name,
            teacher_id=e.teacher_id,
            teacher_name=t.full_name if t else None,
        )

    def _slots(self, pred):
        slots = [self._slot(e) for e in self.rows.values() if pred(e)]
        return sorted(slots, key=lambda s: s.period_number)

    def slots_for_teacher(self, teacher_id, *, day, week_number):
        return self._slots(lambda e: e.teacher_id == teacher_id and e.day == day and e.week_number == week_number)

    def slots_for_room(self, room_id, *, day, week_number):
        return self._slots(lambda e: e.room_id == room_id and e.day == day and e.week_number == week_number)

    def slots_for_classes(self, class_ids, *, week_number):
        return self._slots(lambda e: e.class_id in class_ids and e.week_number == week_number)

    def get_slot(self, schedule_id):
        e = self.rows.get(schedule_id)
        return self._slot(e) if e else None


class InMemoryRoutes:
    def __init__(self):
        self.rows: dict[int, BusRoute] = {}

    def add(self, route: BusRoute) -> BusRoute:
        self.rows[route.route_id] = route
        return route

    def list_all(self, *, active_only=False):
        return [r for r in self.rows.values() if r.is_active or not active_only]

    def get_by_id(self, route_id):
        return self.rows.get(route_id)

    def get_by_code(self, route_code):
        return next((r for r in self.rows.values() if r.route_code == route_code), None)

    def create(self, *, name, route_code, driver_name, driver_phone, departure_time, return_time) -> int:
        route_id = max(self.rows, default=0) + 1
        self.rows[route_id] = BusRoute(
            route_id, name, route_code, driver_name, driver_phone, departure_time, return_time
        )
        return route_id

    def count_active(self) -> int:
        return sum(1 for r in self.rows.values() if r.is_active)


class InMemoryStops:
    def __init__(self):
        self.rows: dict[int, BusStop] = {}

    def add(self, stop: BusStop) -> BusStop:
        self.rows[stop.stop_id] = stop
        return stop

    def list_for_route(self, route_id):
        return sorted((s for s in self.rows.values() if s.route_id == route_id), key=lambda s: s.stop_order)

    def get_by_id(self, stop_id):
        return self.rows.get(stop_id)

    def create(self, *, route_id, name, location, arrival_time, stop_order) -> int:
        stop_id = max(self.rows, default=0) + 1
        self.rows[stop_id] = BusStop(stop_id, route_id, name, location, arrival_time, stop_order)
        return stop_id


class InMemoryAssignments:
    def __init__(self):
        self.rows: dict[int, BusAssignment] = {}
        self.fail_create: Optional[Exception] = None

    def add(self, assignment: BusAssignment) -> BusAssignment:
        self.rows[assignment.assignment_id] = assignment
        return assignment

    def _active(self):
        return [a for a in self.rows.values() if a.status == RecordStatus.ACTIVE]

    def get_active_for_student(self, student_id):
        found = [a for a in self._active() if a.student_id == student_id]
        return found[-1] if found else None

    def has_active(self, *, student_id, route_id) -> bool:
        return any(a.student_id == student_id and a.route_id == route_id for a in self._active())

    def create(self, *, student_id, route_id, stop_id) -> int:
        if self.fail_create:
            raise self.fail_create
        assignment_id = max(self.rows, default=0) + 1
        self.rows[assignment_id] = BusAssignment(assignment_id, student_id, route_id, stop_id)
        return assignment_id

    def end(self, assignment_id) -> bool:
        a = self.rows.get(assignment_id)
        if not a:
            return False
        self.rows[assignment_id] = replace(a, status=RecordStatus.INACTIVE)
        return True

    def list_active_for_route(self, route_id):
        return [a for a in self._active() if a.route_id == route_id]


class InMemoryAttendance:
    def __init__(self, students: InMemoryStudents):
        self.rows: list[AttendanceRecord] = []
        self._students = students
        self.fail_create: Optional[Exception] = None

    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        if self.fail_create:
            raise self.fail_create
        saved = AttendanceRecord(attendance_id=len(self.rows) + 1, **asdict(record))
        self.rows.append(saved)
        return saved

    def list_for_student(self, student_id, *, since: date):
        found = [r for r in self.rows if r.student_id == student_id and r.attendance_date >= since]
        return sorted(found, key=lambda r: r.scanned_at, reverse=True)

    def list_for_date(self, day: date):
        return [r for r in self.rows if r.attendance_date == day]

    def get_report_rows(self, *, start_date, end_date, attendance_type=None):
        out = []
        for r in self.rows:
            if not (start_date <= r.attendance_date <= end_date):
                continue
            if attendance_type is not None and r.attendance_type != attendance_type:
                continue
            s = self._students.get_by_id(r.student_id)
            out.append(
                AttendanceReportRow(
                    attendance_id=r.attendance_id,
                    student_id=r.student_id,
                    student_name=s.full_name,
                    student_code=s.student_code,
                    grade=s.grade,
                    section=s.section,
                    attendance_type=r.attendance_type,
                    status=r.status,
                    attendance_date=r.attendance_date,
                    scanned_at=r.scanned_at,
                    class_id=r.class_id,
                    bus_route_id=r.bus_route_id,
                )
            )
        return sorted(out, key=lambda r: r.scanned_at, reverse=True)


class InMemoryGuardians:
    def __init__(self):
        self.rows: list[Guardian] = []

    def list_by_phone(self, phone):
        return [g for g in self.rows if g.phone == phone]

    def list_for_student(self, student_id):
        return [g for g in self.rows if g.student_id == student_id]


class InMemoryNotifications:
    def __init__(self):
        self.rows: dict[int, Notification] = {}

    def list_recent(self, *, unread_only=False, limit=50):
        items = [n for n in self.rows.values() if not (unread_only and n.is_read)]
        return sorted(items, key=lambda n: n.notification_id, reverse=True)[:limit]

    def create(self, *, title, message, category) -> int:
        notification_id = max(self.rows, default=0) + 1
        self.rows[notification_id] = Notification(
            notification_id, title, message, category, False, datetime(2024, 3, 4, 8, 0)
        )
        return notification_id

    def mark_read(self, notification_id) -> bool:
        n = self.rows.get(notification_id)
        if not n:
            return False
        self.rows[notification_id] = replace(n, is_read=True)
        return True

    def mark_all_read(self) -> int:
        unread = [i for i, n in self.rows.items() if not n.is_read]
        for i in unread:
            self.mark_read(i)
        return len(unread)

    def count_unread(self) -> int:
        return sum(1 for n in self.rows.values() if not n.is_read)


def make_repos(feed: ChangeFeed) -> Repositories:
    students = InMemoryStudents()
    teachers = InMemoryTeachers()
    classes = InMemoryClasses()
    rooms = InMemoryRooms(feed)
    periods = InMemoryPeriods(feed)
    return Repositories(
        students=students,
        teachers=teachers,
        classes=classes,
        enrollments=InMemoryEnrollments(),
        rooms=rooms,
        periods=periods,
        schedules=InMemorySchedules(periods, classes, rooms, teachers),
        routes=InMemoryRoutes(),
        stops=InMemoryStops(),
        assignments=InMemoryAssignments(),
        attendance=InMemoryAttendance(students),
        guardians=InMemoryGuardians(),
        notifications=InMemoryNotifications(),
    )


def seed(repos: Repositories) -> None:
    """Small school: two classes, one route, Monday period 1 in week 2."""

    repos.teachers.add(Teacher(1, "School Admin", "admin", generate_password_hash("admin123"), Role.ADMIN))
    repos.teachers.add(
        Teacher(2, "Sarah Johnson", "sjohnson", generate_password_hash("teacher123"), Role.TEACHER, subject="Mathematics")
    )

    repos.rooms.add(Room(1, "Room 101", "Main Building", 1, 30))
    repos.rooms.add(Room(2, "Lab A", "Science Block", 2, 1))
    repos.periods.add(Period(1, 1, time(8, 0), time(8, 45)))
    repos.periods.add(Period(2, 2, time(8, 50), time(9, 35)))

    repos.classes.add(SchoolClass(1, "Grade 5", "A", "Mathematics", "101"))
    repos.classes.add(SchoolClass(2, "Grade 6", "A", "Science", "102"))

    repos.students.add(Student(1, "Emma Thompson", "STU0001", "STUDENT:STU0001", "Grade 5", "A"))
    repos.students.add(Student(2, "Noah Martinez", "STU0002", "STUDENT:STU0002", "Grade 5", "A"))
    repos.students.add(
        Student(3, "Olivia Wilson", "STU0003", "STUDENT:STU0003", "Grade 6", "A", status=RecordStatus.INACTIVE)
    )
    for student_id, class_id in ((1, 1), (2, 1), (3, 2)):
        repos.enrollments.enroll(student_id=student_id, class_id=class_id)

    repos.schedules.add(ScheduleEntry(1, class_id=1, teacher_id=2, room_id=1, period_id=1, day="Monday", week_number=2))

    repos.routes.add(BusRoute(1, "Route #1", "R1", "John Smith", "555-0101", time(7, 0), time(15, 30)))
    repos.stops.add(BusStop(1, 1, "Oak Street", "Oak St & 3rd Ave", time(7, 10), 1))
    repos.stops.add(BusStop(2, 1, "Pine Park", "Pine Park North Gate", time(7, 20), 2))
    repos.assignments.add(BusAssignment(1, student_id=1, route_id=1, stop_id=1))

    repos.guardians.rows.append(Guardian(1, 1, "Laura Thompson", "555-0199", "Mother"))


@pytest.fixture()
def fixed_now() -> datetime:
    # Monday of ISO week 10, which is week 2 of the rotation.
    return datetime(2024, 3, 4, 8, 5, 0)


@pytest.fixture()
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture()
def repos(feed) -> Repositories:
    r = make_repos(feed)
    seed(r)
    return r


@pytest.fixture()
def container(repos, feed):
    return build_services(repos, feed=feed)


@pytest.fixture()
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.school_management.school_management.main import create_app

    flask_app = create_app(container)
    yield flask_app
    container.schedule_catalog.close()


@pytest.fixture()
def client(app):
    return app.test_client()


def login(client, username="sjohnson", password="teacher123"):
    resp = client.post("/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp


@pytest.fixture()
def teacher_client(client):
    login(client)
    return client


@pytest.fixture()
def admin_client(client):
    login(client, "admin", "admin123")
    return client
