from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.recorder import AttendanceRecorder
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.validator import AttendanceValidator
from .classes.mysql_class_repository import MySQLClassRepository, MySQLEnrollmentRepository
from .classes.repository import ClassRepository, EnrollmentRepository
from .classes.service import ClassService
from .database.connection import DatabaseConnection
from .guardians.mysql_guardian_repository import MySQLGuardianRepository
from .guardians.repository import GuardianRepository
from .guardians.service import ParentPortalService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .periods.mysql_period_repository import MySQLPeriodRepository
from .periods.repository import PeriodRepository
from .periods.service import PeriodService
from .realtime.catalog import ScheduleCatalog
from .realtime.feed import ChangeFeed
from .reports.service import DashboardService, ReportService
from .rooms.mysql_room_repository import MySQLRoomRepository
from .rooms.repository import RoomRepository
from .rooms.service import RoomService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import AuthService, ClassroomLoginService, TeacherService
from .transport.mysql_transport_repository import (
    MySQLBusAssignmentRepository,
    MySQLBusRouteRepository,
    MySQLBusStopRepository,
)
from .transport.repository import BusAssignmentRepository, BusRouteRepository, BusStopRepository
from .transport.service import TransportService


@dataclass(frozen=True)
class Repositories:
    students: StudentRepository
    teachers: TeacherRepository
    classes: ClassRepository
    enrollments: EnrollmentRepository
    rooms: RoomRepository
    periods: PeriodRepository
    schedules: ScheduleRepository
    routes: BusRouteRepository
    stops: BusStopRepository
    assignments: BusAssignmentRepository
    attendance: AttendanceRepository
    guardians: GuardianRepository
    notifications: NotificationRepository


@dataclass(frozen=True)
class Container:
    feed: ChangeFeed
    repos: Repositories

    auth_service: AuthService
    teacher_service: TeacherService
    classroom_login_service: ClassroomLoginService
    student_service: StudentService
    class_service: ClassService
    room_service: RoomService
    period_service: PeriodService
    schedule_service: ScheduleService
    schedule_catalog: ScheduleCatalog
    transport_service: TransportService
    attendance_service: AttendanceService
    parent_portal_service: ParentPortalService
    notification_service: NotificationService
    report_service: ReportService
    dashboard_service: DashboardService


def build_services(repos: Repositories, *, feed: ChangeFeed) -> Container:
    """Wire services on top of any set of repositories (MySQL or in-memory)."""

    transport_service = TransportService(repos.routes, repos.stops, repos.assignments)
    schedule_service = ScheduleService(repos.schedules, repos.rooms, repos.enrollments)
    auth_service = AuthService(repos.teachers)

    validator = AttendanceValidator(
        repos.students,
        repos.schedules,
        repos.enrollments,
        repos.routes,
        repos.assignments,
    )
    attendance_service = AttendanceService(
        validator,
        AttendanceRecorder(repos.attendance),
        repos.attendance,
        repos.students,
    )

    return Container(
        feed=feed,
        repos=repos,
        auth_service=auth_service,
        teacher_service=TeacherService(repos.teachers),
        classroom_login_service=ClassroomLoginService(auth_service, repos.rooms, schedule_service),
        student_service=StudentService(repos.students, transport_service),
        class_service=ClassService(repos.classes, repos.enrollments),
        room_service=RoomService(repos.rooms),
        period_service=PeriodService(repos.periods),
        schedule_service=schedule_service,
        schedule_catalog=ScheduleCatalog(feed, repos.rooms, repos.periods),
        transport_service=transport_service,
        attendance_service=attendance_service,
        parent_portal_service=ParentPortalService(
            repos.guardians,
            repos.students,
            repos.enrollments,
            schedule_service,
            attendance_service,
            transport_service,
            repos.stops,
        ),
        notification_service=NotificationService(repos.notifications),
        report_service=ReportService(repos.attendance),
        dashboard_service=DashboardService(repos.students, repos.teachers, repos.routes, attendance_service),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.from_dict(db_config)
    feed = ChangeFeed()

    repos = Repositories(
        students=MySQLStudentRepository(conn),
        teachers=MySQLTeacherRepository(conn),
        classes=MySQLClassRepository(conn),
        enrollments=MySQLEnrollmentRepository(conn),
        rooms=MySQLRoomRepository(conn, feed),
        periods=MySQLPeriodRepository(conn, feed),
        schedules=MySQLScheduleRepository(conn),
        routes=MySQLBusRouteRepository(conn),
        stops=MySQLBusStopRepository(conn),
        assignments=MySQLBusAssignmentRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        guardians=MySQLGuardianRepository(conn),
        notifications=MySQLNotificationRepository(conn),
    )
    return build_services(repos, feed=feed)
