from __future__ import annotations

from dataclasses import dataclass

from .academic_years.mysql_academic_year_repository import MySQLAcademicYearRepository
from .academic_years.repository import AcademicYearRepository
from .academic_years.service import AcademicYearService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .calendar_rules.mysql_calendar_rules_repository import MySQLCalendarRulesRepository
from .calendar_rules.repository import CalendarRulesRepository
from .core.constants import DEFAULT_PARTITION_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .reports.calculator.standard_calculator import StoredOrDerivedHoursCalculator
from .reports.service import AbsenceReportService, TeacherHoursReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .signins.mysql_signin_repository import MySQLSignInRepository, MySQLTeacherRepository
from .signins.repository import SignInRepository, TeacherRepository


@dataclass(frozen=True)
class Container:
    academic_years_repo: AcademicYearRepository
    schedules_repo: ScheduleRepository
    calendar_rules_repo: CalendarRulesRepository
    attendance_repo: AttendanceRepository
    signins_repo: SignInRepository
    teachers_repo: TeacherRepository

    academic_year_service: AcademicYearService
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    absence_report_service: AbsenceReportService
    teacher_hours_report_service: TeacherHoursReportService

    institution_name: str = ""


def wire_container(
    *,
    academic_years_repo: AcademicYearRepository,
    schedules_repo: ScheduleRepository,
    calendar_rules_repo: CalendarRulesRepository,
    attendance_repo: AttendanceRepository,
    signins_repo: SignInRepository,
    teachers_repo: TeacherRepository,
    partition_workers: int = DEFAULT_PARTITION_WORKERS,
    institution_name: str = "",
) -> Container:
    """Build the services over any set of repositories (MySQL or in-memory)."""

    return Container(
        academic_years_repo=academic_years_repo,
        schedules_repo=schedules_repo,
        calendar_rules_repo=calendar_rules_repo,
        attendance_repo=attendance_repo,
        signins_repo=signins_repo,
        teachers_repo=teachers_repo,
        academic_year_service=AcademicYearService(academic_years_repo),
        schedule_service=ScheduleService(schedules_repo, calendar_rules_repo),
        attendance_service=AttendanceService(attendance_repo),
        absence_report_service=AbsenceReportService(
            attendance_repo,
            schedules=schedules_repo,
            rules=calendar_rules_repo,
            partition_workers=partition_workers,
        ),
        teacher_hours_report_service=TeacherHoursReportService(
            signins_repo,
            teachers_repo,
            calculator=StoredOrDerivedHoursCalculator(),
        ),
        institution_name=institution_name,
    )


def build_container(
    *,
    db_config: dict,
    partition_workers: int = DEFAULT_PARTITION_WORKERS,
    institution_name: str = "",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        academic_years_repo=MySQLAcademicYearRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        calendar_rules_repo=MySQLCalendarRulesRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        signins_repo=MySQLSignInRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        partition_workers=partition_workers,
        institution_name=institution_name,
    )
