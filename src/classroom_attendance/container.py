from __future__ import annotations

from dataclasses import dataclass

from .attendance.local_repository import LocalAttendanceCache
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .cache.kv_store import KeyValueStore, SQLiteKeyValueStore
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .database.connection import DatabaseConnection, DBConfig
from .reports.service import ReportService
from .students.local_repository import LocalStudentCache
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .sync.cross_class import CrossClassSync, RosterStandardizer
from .sync.reconciler import IdentityReconciler


@dataclass(frozen=True)
class Container:
    classes_repo: ClassRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    kv_store: KeyValueStore
    local_students: LocalStudentCache
    local_attendance: LocalAttendanceCache

    reconciler: IdentityReconciler
    cross_class_sync: CrossClassSync
    roster_standardizer: RosterStandardizer

    class_service: ClassService
    student_service: StudentService
    attendance_service: AttendanceService
    report_service: ReportService


def assemble_container(
    *,
    classes_repo: ClassRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    kv_store: KeyValueStore,
) -> Container:
    """Wire services over any remote repositories and local key-value store."""

    local_attendance = LocalAttendanceCache(kv_store)
    local_students = LocalStudentCache(kv_store, local_attendance)

    reconciler = IdentityReconciler(local_students)
    cross_class_sync = CrossClassSync(local_students)

    class_service = ClassService(classes_repo, local_students)
    student_service = StudentService(students_repo, local_students, reconciler=reconciler, sync=cross_class_sync)
    attendance_service = AttendanceService(
        attendance_repo,
        students_repo,
        local_attendance,
        local_students=local_students,
        sync=cross_class_sync,
    )
    report_service = ReportService(student_service, attendance_service)
    roster_standardizer = RosterStandardizer(student_service, local_students, cross_class_sync, classes_repo)

    return Container(
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        kv_store=kv_store,
        local_students=local_students,
        local_attendance=local_attendance,
        reconciler=reconciler,
        cross_class_sync=cross_class_sync,
        roster_standardizer=roster_standardizer,
        class_service=class_service,
        student_service=student_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, local_cache_path: str) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble_container(
        classes_repo=MySQLClassRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        kv_store=SQLiteKeyValueStore(local_cache_path),
    )
