from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from types import ModuleType
from typing import Any

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .breaks.mysql_break_rule_repository import MySQLBreakRuleRepository
from .breaks.service import BreakRuleService
from .common.datetime_utils import get_timezone
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .issues.detector import DiscrepancyClassifier, ThresholdDiscrepancyClassifier
from .issues.mysql_issue_clear_repository import MySQLIssueClearRepository
from .issues.service import IssueService
from .scheduling.auto_close import AutoCloseDaemon
from .summary.service import DailySummaryService
from .timecalc.break_overlap import BreakOverlapCalculator, build_calculator
from .users.mysql_user_repository import MySQLUserRepository
from .worklog.mysql_work_segment_repository import MySQLWorkSegmentRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    tz: tzinfo

    users_repo: MySQLUserRepository
    attendance_repo: MySQLAttendanceRepository
    segments_repo: MySQLWorkSegmentRepository
    break_rules_repo: MySQLBreakRuleRepository
    issue_clears_repo: MySQLIssueClearRepository

    calculator: BreakOverlapCalculator
    classifier: DiscrepancyClassifier
    attendance_service: AttendanceService
    break_rule_service: BreakRuleService
    summary_service: DailySummaryService
    issue_service: IssueService
    auto_close_daemon: AutoCloseDaemon


def _setting(settings: ModuleType | None, name: str) -> Any:
    return getattr(settings, name, getattr(constants, name, None))


def build_container(*, db_config: dict, settings: ModuleType | None = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    tz = get_timezone(_setting(settings, "TIMEZONE") or constants.DEFAULT_TIMEZONE)

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    segments_repo = MySQLWorkSegmentRepository(conn)
    break_rules_repo = MySQLBreakRuleRepository(conn)
    issue_clears_repo = MySQLIssueClearRepository(conn)

    calculator = build_calculator(_setting(settings, "BREAK_OVERLAP_MODE") or "sum")
    classifier = ThresholdDiscrepancyClassifier(_setting(settings, "DISCREPANCY_THRESHOLD_MINUTES"))

    attendance_service = AttendanceService(attendance_repo, users_repo, break_rules_repo, calculator, tz=tz)
    break_rule_service = BreakRuleService(break_rules_repo)
    summary_service = DailySummaryService(
        attendance_repo,
        segments_repo,
        break_rules_repo,
        users_repo,
        calculator,
        tz=tz,
    )
    issue_service = IssueService(
        issue_clears_repo,
        attendance_repo,
        users_repo,
        break_rules_repo,
        summary_service,
        classifier,
        tz=tz,
        lookback_days=_setting(settings, "ISSUE_LOOKBACK_DAYS"),
        retention_days=_setting(settings, "ISSUE_CLEAR_RETENTION_DAYS"),
    )
    auto_close_daemon = AutoCloseDaemon(
        attendance_repo,
        break_rules_repo,
        calculator,
        tz=tz,
        close_time=_setting(settings, "AUTO_CLOSE_TIME"),
    )

    return Container(
        conn=conn,
        tz=tz,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        segments_repo=segments_repo,
        break_rules_repo=break_rules_repo,
        issue_clears_repo=issue_clears_repo,
        calculator=calculator,
        classifier=classifier,
        attendance_service=attendance_service,
        break_rule_service=break_rule_service,
        summary_service=summary_service,
        issue_service=issue_service,
        auto_close_daemon=auto_close_daemon,
    )
