from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

import pytest

from src.time_accounting.time_accounting.attendance.model import AttendanceRecord
from src.time_accounting.time_accounting.attendance.service import AttendanceService
from src.time_accounting.time_accounting.breaks.model import BreakRule
from src.time_accounting.time_accounting.core.enums import Role
from src.time_accounting.time_accounting.issues.detector import ThresholdDiscrepancyClassifier
from src.time_accounting.time_accounting.issues.model import IssueClear
from src.time_accounting.time_accounting.issues.service import IssueService
from src.time_accounting.time_accounting.summary.service import DailySummaryService
from src.time_accounting.time_accounting.timecalc.break_overlap import SummedBreakOverlapCalculator
from src.time_accounting.time_accounting.users.model import User
from src.time_accounting.time_accounting.worklog.model import WorkSegment

JST = ZoneInfo("Asia/Tokyo")


def jst(y: int, m: int, d: int, hh: int = 0, mm: int = 0) -> datetime:
    return datetime(y, m, d, hh, mm, tzinfo=JST)


@dataclass
class InMemoryUsers:
    users_by_id: dict[int, User] = field(default_factory=dict)

    def add(self, user_id: int, role: Role, name: Optional[str] = None) -> User:
        user = User(user_id=user_id, username=f"user{user_id}", name=name, role=role)
        self.users_by_id[user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_many(self, user_ids: Iterable[int]):
        return [self.users_by_id[i] for i in user_ids if i in self.users_by_id]


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0

    def add(self, user_id: int, work_date: date, clock_in_time: str, clock_out_time: Optional[str] = None, work_minutes=None):
        self._id += 1
        self.records[self._id] = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            work_date=work_date,
            clock_in_time=clock_in_time,
            clock_out_time=clock_out_time,
            work_minutes=work_minutes,
        )
        return self.records[self._id]

    def get_by_id(self, attendance_id: int):
        return self.records.get(attendance_id)

    def get_for_user_and_date(self, user_id: int, work_date: date):
        for r in self.records.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def list_for_dates(self, work_dates):
        dates = set(work_dates)
        return [r for r in self.records.values() if r.work_date in dates]

    def list_open_for_date(self, work_date: date):
        return [r for r in self.records.values() if r.work_date == work_date and r.is_open]

    def list_closed(self):
        return [r for r in self.records.values() if not r.is_open]

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in_time: str, device=None) -> int:
        rec = self.add(user_id, work_date, clock_in_time)
        self.records[rec.attendance_id] = replace(rec, clock_in_device=device)
        return rec.attendance_id

    def close_if_open(self, *, attendance_id, clock_in_time, clock_out_time, work_minutes, device) -> bool:
        rec = self.records.get(attendance_id)
        if rec is None or not rec.is_open:
            return False
        self.records[attendance_id] = replace(
            rec,
            clock_in_time=clock_in_time,
            clock_out_time=clock_out_time,
            work_minutes=work_minutes,
            clock_out_device=device,
        )
        return True

    def update_times(self, *, attendance_id, clock_in_time, clock_out_time, work_minutes) -> bool:
        rec = self.records.get(attendance_id)
        if rec is None:
            return False
        self.records[attendance_id] = replace(
            rec, clock_in_time=clock_in_time, clock_out_time=clock_out_time, work_minutes=work_minutes
        )
        return True

    def update_work_minutes(self, *, attendance_id, work_minutes) -> bool:
        rec = self.records.get(attendance_id)
        if rec is None:
            return False
        self.records[attendance_id] = replace(rec, work_minutes=work_minutes)
        return True


class InMemorySegments:
    def __init__(self):
        self.segments: list[WorkSegment] = []

    def add(self, user_id: int, start: datetime, end: Optional[datetime]) -> WorkSegment:
        seg = WorkSegment(
            segment_id=len(self.segments) + 1,
            user_id=user_id,
            job_id=1,
            process_id=1,
            start_time=start,
            end_time=end,
        )
        self.segments.append(seg)
        return seg

    def list_started_between(self, *, user_id: int, start: datetime, end: datetime):
        return [s for s in self.segments if s.user_id == user_id and start <= s.start_time < end]


class InMemoryBreakRules:
    def __init__(self, rules: Iterable[BreakRule] = ()):
        self.rules: dict[int, BreakRule] = {r.break_rule_id: r for r in rules}

    def list_all(self):
        return sorted(self.rules.values(), key=lambda r: r.start_time)

    def list_active(self):
        return [r for r in self.list_all() if r.is_active]

    def get_by_id(self, break_rule_id: int):
        return self.rules.get(break_rule_id)

    def create(self, *, name, start_time, end_time, duration_minutes, is_active=True) -> int:
        rule_id = max(self.rules, default=0) + 1
        self.rules[rule_id] = BreakRule(rule_id, name, start_time, end_time, duration_minutes, is_active)
        return rule_id

    def update(self, *, break_rule_id, name, start_time, end_time, duration_minutes, is_active) -> bool:
        if break_rule_id not in self.rules:
            return False
        self.rules[break_rule_id] = BreakRule(break_rule_id, name, start_time, end_time, duration_minutes, is_active)
        return True


class InMemoryIssueClears:
    def __init__(self):
        self.clears: dict[tuple[int, date], IssueClear] = {}
        self._id = 0

    def get_for_user_and_date(self, *, user_id: int, work_date: date):
        return self.clears.get((user_id, work_date))

    def create(self, *, user_id, work_date, cleared_by, cleared_at) -> int:
        if (user_id, work_date) in self.clears:
            return 0
        self._id += 1
        clear_id = self._id
        self.clears[(user_id, work_date)] = IssueClear(clear_id, user_id, work_date, cleared_by, cleared_at)
        return clear_id

    def list_cleared_since(self, since: datetime):
        return [c for c in self.clears.values() if c.cleared_at > since]

    def list_all(self):
        return sorted(self.clears.values(), key=lambda c: c.cleared_at, reverse=True)

    def delete_older_than(self, cutoff: datetime) -> int:
        old = [k for k, c in self.clears.items() if c.cleared_at < cutoff]
        for k in old:
            del self.clears[k]
        return len(old)

    def delete(self, clear_id: int) -> bool:
        for key, clear in list(self.clears.items()):
            if clear.clear_id == clear_id:
                del self.clears[key]
                return True
        return False


LUNCH = BreakRule(1, "Lunch", "12:00", "13:20", 80)


@pytest.fixture
def tz():
    return JST


@pytest.fixture
def fixed_now():
    # Monday 2024-06-10 10:00 JST
    return jst(2024, 6, 10, 10, 0)


@pytest.fixture
def users():
    repo = InMemoryUsers()
    repo.add(1, Role.FIELD_WORKER, "Sato")
    repo.add(2, Role.FIELD_WORKER, "Suzuki")
    repo.add(3, Role.SALES_OFFICE, "Takahashi")
    repo.add(9, Role.ADMIN, "Admin")
    repo.add(8, Role.SUB_ADMIN, "Deputy")
    repo.add(5, Role.EXTERNAL, "Contractor")
    return repo


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def segments():
    return InMemorySegments()


@pytest.fixture
def break_rules():
    return InMemoryBreakRules([LUNCH])


@pytest.fixture
def clears():
    return InMemoryIssueClears()


@pytest.fixture
def calculator():
    return SummedBreakOverlapCalculator()


@pytest.fixture
def summary_service(attendance, segments, break_rules, users, calculator, tz):
    return DailySummaryService(attendance, segments, break_rules, users, calculator, tz=tz)


@pytest.fixture
def attendance_service(attendance, users, break_rules, calculator, tz):
    return AttendanceService(attendance, users, break_rules, calculator, tz=tz)


@pytest.fixture
def issue_service(clears, attendance, users, break_rules, summary_service, tz):
    return IssueService(
        clears,
        attendance,
        users,
        break_rules,
        summary_service,
        ThresholdDiscrepancyClassifier(60),
        tz=tz,
    )
