from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_hhmm, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..timecalc.interval_math import wrapped_duration
from .model import BreakRule
from .repository import BreakRuleRepository

logger = logging.getLogger(__name__)


def derive_duration(start_time: str, end_time: str) -> int:
    """Minutes from start to end, wrapping past midnight when end < start."""
    start = parse_hhmm(start_time)
    end = parse_hhmm(end_time)
    if start is None or end is None:
        return 0
    return wrapped_duration(start, end)


class BreakRuleService:
    """Administration of break rules. Rules are switched off, never deleted."""

    def __init__(self, rules: BreakRuleRepository):
        self._rules = rules

    def list_rules(self) -> Sequence[BreakRule]:
        return self._rules.list_all()

    def list_active(self) -> Sequence[BreakRule]:
        return self._rules.list_active()

    def create_rule(
        self,
        *,
        current_role: Role,
        name: str,
        start_time: str,
        end_time: str,
        is_active: bool = True,
    ) -> int:
        self._require_admin(current_role)
        name, start_time, end_time, duration = self._validated(name, start_time, end_time)

        rule_id = self._rules.create(
            name=name,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration,
            is_active=bool(is_active),
        )
        logger.info("break rule %s created: %s %s-%s (%s min)", rule_id, name, start_time, end_time, duration)
        return rule_id

    def update_rule(
        self,
        *,
        current_role: Role,
        break_rule_id: int,
        name: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> BreakRule:
        """Partial update; omitted fields keep their stored value."""
        self._require_admin(current_role)
        rule = self._get(break_rule_id)

        name, start_time, end_time, duration = self._validated(
            rule.name if name is None else name,
            rule.start_time if start_time is None else start_time,
            rule.end_time if end_time is None else end_time,
        )
        active = rule.is_active if is_active is None else bool(is_active)

        self._rules.update(
            break_rule_id=rule.break_rule_id,
            name=name,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration,
            is_active=active,
        )
        return BreakRule(
            break_rule_id=rule.break_rule_id,
            name=name,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration,
            is_active=active,
        )

    def set_active(self, *, current_role: Role, break_rule_id: int, is_active: bool) -> BreakRule:
        return self.update_rule(current_role=current_role, break_rule_id=break_rule_id, is_active=is_active)

    def _get(self, break_rule_id: int) -> BreakRule:
        rule = self._rules.get_by_id(int(break_rule_id))
        if not rule:
            raise NotFoundError("Break rule not found")
        return rule

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change break rules")

    @staticmethod
    def _validated(name: str, start_time: str, end_time: str) -> tuple[str, str, str, int]:
        name = require_non_empty(name, "Name")
        start_time = require_hhmm(start_time, "Start time")
        end_time = require_hhmm(end_time, "End time")
        duration = derive_duration(start_time, end_time)
        if duration <= 0:
            raise ValidationError("Break must be longer than zero minutes")
        return name, start_time, end_time, duration
