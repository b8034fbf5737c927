from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import BreakRule


class BreakRuleRepository(Protocol):
    def list_all(self) -> Sequence[BreakRule]:
        raise NotImplementedError

    def list_active(self) -> Sequence[BreakRule]:
        raise NotImplementedError

    def get_by_id(self, break_rule_id: int) -> Optional[BreakRule]:
        raise NotImplementedError

    def create(self, *, name: str, start_time: str, end_time: str, duration_minutes: int, is_active: bool = True) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        break_rule_id: int,
        name: str,
        start_time: str,
        end_time: str,
        duration_minutes: int,
        is_active: bool,
    ) -> bool:
        raise NotImplementedError
