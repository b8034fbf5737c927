from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BreakRule:
    """A named daily break window, "HH:MM" to "HH:MM" in the operating timezone."""

    break_rule_id: int
    name: str
    start_time: str
    end_time: str
    duration_minutes: int
    is_active: bool = True
