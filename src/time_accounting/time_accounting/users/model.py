from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Read-only view of a user; accounts are managed elsewhere."""

    user_id: int
    username: str
    name: Optional[str]
    role: Role

    @property
    def display_name(self) -> str:
        return self.name or self.username
