from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_many(self, user_ids: Iterable[int]) -> Sequence[User]:
        raise NotImplementedError
