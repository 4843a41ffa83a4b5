from __future__ import annotations

import threading
from typing import Iterable, Optional, Sequence

from .model import User
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self, users: Iterable[User] = ()):
        self._users: dict[str, User] = {u.id: u for u in users}
        self._lock = threading.Lock()

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def list_all(self) -> Sequence[User]:
        with self._lock:
            return list(self._users.values())
