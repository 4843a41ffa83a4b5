from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..audit.model import AuditLog
from ..audit.repository import AuditLogRepository
from ..common.validators import require_non_empty
from ..core.enums import AuditAction, Role
from ..core.exceptions import AuthenticationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: pick an identity (login) and resolve it on later requests.

    There is no password; the login screen offers a list of users.
    """

    def __init__(self, users: UserRepository, audit: AuditLogRepository):
        self._users = users
        self._audit = audit

    def list_users(self) -> List[User]:
        # Staff first, then students, each alphabetically.
        return sorted(self._users.list_all(), key=lambda u: (u.role == Role.STUDENT, u.name))

    def login(self, user_id: str, *, now: datetime) -> User:
        user_id = require_non_empty(user_id or "", "user_id")
        user = self._users.get_by_id(user_id)
        if not user:
            raise AuthenticationError("Unknown user")

        self._audit.append(
            AuditLog.new(
                action=AuditAction.USER_LOGIN,
                performed_by=user.name,
                timestamp=now,
                details=f"User {user.email} logged in successfully.",
            )
        )
        logger.info("User %s (%s) logged in", user.id, user.role.value)
        return user

    def current_user(self, user_id: Optional[str]) -> User:
        if not user_id:
            raise AuthenticationError("Not logged in")
        user = self._users.get_by_id(user_id)
        if not user:
            raise AuthenticationError("Session user no longer exists")
        return user
