from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Department, Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no data-access code. Identity comes from the
    session; there is no credential to verify.
    """

    id: str
    name: str
    email: str
    role: Role
    department: Department
    avatar_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department.value,
            "avatar_url": self.avatar_url,
        }
