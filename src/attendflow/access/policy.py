"""Role based view access.

A declarative table maps each view to the roles allowed to open it; the
helpers below are pure lookups against that table.
"""

from __future__ import annotations

from typing import List, Mapping, FrozenSet

from ..core.enums import Role, View

VIEW_PERMISSIONS: Mapping[View, FrozenSet[Role]] = {
    View.DASHBOARD: frozenset(Role),
    View.ATTENDANCE: frozenset({Role.SUPER_ADMIN, Role.ADMIN, Role.HOD, Role.TEACHER}),
    View.INSIGHTS: frozenset({Role.SUPER_ADMIN, Role.ADMIN, Role.HOD}),
    View.AUDIT: frozenset({Role.SUPER_ADMIN}),
    View.USERS: frozenset({Role.SUPER_ADMIN, Role.ADMIN}),
    View.REPORTS: frozenset({Role.STUDENT}),
}

CHECK_IN_ROLES: FrozenSet[Role] = frozenset({Role.STUDENT, Role.TEACHER})


def is_view_allowed(role: Role, view: View) -> bool:
    return role in VIEW_PERMISSIONS.get(view, frozenset())


def allowed_views(role: Role) -> List[View]:
    """Views for `role`, in navigation order."""
    return [view for view in View if is_view_allowed(role, view)]


def can_check_in(role: Role) -> bool:
    return role in CHECK_IN_ROLES
