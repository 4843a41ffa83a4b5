import pytest

from attendflow.audit.memory_audit_repository import InMemoryAuditLogRepository
from attendflow.core.enums import AuditAction
from attendflow.core.exceptions import AuthenticationError, ValidationError
from attendflow.users.memory_user_repository import InMemoryUserRepository
from attendflow.users.service import SessionService


@pytest.fixture
def audit():
    return InMemoryAuditLogRepository()


@pytest.fixture
def sessions(student, teacher, super_admin, audit):
    return SessionService(InMemoryUserRepository([student, teacher, super_admin]), audit)


def test_login_records_audit_entry(sessions, audit, student, fixed_now):
    user = sessions.login(student.id, now=fixed_now)

    assert user == student
    entry = audit.list_recent(1)[0]
    assert entry.action == AuditAction.USER_LOGIN
    assert entry.details == f"User {student.email} logged in successfully."
    assert entry.timestamp == fixed_now


def test_login_with_unknown_or_blank_id(sessions, fixed_now):
    with pytest.raises(AuthenticationError):
        sessions.login("nobody", now=fixed_now)
    with pytest.raises(ValidationError):
        sessions.login("   ", now=fixed_now)


def test_current_user_requires_session(sessions, teacher):
    assert sessions.current_user(teacher.id) == teacher
    with pytest.raises(AuthenticationError):
        sessions.current_user(None)


def test_list_users_puts_staff_first(sessions):
    names = [u.name for u in sessions.list_users()]
    assert names == ["Eleanor Rigby", "Mike Ross", "Alex Smith"]
