from datetime import date, datetime

import pytest
import requests

from attendflow.audit.model import AuditLog
from attendflow.core.enums import AttendanceStatus, AuditAction
from attendflow.core.exceptions import LLMNotConfiguredError, ValidationError
from attendflow.insights.client import GeminiClient, LLMConfig
from attendflow.insights.prompts import MISSING_KEY_MESSAGE, PROVIDER_FAILURE_MESSAGE
from attendflow.insights.service import InsightsService, build_context

NOW = datetime(2024, 3, 20, 12, 0)


class FakeClient:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate_text(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status
        self.text = str(payload)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}", response=self)

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def data(student, teacher, make_record):
    records = [
        make_record(student.id, date(2024, 3, 20), AttendanceStatus.PRESENT, "07:50"),
        make_record(student.id, date(2024, 3, 15), AttendanceStatus.LATE, "09:05"),
        make_record(student.id, date(2024, 2, 1), AttendanceStatus.ABSENT),
    ]
    logs = [AuditLog.new(action=AuditAction.USER_LOGIN, performed_by="Mike Ross", timestamp=NOW, details="x")]
    return records, [student, teacher], logs


def test_missing_key_returns_fixed_message(data):
    assert InsightsService(None).answer("How are we doing?", *data, now=NOW) == MISSING_KEY_MESSAGE


def test_empty_query_is_rejected(data):
    with pytest.raises(ValidationError):
        InsightsService(FakeClient("hi")).answer("  ", *data, now=NOW)


def test_prompt_contains_query_and_context(data):
    client = FakeClient("## Summary\nAll good.")

    answer = InsightsService(client).answer("Who is late?", *data, now=NOW)

    assert answer == "## Summary\nAll good."
    prompt = client.prompts[0]
    assert 'User Query:** "Who is late?"' in prompt
    assert "AI analyst for a student attendance CRM system" in prompt
    assert '"attendance_rate"' in prompt


@pytest.mark.parametrize("client", [FakeClient(None), FakeClient(error=RuntimeError("quota"))])
def test_provider_failure_returns_apology(data, client):
    assert InsightsService(client).answer("Trends?", *data, now=NOW) == PROVIDER_FAILURE_MESSAGE


def test_build_context_windows(data):
    ctx = build_context(*data, now=NOW)

    assert ctx["today"]["total_check_ins"] == 1
    assert ctx["today"]["present"] == 1
    assert ctx["last_7_days"] == {"total_records": 2, "attendance_rate": 100}
    assert ctx["last_30_days"]["total_records"] == 2
    assert ctx["summary"]["students"] == 1
    assert ctx["summary"]["teachers"] == 1
    assert ctx["department_breakdown"] == {"Computer Science": 1}
    assert ctx["sample_records"][0]["date"] == "2024-03-20"
    assert ctx["recent_logs"][0]["action"] == "USER_LOGIN"


def test_gemini_client_requires_key():
    with pytest.raises(LLMNotConfiguredError):
        GeminiClient(LLMConfig(api_key=None))


def test_gemini_client_extracts_text():
    payload = {"candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "there"}]}}]}
    session = FakeSession(FakeResponse(payload))
    client = GeminiClient(LLMConfig(api_key="k", model="gemini-2.5-flash", timeout=3), session=session)

    assert client.generate_text("prompt") == "Hello there"
    url, kwargs = session.calls[0]
    assert url.endswith("/models/gemini-2.5-flash:generateContent")
    assert kwargs["params"] == {"key": "k"}
    assert kwargs["timeout"] == 3
    assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "prompt"


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(FakeResponse({"error": "bad key"}, status=403)),
        FakeSession(error=requests.ConnectionError("offline")),
        FakeSession(FakeResponse({"candidates": []})),
    ],
)
def test_gemini_client_failures_return_none(session):
    client = GeminiClient(LLMConfig(api_key="k"), session=session)
    assert client.generate_text("prompt") is None
