from datetime import datetime, timezone

import pytest
import requests

from api import config
from api.models.db.submission import Submission
from api.services import notification_service


def make_submission() -> Submission:
    return Submission(
        id="sub-1",
        full_name="Ann Lee",
        email="ann@example.com",
        phone="0812345678",
        target=65,
        notes="",
        created_at=datetime(2024, 1, 1, 12, tzinfo=timezone.utc),
    )


class FakeResponse:
    def __init__(self, status_code: int = 204):
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    instances: list["FakeSession"] = []
    status_code = 204

    def __init__(self):
        self.headers = {}
        self.calls = []
        FakeSession.instances.append(self)

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        return FakeResponse(self.status_code)


@pytest.fixture(autouse=True)
def fake_session(monkeypatch: pytest.MonkeyPatch):
    FakeSession.instances = []
    FakeSession.status_code = 204
    monkeypatch.setattr(notification_service.requests, "Session", FakeSession)
    monkeypatch.setattr(config, "PUBLIC_BASE_URL", "https://tests.example.com")
    monkeypatch.setattr(config, "NOTIFY_TIMEZONE", "Asia/Bangkok")
    monkeypatch.setattr(config, "NOTIFY_TIMEOUT_SECONDS", 5)
    return FakeSession


def test_discord_payload() -> None:
    payload = notification_service.build_discord_payload(make_submission())
    embed = payload["embeds"][0]
    assert embed["color"] == 0xFC5D01
    fields = {field["name"]: field["value"] for field in embed["fields"]}
    assert fields["Student Name"] == "Ann Lee"
    assert fields["Target Score"] == "65"
    assert fields["Submission Time"] == "January 01, 2024 07:00 PM"
    assert "https://tests.example.com/submissions/sub-1" in fields["View Submission"]


def test_send_discord_posts_to_webhook(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_URL", "https://discord.example/hook")

    notification_service.send_discord(make_submission())

    (session,) = FakeSession.instances
    url, body, timeout = session.calls[0]
    assert url == "https://discord.example/hook"
    assert body["embeds"][0]["title"] == "New Placement Test Submission"
    assert timeout == 5


def test_send_discord_requires_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_URL", None)
    with pytest.raises(notification_service.NotificationError):
        notification_service.send_discord(make_submission())
    assert FakeSession.instances == []


def test_send_email_uses_sendgrid(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "SENDGRID_API_KEY", "sg-key")
    monkeypatch.setattr(config, "ADMIN_EMAILS", ["a@example.com", "b@example.com"])
    monkeypatch.setattr(config, "EMAIL_SENDER", "admin@example.com")

    notification_service.send_email(make_submission())

    (session,) = FakeSession.instances
    assert session.headers["Authorization"] == "Bearer sg-key"
    url, body, _ = session.calls[0]
    assert url == config.SENDGRID_API_URL
    assert body["subject"] == "Ann Lee | 65 - New Placement Test Submission"
    assert body["personalizations"][0]["to"] == [
        {"email": "a@example.com"},
        {"email": "b@example.com"},
    ]
    assert body["from"]["email"] == "admin@example.com"


def test_provider_errors_become_notification_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_URL", "https://discord.example/hook")
    FakeSession.status_code = 500
    with pytest.raises(notification_service.NotificationError):
        notification_service.send_discord(make_submission())


def test_notifications_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_URL", None)
    monkeypatch.setattr(config, "SENDGRID_API_KEY", "sg-key")
    monkeypatch.setattr(config, "ADMIN_EMAILS", [])
    assert notification_service.notifications_enabled() is False

    monkeypatch.setattr(config, "ADMIN_EMAILS", ["a@example.com"])
    assert notification_service.notifications_enabled() is True
