"""Service for notifying staff about new submissions (Discord and email)."""
from __future__ import annotations

import logging
from typing import Any

import requests

from api import config
from api.database import SessionLocal
from api.models.db.submission import Submission
from api.utils import format_local

logger = logging.getLogger(__name__)

EMBED_COLOR = 0xFC5D01
SENDER_NAME = "PTE Intensive Admin"
TEAM_NAME = "PTE Intensive Team"


class NotificationError(RuntimeError):
    """Raised when a notification channel is unavailable or rejects a message."""


def submission_link(submission: Submission) -> str:
    return f"{config.PUBLIC_BASE_URL}/submissions/{submission.id}"


def _submission_time(submission: Submission) -> str:
    return format_local(submission.created_at, config.NOTIFY_TIMEZONE)


def build_discord_payload(submission: Submission) -> dict[str, Any]:
    """Build the Discord webhook embed for a submission."""
    return {
        "embeds": [
            {
                "title": "New Placement Test Submission",
                "description": "A new placement test has been submitted",
                "color": EMBED_COLOR,
                "fields": [
                    {"name": "Student Name", "value": submission.full_name, "inline": True},
                    {"name": "Target Score", "value": str(submission.target), "inline": True},
                    {"name": "Email", "value": submission.email, "inline": False},
                    {"name": "Phone", "value": submission.phone, "inline": False},
                    {
                        "name": "Submission Time",
                        "value": _submission_time(submission),
                        "inline": False,
                    },
                    {
                        "name": "View Submission",
                        "value": f"[Click here to view details]({submission_link(submission)})",
                        "inline": False,
                    },
                ],
                "footer": {"text": TEAM_NAME},
            }
        ]
    }


def build_email_message(submission: Submission) -> dict[str, Any]:
    """Build the SendGrid v3 mail/send body for a submission."""
    submitted = _submission_time(submission)
    text = (
        "New Placement Test Submission\n\n"
        f"Student Name: {submission.full_name}\n"
        f"Email: {submission.email}\n"
        f"Phone: {submission.phone}\n"
        f"Target Score: {submission.target}\n"
        f"Submission Time: {submitted}\n"
        f"Details: {submission_link(submission)}\n"
    )
    html = (
        '<div style="font-family: Arial, sans-serif; padding: 20px;">'
        "<h2>A new placement test has been submitted</h2>"
        f"<p><strong>Student Name:</strong> {submission.full_name}</p>"
        f"<p><strong>Email:</strong> {submission.email}</p>"
        f"<p><strong>Phone:</strong> {submission.phone}</p>"
        f"<p><strong>Target Score:</strong> {submission.target}</p>"
        f"<p><strong>Submission Time:</strong> {submitted}</p>"
        f'<p><a href="{submission_link(submission)}">View details</a></p>'
        f"<p>{TEAM_NAME}</p>"
        "</div>"
    )
    return {
        "personalizations": [
            {"to": [{"email": address} for address in config.ADMIN_EMAILS]}
        ],
        "from": {"email": config.EMAIL_SENDER, "name": SENDER_NAME},
        "reply_to": {"email": config.EMAIL_SENDER},
        "subject": (
            f"{submission.full_name} | {submission.target} - New Placement Test Submission"
        ),
        "content": [
            {"type": "text/plain", "value": text},
            {"type": "text/html", "value": html},
        ],
    }


def _check_response(channel: str, response: requests.Response) -> None:
    try:
        response.raise_for_status()
    except requests.HTTPError as exc:
        raise NotificationError(f"{channel} rejected the message: {exc}") from exc


def send_discord(submission: Submission) -> None:
    """Post the submission embed to the configured Discord webhook."""
    if not config.DISCORD_WEBHOOK_URL:
        raise NotificationError("Discord webhook URL is not configured")

    session = requests.Session()
    try:
        response = session.post(
            config.DISCORD_WEBHOOK_URL,
            json=build_discord_payload(submission),
            timeout=config.NOTIFY_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        raise NotificationError(f"Discord webhook failed: {exc}") from exc
    _check_response("Discord", response)
    logger.info("Discord notification sent for submission %s", submission.id)


def send_email(submission: Submission) -> None:
    """Email the admins about the submission through SendGrid."""
    if not config.SENDGRID_API_KEY:
        raise NotificationError("SendGrid API key is not configured")
    if not config.ADMIN_EMAILS:
        raise NotificationError("No admin emails configured")

    session = requests.Session()
    session.headers.update({"Authorization": f"Bearer {config.SENDGRID_API_KEY}"})
    try:
        response = session.post(
            config.SENDGRID_API_URL,
            json=build_email_message(submission),
            timeout=config.NOTIFY_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        raise NotificationError(f"Email sending failed: {exc}") from exc
    _check_response("SendGrid", response)
    logger.info("Email notification sent for submission %s", submission.id)


def notifications_enabled() -> bool:
    return bool(
        config.DISCORD_WEBHOOK_URL or (config.SENDGRID_API_KEY and config.ADMIN_EMAILS)
    )


def notify_new_submission(submission_id: str) -> None:
    """Send every configured notification; failures are only logged."""
    db = SessionLocal()
    try:
        submission = db.get(Submission, submission_id)
        if submission is None:
            logger.error("Cannot notify about missing submission %s", submission_id)
            return

        if config.DISCORD_WEBHOOK_URL:
            try:
                send_discord(submission)
            except NotificationError as e:
                logger.error(f"Failed to send Discord notification: {e}")
        if config.SENDGRID_API_KEY and config.ADMIN_EMAILS:
            try:
                send_email(submission)
            except NotificationError as e:
                logger.error(f"Failed to send email notification: {e}")
    finally:
        db.close()
