"""Application configuration and constants."""
import os
import sys
from pathlib import Path


def _resource_path(relative: str) -> Path:
    """Get path to resource, works for PyInstaller bundles."""
    if getattr(sys, "frozen", False):
        base_dir = Path(sys._MEIPASS)
    else:
        base_dir = Path(__file__).resolve().parent.parent
    return base_dir / relative


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_list_env(name: str) -> list[str]:
    """Parse comma-separated list from environment variable."""
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


# Directories
RECORDINGS_DIR = Path(
    os.environ.get("RECORDINGS_DIR", Path.cwd() / "data" / "recordings")
)
RECORDINGS_DIR.mkdir(parents=True, exist_ok=True)

STATIC_DIR = _resource_path("static")

# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'placement.db'}"
)

# Test paper
QUESTIONS_PER_TYPE = _parse_int_env("QUESTIONS_PER_TYPE", 3)
READ_ALOUD_PREP_SECONDS = _parse_int_env("READ_ALOUD_PREP_SECONDS", 35)
READ_ALOUD_RECORD_SECONDS = _parse_int_env("READ_ALOUD_RECORD_SECONDS", 40)

# Review dashboard
SUBMISSIONS_PER_PAGE = _parse_int_env("SUBMISSIONS_PER_PAGE", 20)
REVIEWER_API_KEY = os.environ.get("REVIEWER_API_KEY") or None

# Recordings
RECORDING_MAX_SIZE_BYTES = 20 * 1024 * 1024  # 20 MB
RECORDING_ALLOWED_EXTENSIONS = {".webm", ".ogg", ".mp4", ".m4a", ".wav", ".mp3"}

# Notifications
DISCORD_WEBHOOK_URL = os.environ.get("DISCORD_WEBHOOK_URL") or None
SENDGRID_API_KEY = os.environ.get("SENDGRID_API_KEY") or None
SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"
ADMIN_EMAILS = _parse_list_env("ADMIN_EMAILS")
EMAIL_SENDER = os.environ.get("EMAIL_USER", "admin@pteintensive.com")
PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
NOTIFY_TIMEZONE = os.environ.get("NOTIFY_TIMEZONE", "Asia/Bangkok")
NOTIFY_TIMEOUT_SECONDS = _parse_int_env("NOTIFY_TIMEOUT_SECONDS", 10)
