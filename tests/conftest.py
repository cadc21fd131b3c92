import os
import tempfile
from pathlib import Path

import pytest

# api.config creates its directories on import
_DATA_DIR = Path(tempfile.mkdtemp(prefix="placement-test-"))
os.environ.setdefault("DB_DIR", str(_DATA_DIR))
os.environ.setdefault("RECORDINGS_DIR", str(_DATA_DIR / "recordings"))
for _name in ("REVIEWER_API_KEY", "DISCORD_WEBHOOK_URL", "SENDGRID_API_KEY", "ADMIN_EMAILS"):
    os.environ.pop(_name, None)

from models import (  # noqa: E402
    NumberedQuestion,
    ReadAloudQuestion,
    RFIBQuestion,
    RWFIBQuestion,
    WFDQuestion,
)


@pytest.fixture
def paper() -> list[NumberedQuestion]:
    """One question of each type, numbered like a test paper."""
    return [
        NumberedQuestion(1, ReadAloudQuestion(id="ra-1", content="Read this aloud.")),
        NumberedQuestion(
            4,
            RWFIBQuestion(
                id="rw-1",
                content="I like to _____ every day.",
                options={"0": ["run", "ran", "runs", "running"]},
                correct_answers=["run"],
            ),
        ),
        NumberedQuestion(
            7,
            RFIBQuestion(
                id="rf-1",
                content="The sky is _____ and the rose is _____.",
                options=["blue", "red", "green"],
                correct_answers=["blue", "red"],
            ),
        ),
        NumberedQuestion(10, WFDQuestion(id="wfd-1", text="The cat sat.")),
    ]
