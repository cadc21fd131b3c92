import io
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi import HTTPException, UploadFile

from api.utils import file_utils, json_utils, paths, time_utils, validation


def test_safe_asset_path_allows_nested(tmp_path: Path) -> None:
    base_dir = tmp_path / "recordings"
    base_dir.mkdir()
    resolved = file_utils.safe_asset_path(base_dir, "2024/take.webm")
    assert resolved == (base_dir / "2024" / "take.webm").resolve()


def test_safe_asset_path_blocks_traversal(tmp_path: Path) -> None:
    base_dir = tmp_path / "recordings"
    base_dir.mkdir()
    with pytest.raises(HTTPException):
        file_utils.safe_asset_path(base_dir, "../secret.txt")


def test_recording_filename() -> None:
    assert (
        file_utils.recording_filename(2, ".webm", 1700000000000)
        == "placement_test_ra_2_1700000000000.webm"
    )


def test_save_recording(tmp_path: Path) -> None:
    target_dir = tmp_path / "recordings"

    upload = UploadFile(filename="take.WEBM", file=io.BytesIO(b"audio"))
    saved_path = file_utils.save_recording(upload, target_dir, 1)

    assert saved_path.exists()
    assert saved_path.name.startswith("placement_test_ra_1_")
    assert saved_path.suffix == ".webm"
    assert saved_path.read_bytes() == b"audio"


def test_save_recording_rejects_bad_uploads(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    with pytest.raises(HTTPException) as exc:
        file_utils.save_recording(
            UploadFile(filename="notes.txt", file=io.BytesIO(b"x")), tmp_path, 1
        )
    assert exc.value.status_code == 400

    with pytest.raises(HTTPException) as exc:
        file_utils.save_recording(
            UploadFile(filename="take.webm", file=io.BytesIO(b"")), tmp_path, 1
        )
    assert exc.value.status_code == 400

    monkeypatch.setattr(file_utils, "RECORDING_MAX_SIZE_BYTES", 3)
    with pytest.raises(HTTPException) as exc:
        file_utils.save_recording(
            UploadFile(filename="take.webm", file=io.BytesIO(b"toolong")), tmp_path, 1
        )
    assert exc.value.status_code == 413


def test_json_round_trip(tmp_path: Path) -> None:
    payload = {"message": "สวัสดี", "count": 2}
    dumped = json_utils.json_dump(payload)
    assert "สวัสดี" in dumped
    assert json_utils.json_load(dumped) == payload

    path = tmp_path / "payload.json"
    path.write_text(dumped, encoding="utf-8")
    assert json_utils.read_json_file(path, {}) == payload
    assert json_utils.read_json_file(tmp_path / "missing.json", {"fallback": True}) == {"fallback": True}


def test_time_utils_parsing() -> None:
    timestamp = time_utils.utc_now()
    assert timestamp.tzinfo is not None
    assert time_utils.parse_iso_timestamp(timestamp.isoformat()) is not None

    parsed_zulu = time_utils.parse_iso_timestamp("2024-01-01T12:00:00Z")
    assert parsed_zulu is not None
    assert parsed_zulu.tzinfo is not None

    assert time_utils.parse_iso_timestamp("") is None
    assert time_utils.parse_iso_timestamp(123) is None


@pytest.mark.parametrize(
    "value",
    [
        datetime(2024, 1, 1, 12, tzinfo=timezone.utc),
        datetime(2024, 1, 1, 12),
        1704110400,
        1704110400.0,
        {"seconds": 1704110400, "nanoseconds": 0},
        {"_seconds": 1704110400, "_nanoseconds": 0},
        "2024-01-01T12:00:00Z",
        "2024-01-01T19:00:00+07:00",
    ],
)
def test_to_utc_datetime_accepts_every_time_shape(value) -> None:
    assert time_utils.to_utc_datetime(value) == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [None, True, "not a date", {"seconds": "x"}, []])
def test_to_utc_datetime_rejects_unknown(value) -> None:
    assert time_utils.to_utc_datetime(value) is None


def test_format_local_uses_timezone() -> None:
    value = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    assert time_utils.format_local(value, "Asia/Bangkok") == "January 01, 2024 07:00 PM"


def test_paths_helpers(tmp_path: Path) -> None:
    reference = paths.recording_reference(tmp_path / "a.webm")
    assert reference == "recordings/a.webm"
    assert paths.recording_url(reference) == "/api/recordings/a.webm"
    assert paths.recording_url("cat,dog") is None


def test_validate_id() -> None:
    assert validation.validate_id("test", "abc") == "abc"
    with pytest.raises(HTTPException):
        validation.validate_id("test", "")
    with pytest.raises(HTTPException):
        validation.validate_id("test", "../bad")
