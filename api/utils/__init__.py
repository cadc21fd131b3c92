"""Utility modules."""
from api.utils.file_utils import recording_filename, safe_asset_path, save_recording
from api.utils.json_utils import json_dump, json_load, read_json_file
from api.utils.paths import recording_reference, recording_url
from api.utils.time_utils import format_local, parse_iso_timestamp, to_utc_datetime, utc_now
from api.utils.validation import validate_id

__all__ = [
    "recording_filename",
    "safe_asset_path",
    "save_recording",
    "json_dump",
    "json_load",
    "read_json_file",
    "recording_reference",
    "recording_url",
    "format_local",
    "parse_iso_timestamp",
    "to_utc_datetime",
    "utc_now",
    "validate_id",
]
