import json
import logging
import uuid
from dataclasses import is_dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .clock import Clock, DEFAULT_CLOCK
from .columns import DATETIME_FORMAT
from .exceptions import DecodeError, EncodeError

logger = logging.getLogger(__name__)


def new_record_id() -> str:
    """Generate a new unique 32 character ID for records."""
    return uuid.uuid4().hex


def prepare_for_storage(data: Any) -> Any:
    """
    Recursively convert Pydantic models, dataclasses, and special types to JSON-compatible values.

    It handles:
    - Pydantic BaseModel instances (dumped in JSON mode with field aliases)
    - Python dataclasses
    - Dictionaries (processing values recursively)
    - Lists, tuples and sets (processing each item; sets become lists)
    - datetime objects (formatted like the timestamp columns)

    Args:
        data: The data to convert

    Returns:
        The converted data, ready for JSON encoding
    """
    if data is None:
        return None

    if is_dataclass(data) and not isinstance(data, type):
        return prepare_for_storage(asdict(data))

    if hasattr(data, "model_dump") and callable(getattr(data, "model_dump")):
        return prepare_for_storage(data.model_dump(mode="json", by_alias=True))

    if isinstance(data, dict):
        return {k: prepare_for_storage(v) for k, v in data.items()}

    if isinstance(data, (list, tuple)):
        return [prepare_for_storage(item) for item in data]

    if isinstance(data, set):
        return [prepare_for_storage(item) for item in data]

    if isinstance(data, datetime):
        return format_datetime(data)

    # Pydantic URL types and similar
    if data.__class__.__module__ == "pydantic.networks":
        return str(data)

    return data


def to_json(value: Any, column: str) -> str:
    """
    Serialize a value to the compact JSON stored in `column`.

    Keys are sorted and no whitespace is emitted, so the stored text is
    stable for substring searches (e.g. '"status":"approved"').

    Raises:
        EncodeError: If the value cannot be represented as JSON.
    """
    try:
        return json.dumps(
            prepare_for_storage(value),
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise EncodeError(column, f"Value for column '{column}' cannot be serialized to JSON: {e}") from e


def from_json_object(text: str, column: str) -> Optional[dict]:
    """
    Decode the JSON object stored in `column`. Returns None for an empty string.

    Raises:
        DecodeError: If the text is not valid JSON or not a JSON object.
    """
    if text == "":
        return None
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(column, f"Stored value of column '{column}' is not valid JSON: {e}") from e
    if not isinstance(decoded, dict):
        raise DecodeError(
            column,
            f"Stored value of column '{column}' must be a JSON object, got {type(decoded).__name__}.",
        )
    return decoded


def format_datetime(value: datetime) -> str:
    """Format a datetime as a UTC timestamp string. Naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(DATETIME_FORMAT)


def parse_datetime(text: str) -> datetime:
    """
    Parse a stored timestamp into an aware UTC datetime.

    Accepts the storage format ('2024-01-31 12:00:00') as well as ISO 8601
    with 'T', millisecond or microsecond fractions and offsets.

    Raises:
        ValueError: If the text is not a recognised timestamp.
    """
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def now_datetime_string(clock: Optional[Clock] = None) -> str:
    """Current instant of `clock` (system clock by default) in storage format."""
    return format_datetime((clock or DEFAULT_CLOCK).now())


def stringify_value(value: Any) -> str:
    """Convert a driver value to the string form records hold."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def row_to_strings(row: Any) -> Dict[str, str]:
    """Convert a mapping-like driver row into a column-to-string dict."""
    return {key: stringify_value(row[key]) for key in row.keys()}
