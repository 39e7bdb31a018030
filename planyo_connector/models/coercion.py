"""Value coercion helpers for Planyo's string-encoded wire fields.

Planyo encodes numbers and money amounts as JSON strings and is not always
consistent about their contents. The helpers here fall back to zero when a
string cannot be parsed, so a single malformed value never fails a whole
reservation. Each model field opts into a helper explicitly.
"""

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Union
from zoneinfo import ZoneInfo

PLANYO_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
PLANYO_TIMEZONE = ZoneInfo("Europe/London")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]{1,19}")
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


def parse_int_or_zero(value: Any) -> Any:
    """Parse a numeric string into an int, returning 0 when it is malformed.

    Only plain ASCII digits with an optional sign are accepted; whitespace,
    underscores, other Unicode digits and values outside the signed 64-bit
    range count as malformed. Non-string values are returned unchanged so
    the model's own validation still rejects nulls and wrong types.
    """
    if not isinstance(value, str):
        return value
    if not INTEGER_PATTERN.fullmatch(value):
        return 0
    parsed = int(value)
    if not INT64_MIN <= parsed <= INT64_MAX:
        return 0
    return parsed


def parse_decimal_or_zero(value: Any) -> Any:
    """Parse a numeric string into a Decimal, returning Decimal("0") when it is malformed.

    NaN and infinities are treated as malformed.
    """
    if not isinstance(value, str):
        return value
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        return Decimal("0")
    if not parsed.is_finite():
        return Decimal("0")
    return parsed


def parse_planyo_datetime(value: Any) -> datetime:
    """Parse a 'YYYY-MM-DD HH:MM:SS' string as Europe/London local time.

    Raises:
        ValueError: If the value is not a string in the expected format
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected a '{PLANYO_DATETIME_FORMAT}' string, got {type(value).__name__}")
    return datetime.strptime(value, PLANYO_DATETIME_FORMAT).replace(tzinfo=PLANYO_TIMEZONE)


def format_planyo_datetime(value: Union[datetime, str]) -> str:
    """Format a datetime for Planyo query parameters.

    Aware datetimes are converted to Europe/London first; naive ones are
    assumed to already be London local time. Strings pass through unchanged.
    """
    if isinstance(value, str):
        return value
    if value.tzinfo is not None:
        value = value.astimezone(PLANYO_TIMEZONE)
    return value.strftime(PLANYO_DATETIME_FORMAT)
