import re
from datetime import UTC, datetime

ISO8601_MICRO = "%Y-%m-%dT%H:%M:%S.%fZ"

RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})"
)


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure the provided datetime is in UTC timezone.

    Args:
        dt: A datetime object.

    Returns:
        A datetime object in UTC timezone.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_utc_microseconds_iso_format(dt: datetime) -> str:
    """
    Convert a datetime object to RFC3339 with microseconds YYYY-MM-DDTHH:MM:SS.mmmmmmZ.

    Args:
        dt: A datetime object.

    Returns:
        A string representing the datetime in UTC with microseconds.
    """
    return ensure_utc(dt).strftime(ISO8601_MICRO)


def from_rfc3339(value: str) -> datetime:
    """
    Parse a RFC3339 timestamp as written by the kubernetes API server.

    Seconds, microseconds and nanoseconds precision are accepted. Fractions
    with more than six digits are truncated to microseconds.

    Args:
        value: A RFC3339 formatted string.
    Returns:
        A datetime object in UTC timezone.
    """
    error = f"Unable to parse {value} as RFC3339, RFC3339Micro or RFC3339Nano"
    m = RFC3339_RE.fullmatch(value)
    if not m:
        raise ValueError(error)
    fraction = m.group("fraction")
    normalized = m.group("base")
    if fraction:
        normalized += "." + (fraction + "000000")[:6]
    offset = m.group("offset")
    normalized += "+00:00" if offset == "Z" else offset
    try:
        return ensure_utc(datetime.fromisoformat(normalized))
    except ValueError:
        # out of range fields, e.g. month 13
        raise ValueError(error) from None
