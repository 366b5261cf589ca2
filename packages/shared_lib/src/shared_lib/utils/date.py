import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the catalog's timestamp format)."""
    return utc_now().isoformat()


def parse_timestamp(value: str | int | float | datetime | None) -> datetime:
    """
    Parse a timestamp from the formats the catalog and stats API emit.

    ## Parameters
    - `value`: ISO string (e.g. "2024-12-22T10:30:00Z"), Unix timestamp in
      seconds or milliseconds, a datetime, or None.

    ## Returns
    - A timezone-aware UTC datetime. Naive values are assumed to be UTC.
    - `EPOCH` when the value is missing or malformed.

    ## Design Notes
    Gracefully handles malformed timestamps by logging and returning EPOCH,
    so one bad row sorts last instead of breaking a whole ranking.
    """
    if value is None or value == "":
        return EPOCH

    try:
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, (int, float)):
            # 13-digit values are milliseconds
            seconds = value / 1000 if value > 1e11 else value
            dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
        else:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, OSError, OverflowError, TypeError, AttributeError) as e:
        logger.error(f"Failed to parse timestamp '{value}': {e}")
        return EPOCH

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
