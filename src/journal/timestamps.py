"""Timestamp helpers for the ``pubdate`` metadata key.

Timestamps look like ``2024-03-01 09:15:42.120 +0100``: local wall-clock time
with millisecond precision and a numeric UTC offset.
"""

from __future__ import annotations

from datetime import datetime

_PARSE_FMT = "%Y-%m-%d %H:%M:%S.%f %z"


def now() -> datetime:
    """Return the current local time, timezone-aware."""
    return datetime.now().astimezone()


def to_str(dt: datetime) -> str:
    millis = dt.microsecond // 1000
    return f"{dt:%Y-%m-%d %H:%M:%S}.{millis:03d} {dt:%z}"


def from_str(s: str) -> datetime:
    """Parse a timestamp written by :func:`to_str`; raises ``ValueError``."""
    return datetime.strptime(s.strip(), _PARSE_FMT)
