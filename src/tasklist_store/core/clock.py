# src/tasklist_store/core/clock.py

"""
Time helpers.

Stored timestamps come in two shapes:
- integer ticks (100ns intervals since 0001-01-01T00:00:00 UTC) for task and note fields,
- round-trip text ("2024-05-01T10:20:30.1234567Z") for the attachment ledger.
"""

from __future__ import annotations

import re
import uuid
from datetime import UTC, datetime, timedelta

TICKS_PER_SECOND = 10_000_000
TICKS_PER_MICROSECOND = 10

_EPOCH = datetime(1, 1, 1, tzinfo=UTC)

_ROUND_TRIP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d{1,7}))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?$"
)


def to_ticks(dt: datetime) -> int:
    """Convert a datetime to ticks. Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    delta = dt.astimezone(UTC) - _EPOCH
    return (
        (delta.days * 86400 + delta.seconds) * TICKS_PER_SECOND
        + delta.microseconds * TICKS_PER_MICROSECOND
    )


def from_ticks(ticks: int) -> datetime:
    return _EPOCH + timedelta(microseconds=int(ticks) // TICKS_PER_MICROSECOND)


def format_round_trip(dt: datetime) -> str:
    """Format as UTC with seven fractional digits, e.g. 2024-05-01T10:20:30.1234560Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    dt = dt.astimezone(UTC)
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{dt.microsecond * TICKS_PER_MICROSECOND:07d}Z"


def parse_round_trip(raw: str) -> datetime:
    """
    Parse a round-trip timestamp into an aware UTC datetime.

    Accepts up to seven fractional digits (sub-microsecond digits are truncated)
    and either "Z" or a numeric offset. A missing offset means UTC.
    Raises ValueError on anything else.
    """
    m = _ROUND_TRIP_RE.match((raw or "").strip())
    if not m:
        raise ValueError(f"invalid timestamp: {raw!r}")

    frac = (m.group("frac") or "").ljust(6, "0")[:6]
    tz = m.group("tz") or "Z"
    if tz == "Z":
        tz = "+00:00"

    dt = datetime.fromisoformat(f"{m.group('base')}.{frac}{tz}")
    return dt.astimezone(UTC)


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)


class Uuid4Generator:
    def new_id(self) -> uuid.UUID:
        return uuid.uuid4()
