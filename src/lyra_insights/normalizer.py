"""
Series normalizer for Lyra Insights.

PURPOSE: Turn raw, heterogeneous samples into a canonical Series.
AI CONTEXT: Pure data processing - no I/O. Invalid samples are logged and
dropped, never raised.

ACCEPTED RAW SHAPES:
- Sample instances
- Mappings with a timestamp key ("timestamp", "date", "created_at",
  "createdAt") and a value key ("value", "amount", "temperature", "mood")
- (timestamp, value) pairs

ACCEPTED TIMESTAMPS:
- datetime (naive values are read in the configured local zone)
- date (midnight in the configured local zone)
- ISO 8601 strings, with or without a trailing "Z"
- Epoch milliseconds (int or float)

SERIES INVARIANTS:
- One sample per local calendar day; the latest original timestamp wins,
  later insertion wins on equal timestamps
- Ascending by day
- Finite values only

USAGE:
    series = normalize([
        {"date": "2026-03-01T08:00:00Z", "mood": "good"},
        {"date": "2026-03-01T21:00:00Z", "mood": "great"},
    ])
    # -> [Sample(2026-03-01T21:00:00+00:00, 9.0)]
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime, time, tzinfo
from typing import Any

from .config import Config
from .models import Sample

__all__ = [
    "normalize",
    "daily_totals",
    "mood_series",
    "parse_timestamp",
    "parse_value",
    "local_day",
]

logger = logging.getLogger(__name__)

TIMESTAMP_KEYS = ("timestamp", "date", "created_at", "createdAt")
VALUE_KEYS = ("value", "amount", "temperature", "mood")


def _attach_zone(moment: datetime, zone: tzinfo | None) -> datetime:
    if moment.tzinfo is not None:
        return moment
    if zone is None:
        return moment.astimezone()
    return moment.replace(tzinfo=zone)


def parse_timestamp(raw: Any, zone: tzinfo | None = None) -> datetime | None:
    """
    Parse a raw timestamp into a timezone-aware datetime.

    Args:
        raw: datetime, date, ISO 8601 string or epoch milliseconds.
        zone: Zone for naive values. None means the system local zone.

    Returns:
        Aware datetime, or None when the value is unparsable or non-finite.

    Example:
        >>> parse_timestamp("2026-03-01T09:30:00Z")
        datetime.datetime(2026, 3, 1, 9, 30, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp(float("nan")) is None
        True
    """
    if isinstance(raw, datetime):
        return _attach_zone(raw, zone)
    if isinstance(raw, date):
        return _attach_zone(datetime.combine(raw, time.min), zone)
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        if not math.isfinite(raw):
            return None
        try:
            return datetime.fromtimestamp(raw / 1000.0, UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        return _attach_zone(parsed, zone)
    return None


def parse_value(raw: Any) -> float | None:
    """
    Parse a raw sample value into a finite float.

    Mood labels ("terrible" .. "great") are mapped through Config.MOOD_SCALE;
    numeric strings are accepted.

    Returns:
        Finite float, or None when the value cannot be used.

    Example:
        >>> parse_value("good")
        7.0
        >>> parse_value("12.5")
        12.5
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, str):
        mood = Config.mood_value(raw)
        if mood is not None:
            return mood
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def local_day(moment: datetime, zone: tzinfo | None = None) -> date:
    """Calendar day of moment in zone (None: system local zone)."""
    return moment.astimezone(zone).date()


def _first_present(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _unpack(raw: Any) -> tuple[Any, Any]:
    if isinstance(raw, Sample):
        return raw.timestamp, raw.value
    if isinstance(raw, Mapping):
        return _first_present(raw, TIMESTAMP_KEYS), _first_present(raw, VALUE_KEYS)
    if isinstance(raw, list | tuple) and len(raw) == 2:
        return raw[0], raw[1]
    return None, None


def _entries(raw_samples: Any) -> list[Any]:
    if raw_samples is None:
        return []
    if isinstance(raw_samples, str | bytes | Mapping) or not isinstance(raw_samples, Iterable):
        logger.warning(f"Ignoring samples of type {type(raw_samples).__name__}, expected a list")
        return []
    return list(raw_samples)


def normalize(raw_samples: Iterable[Any] | None) -> list[Sample]:
    """
    Convert raw samples into a canonical, day-deduplicated Series.

    Each timestamp is truncated to its local calendar day for grouping
    while the original timestamp is kept on the sample. When several
    samples fall on the same day the one with the latest original
    timestamp wins; on equal timestamps the later-inserted one wins. The
    result is sorted ascending by day.

    Business context: Mood check-ins, weather observations and savings
    events arrive at arbitrary times of day, sometimes several per day.
    Charts and correlation work on one value per day.

    Args:
        raw_samples: Iterable of raw samples in any accepted shape, or None.
            Anything that is not a list of samples is logged and gives [].

    Returns:
        List of Sample, strictly increasing by day. Empty input gives an
        empty list. Samples with an unparsable or non-finite timestamp or
        value are dropped and logged at WARNING.

    Raises:
        None: Invalid input degrades to exclusion, never to an exception.

    Example:
        >>> series = normalize([(1772352000000, 5), (1772355600000, 6)])
        >>> [s.value for s in series]
        [6.0]
    """
    zone = Config.get_timezone()
    by_day: dict[date, Sample] = {}

    for index, raw in enumerate(_entries(raw_samples)):
        raw_timestamp, raw_value = _unpack(raw)
        timestamp = parse_timestamp(raw_timestamp, zone)
        if timestamp is None:
            logger.warning(f"Dropping sample {index}: invalid timestamp {raw_timestamp!r}")
            continue
        value = parse_value(raw_value)
        if value is None:
            logger.warning(f"Dropping sample {index}: invalid value {raw_value!r}")
            continue

        day = local_day(timestamp, zone)
        current = by_day.get(day)
        if current is None or timestamp >= current.timestamp:
            by_day[day] = Sample(timestamp=timestamp, value=value)

    return [by_day[day] for day in sorted(by_day)]


def daily_totals(raw_samples: Iterable[Any] | None) -> list[Sample]:
    """
    Sum raw samples per local calendar day.

    Ledger events (savings, spending) accumulate within a day instead of
    replacing each other. The result is a regular Series: one sample per
    day carrying the day's total and its latest timestamp, ascending.
    Invalid samples are dropped and logged exactly as in normalize().

    Example:
        >>> [s.value for s in daily_totals([("2026-03-01T09:00", 5), ("2026-03-01T18:00", 7.5)])]
        [12.5]
    """
    zone = Config.get_timezone()
    totals: dict[date, Sample] = {}
    for index, raw in enumerate(_entries(raw_samples)):
        raw_timestamp, raw_value = _unpack(raw)
        timestamp = parse_timestamp(raw_timestamp, zone)
        value = parse_value(raw_value)
        if timestamp is None or value is None:
            logger.warning(f"Dropping ledger entry {index}: {raw_timestamp!r} / {raw_value!r}")
            continue
        day = local_day(timestamp, zone)
        current = totals.get(day)
        if current is None:
            totals[day] = Sample(timestamp=timestamp, value=value)
        else:
            totals[day] = Sample(
                timestamp=max(current.timestamp, timestamp),
                value=current.value + value,
            )
    return [totals[day] for day in sorted(totals)]


def mood_series(entries: Iterable[Mapping[str, Any]] | None) -> list[Sample]:
    """
    Normalize mood check-ins whose mood is a label.

    Entries look like {"date": ..., "mood": "good"}. Labels follow the
    fixed scale {terrible: 2, bad: 4, neutral: 5, good: 7, great: 9};
    entries with an unknown label are dropped and logged.

    Example:
        >>> [s.value for s in mood_series([{"date": "2026-03-01", "mood": "bad"}])]
        [4.0]
    """
    raw: list[dict[str, Any]] = []
    for entry in _entries(entries):
        if not isinstance(entry, Mapping):
            logger.warning(f"Dropping mood entry {entry!r}: expected an object")
            continue
        label = entry.get("mood")
        if not isinstance(label, str) or Config.mood_value(label) is None:
            logger.warning(f"Dropping mood entry with unknown label {label!r}")
            continue
        raw.append({"timestamp": _first_present(entry, TIMESTAMP_KEYS), "value": label})
    return normalize(raw)
