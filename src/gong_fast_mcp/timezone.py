"""Timezone detection and formatting utilities."""

import os
import time
import zoneinfo
from datetime import date, datetime, timezone, tzinfo

# Abbreviation → IANA timezone mapping for names only one zone uses.
# CST (China, Cuba) and MST (Arizona without DST) are ambiguous.
_TZ_ABBREV_MAP: dict[str, str] = {
    "EST": "America/New_York",
    "EDT": "America/New_York",
    "CDT": "America/Chicago",
    "MDT": "America/Denver",
    "PST": "America/Los_Angeles",
    "PDT": "America/Los_Angeles",
    "UTC": "UTC",
}

_LOCALTIME_PATH = "/etc/localtime"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _zone(key: str) -> tzinfo | None:
    try:
        return zoneinfo.ZoneInfo(key)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        return None


def _zone_from_localtime(path: str = _LOCALTIME_PATH) -> tzinfo | None:
    """Return the zone ``/etc/localtime`` links to, if it names one."""
    resolved = os.path.realpath(path)
    _, sep, key = resolved.partition("/zoneinfo/")
    if not sep:
        return None
    for prefix in ("posix/", "right/"):
        key = key.removeprefix(prefix)
    return _zone(key)


def detect_local_timezone() -> tzinfo:
    """Detect the local timezone from the system.

    ``TZ`` wins when it names an IANA zone; otherwise the ``/etc/localtime``
    link is used when ``TZ`` is unset. Unambiguous abbreviations map to their
    IANA zone so DST transitions are handled, and anything else falls back
    to the system's current UTC offset.
    """
    tz_env = os.environ.get("TZ")
    if tz_env:
        found = _zone(tz_env.removeprefix(":"))
        if found is not None:
            return found
    else:
        found = _zone_from_localtime()
        if found is not None:
            return found

    if time.tzname:
        current_tz = time.tzname[time.daylight and time.localtime().tm_isdst > 0]
        if current_tz in _TZ_ABBREV_MAP:
            return zoneinfo.ZoneInfo(_TZ_ABBREV_MAP[current_tz])

    local = datetime.now().astimezone().tzinfo
    return local if local is not None else timezone.utc


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the named IANA zone, or the detected local zone when *name* is empty."""
    if name:
        return zoneinfo.ZoneInfo(name)
    return detect_local_timezone()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Returns ``None`` for missing or unparseable input.
    """
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def convert_to_local(utc_dt: datetime, tz: tzinfo) -> datetime:
    """Convert a datetime (assumed UTC if naive) to the given timezone."""
    if utc_dt.tzinfo is None:
        utc_dt = utc_dt.replace(tzinfo=timezone.utc)
    return utc_dt.astimezone(tz)


def format_time_short(value: str | None, tz: tzinfo) -> str | None:
    """Format an ISO timestamp as local ``HH:MM``, or ``None`` if unparseable."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return convert_to_local(parsed, tz).strftime("%H:%M")


def local_today(tz: tzinfo, now: datetime | None = None) -> date:
    """Return today's date in *tz*."""
    now = now or datetime.now(timezone.utc)
    return convert_to_local(now, tz).date()
