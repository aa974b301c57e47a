"""Human-readable rendering of call summaries."""

from datetime import tzinfo

from .timezone import format_time_short
from .types import CallRecord


def format_duration(seconds: int | float | None) -> str | None:
    """Render a duration in seconds as ``XmSSs`` (e.g. ``5m07s``)."""
    if seconds is None:
        return None
    total = int(seconds)
    return f"{total // 60}m{total % 60:02d}s"


def format_call_line(call: CallRecord, host_name: str | None, tz: tzinfo) -> str:
    """One summary line: ``HH:MM — Title (XmSSs) — Host: Name — URL``.

    Duration, host and URL segments are dropped when unknown; the time is
    ``??:??`` when the start is missing or unparseable.
    """
    line = f"{format_time_short(call.started_at, tz) or '??:??'} — {call.title or 'Untitled'}"
    duration = format_duration(call.duration)
    if duration:
        line += f" ({duration})"
    if host_name:
        line += f" — Host: {host_name}"
    if call.gong_url:
        line += f" — {call.gong_url}"
    return line
