"""Normalization of Gong call records into :class:`CallRecord`.

``/calls/{id}`` returns flat call objects while ``/calls/extensive`` nests
them under ``metaData`` and uses different names for several fields. Each
canonical field lists its candidate source names in priority order; the
first present, non-null value of the right type wins.
"""

from typing import Any

from .config import DEFAULT_WEB_URL
from .types import CallRecord, Participant

CALL_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "call_id": ("id", "callId"),
    "title": ("title", "subject"),
    "started_at": ("started", "startTime", "startedAt", "scheduled"),
    "ended_at": ("ended", "endTime", "endedAt"),
    "duration": ("duration",),
    "scheduled": ("scheduled",),
    "host_user_id": ("primaryUserId", "hostUserId"),
    "gong_url": ("url",),
}

PARTICIPANT_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "role": ("role", "type", "affiliation"),
    "display_name": ("displayName", "name", "emailAddress"),
    "id": ("id", "userId", "speakerId"),
}

PARTICIPANT_LIST_ALIASES = ("participants", "parties")

_NUMERIC_FIELDS = {"duration"}


def _coerce(value: Any, numeric: bool) -> Any:
    """Return *value* in the canonical type, or ``None`` if it doesn't fit."""
    if value is None or isinstance(value, bool):
        return None
    if numeric:
        return value if isinstance(value, (int, float)) else None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    return None


def first_present(
    source: dict[str, Any], candidates: tuple[str, ...], numeric: bool = False
) -> Any:
    """Return the first usable value among *candidates* in *source*."""
    for name in candidates:
        value = _coerce(source.get(name), numeric)
        if value is not None:
            return value
    return None


def normalize_participant(raw: Any) -> Participant:
    if not isinstance(raw, dict):
        return Participant()
    return Participant(
        **{
            field: first_present(raw, names)
            for field, names in PARTICIPANT_FIELD_ALIASES.items()
        }
    )


def normalize_call(raw: Any, web_url: str = DEFAULT_WEB_URL) -> CallRecord:
    """Map a raw Gong call object onto :class:`CallRecord`. Never raises."""
    if not isinstance(raw, dict):
        return CallRecord()

    meta = raw.get("metaData")
    source: dict[str, Any] = meta if isinstance(meta, dict) else raw

    fields = {
        field: first_present(source, names, numeric=field in _NUMERIC_FIELDS)
        for field, names in CALL_FIELD_ALIASES.items()
    }

    participants: list[Participant] = []
    for key in PARTICIPANT_LIST_ALIASES:
        # Extensive responses keep parties beside metaData, not inside it
        value = source.get(key, raw.get(key))
        if isinstance(value, list):
            participants = [normalize_participant(p) for p in value]
            break

    if fields["gong_url"] is None and fields["call_id"] is not None:
        fields["gong_url"] = f"{web_url.rstrip('/')}/call?id={fields['call_id']}"

    return CallRecord(**fields, participants=participants)
