"""Data models for Gong call and user information."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Participant(_CamelModel):
    """A call participant. Every field is optional."""

    role: str | None = None
    display_name: str | None = None
    id: str | None = None


class CallRecord(_CamelModel):
    """Canonical call record, independent of the endpoint it came from."""

    call_id: str | None = None
    title: str | None = None
    started_at: str | None = None
    ended_at: str | None = None
    duration: int | float | None = None
    scheduled: str | None = None
    host_user_id: str | None = None
    participants: list[Participant] = []
    gong_url: str | None = None


class CallSummary(_CamelModel):
    """Call entry returned by the "my calls" operations."""

    call_id: str | None = None
    title: str | None = None
    started_at: str | None = None
    duration: int | float | None = None
    host_user_id: str | None = None
    host_name: str | None = None
    gong_url: str | None = None


class UserSummary(_CamelModel):
    """User entry returned by ``get_users``."""

    user_id: str | None = None
    full_name: str | None = None
    email: str | None = None
