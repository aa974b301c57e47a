"""Argument validation and routing for Gong tool operations.

Each operation has a strict pydantic argument model. :func:`dispatch`
validates the caller's arguments, runs the operation on a
:class:`GongSession` and turns every outcome into a :class:`ToolResult`;
it never raises.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .session import GongSession

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Outcome of one tool invocation."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, payload: Any) -> "ToolResult":
        return cls(json.dumps(payload, indent=2, ensure_ascii=False))

    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        return cls(message, is_error=True)


# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------


class _Args(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)


class ListCallsArgs(_Args):
    from_date_time: str | None = Field(default=None, alias="fromDateTime")
    to_date_time: str | None = Field(default=None, alias="toDateTime")


class ListCallsExtensiveArgs(_Args):
    start_date: str | None = None
    end_date: str | None = None
    user_id: str | None = None
    user_ids: list[str] | None = None
    user_ids_alias: list[str] | None = Field(default=None, alias="userIds")
    text: str | None = None


class ActivityDayByDayArgs(_Args):
    from_date: str = Field(alias="fromDate")
    to_date: str = Field(alias="toDate")
    user_ids: list[str] | None = Field(default=None, alias="userIds")
    cursor: str | None = None


class MyCallsRangeArgs(_Args):
    from_date: str | None = Field(default=None, alias="fromDate")
    to_date: str | None = Field(default=None, alias="toDate")
    days_back: float | None = Field(default=None, alias="daysBack")
    user_ids: list[str] | None = Field(default=None, alias="userIds")
    user_id: str | None = Field(default=None, alias="userId")


class MyCallsTodayArgs(_Args):
    pass


class GetUsersArgs(_Args):
    name_filter: str | None = None


class RetrieveTranscriptsArgs(_Args):
    call_ids: str | list[str] = Field(alias="callIds")


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _list_calls(session: GongSession, args: ListCallsArgs) -> Any:
    return await session.list_calls(args.from_date_time, args.to_date_time)


async def _list_calls_extensive(
    session: GongSession, args: ListCallsExtensiveArgs
) -> Any:
    return await session.list_calls_extensive(
        start_date=args.start_date,
        end_date=args.end_date,
        user_id=args.user_id,
        user_ids=args.user_ids or args.user_ids_alias,
        text=args.text,
    )


async def _activity_day_by_day(session: GongSession, args: ActivityDayByDayArgs) -> Any:
    return await session.activity_day_by_day(
        args.from_date, args.to_date, args.user_ids, args.cursor
    )


async def _my_calls_range(session: GongSession, args: MyCallsRangeArgs) -> Any:
    return await session.my_calls_range(
        from_date=args.from_date,
        to_date=args.to_date,
        days_back=args.days_back,
        user_ids=args.user_ids,
        user_id=args.user_id,
    )


async def _my_calls_today(session: GongSession, args: MyCallsTodayArgs) -> Any:
    return await session.my_calls_today()


async def _get_users(session: GongSession, args: GetUsersArgs) -> Any:
    return await session.get_users(args.name_filter)


async def _retrieve_transcripts(
    session: GongSession, args: RetrieveTranscriptsArgs
) -> Any:
    return await session.retrieve_transcripts(args.call_ids)


Handler = Callable[[GongSession, Any], Awaitable[Any]]

OPERATIONS: dict[str, tuple[type[_Args], Handler]] = {
    "list_calls": (ListCallsArgs, _list_calls),
    "list_calls_extensive": (ListCallsExtensiveArgs, _list_calls_extensive),
    "activity_day_by_day": (ActivityDayByDayArgs, _activity_day_by_day),
    "my_calls_range": (MyCallsRangeArgs, _my_calls_range),
    "my_calls_today": (MyCallsTodayArgs, _my_calls_today),
    "get_users": (GetUsersArgs, _get_users),
    "retrieve_transcripts": (RetrieveTranscriptsArgs, _retrieve_transcripts),
}


def parse_arguments(name: str, arguments: Any) -> _Args | ToolResult:
    """Validate *arguments* for operation *name*.

    Returns the parsed argument model, or a failed :class:`ToolResult`
    for unknown operations and shape mismatches.
    """
    if name not in OPERATIONS:
        return ToolResult.failure(f"Unknown tool: {name}")
    model, _handler = OPERATIONS[name]

    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        return ToolResult.failure(f"Error: Invalid arguments for {name}")

    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"][:1]) for err in e.errors()})
        return ToolResult.failure(
            f"Error: Invalid arguments for {name}: {', '.join(fields)}"
        )


async def dispatch(session: GongSession, name: str, arguments: Any = None) -> ToolResult:
    """Run operation *name* with *arguments* and return its result."""
    parsed = parse_arguments(name, arguments)
    if isinstance(parsed, ToolResult):
        return parsed

    _model, handler = OPERATIONS[name]
    try:
        payload = await handler(session, parsed)
    except Exception as e:
        logger.exception("Tool %s failed", name)
        return ToolResult.failure(f"Error: {e}")
    return ToolResult.success(payload)
