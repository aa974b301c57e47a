"""Gong operations bound to one client, directory and timezone.

A single :class:`GongSession` is created per server process (see the
lifespan in ``server.py``) and owns all process-wide state: the HTTP
client, the user directory and the resolved default user.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any

import httpx

from .client import GongClient
from .config import Config
from .directory import UserDirectory, composite_name
from .errors import GongMCPError
from .formatting import format_call_line
from .normalize import normalize_call
from .pagination import collect_items
from .timezone import EPOCH, local_today, parse_timestamp, resolve_timezone
from .types import CallRecord, CallSummary, UserSummary

logger = logging.getLogger(__name__)

DEFAULT_DAYS_BACK = 5

# Per-day activity fields whose call ids count as "my calls"
ACTIVITY_CALL_FIELDS = ("callsAttended", "callsAsHost")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def resolve_window(
    from_date: str | None,
    to_date: str | None,
    days_back: int | float | None,
    today: date,
) -> tuple[str, str]:
    """Return the effective ``(fromDate, toDate)`` window, toDate exclusive.

    Missing bounds come from a *days_back* window ending today. An end date
    after today is clamped to today.
    """
    if not from_date or not to_date:
        days = max(1, int(days_back if days_back is not None else DEFAULT_DAYS_BACK))
        from_date = from_date or (today - timedelta(days=days)).isoformat()
        to_date = to_date or today.isoformat()

    if to_date > today.isoformat():
        to_date = today.isoformat()
    return from_date, to_date


def collect_call_ids(users: Iterable[Any]) -> set[str]:
    """Union of attended and hosted call ids across all users and days."""
    ids: set[str] = set()
    for user in users:
        if not isinstance(user, dict):
            continue
        for day in user.get("userDailyActivityStats") or []:
            if not isinstance(day, dict):
                continue
            for field in ACTIVITY_CALL_FIELDS:
                for call_id in day.get(field) or []:
                    if isinstance(call_id, str) and call_id:
                        ids.add(call_id)
    return ids


def start_sort_key(call: CallRecord) -> datetime:
    """Start time for ordering; missing or unparseable starts sort as epoch."""
    return parse_timestamp(call.started_at) or EPOCH


def sort_calls(calls: list[CallRecord]) -> list[CallRecord]:
    return sorted(calls, key=start_sort_key)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class GongSession:
    """All tool operations, sharing one client and one user directory."""

    def __init__(
        self,
        config: Config,
        client: GongClient,
        tz: tzinfo,
        now: Callable[[], datetime] | None = None,
    ):
        self.config = config
        self.client = client
        self.tz = tz
        self.directory = UserDirectory(
            client,
            user_full_name=config.user_full_name,
            user_id=config.user_id,
            env_file=config.env_file,
            max_pages=config.max_pages,
        )
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._call_slots = asyncio.Semaphore(config.max_concurrency)

    @classmethod
    def from_config(
        cls,
        config: Config,
        transport: httpx.AsyncBaseTransport | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> "GongSession":
        client = GongClient(
            config.access_key,
            config.access_secret,
            base_url=config.api_url,
            timeout=config.request_timeout,
            transport=transport,
        )
        return cls(config, client, resolve_timezone(config.timezone), now=now)

    async def aclose(self) -> None:
        await self.client.aclose()

    def today(self) -> date:
        return local_today(self.tz, self._now())

    async def effective_user_ids(
        self, user_ids: list[str] | None = None, user_id: str | None = None
    ) -> list[str]:
        """Explicit ids, else the single id, else the default user."""
        if user_ids:
            return list(user_ids)
        if user_id:
            return [user_id]
        return [await self.directory.resolve_default_user()]

    # -----------------------------------------------------------------------
    # Pass-through operations
    # -----------------------------------------------------------------------

    async def list_calls(
        self, from_date_time: str | None = None, to_date_time: str | None = None
    ) -> dict[str, Any]:
        return await self.client.list_calls(from_date_time, to_date_time)

    async def retrieve_transcripts(self, call_ids: str | list[str]) -> dict[str, Any]:
        ids = [call_ids] if isinstance(call_ids, str) else list(call_ids)
        return await self.client.retrieve_transcripts(ids)

    async def activity_day_by_day(
        self,
        from_date: str,
        to_date: str,
        user_ids: list[str] | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        user_ids = await self.effective_user_ids(user_ids)
        return await self.client.activity_day_by_day(
            {"fromDate": from_date, "toDate": to_date, "userIds": user_ids}, cursor
        )

    async def list_calls_extensive(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        user_id: str | None = None,
        user_ids: list[str] | None = None,
        text: str | None = None,
    ) -> dict[str, Any]:
        call_filter: dict[str, Any] = {}
        if start_date:
            call_filter["fromDateTime"] = start_date
        if end_date:
            call_filter["toDateTime"] = end_date
        call_filter["userIds"] = await self.effective_user_ids(user_ids, user_id)
        if text:
            call_filter["text"] = text

        async def fetch(cursor: str | None) -> dict[str, Any]:
            return await self.client.list_calls_extensive(call_filter, cursor)

        raw_calls = await collect_items(fetch, "calls", self.config.max_pages)
        calls = [normalize_call(c, self.config.web_url).to_json_dict() for c in raw_calls]
        return {"count": len(calls), "calls": calls}

    async def get_users(self, name_filter: str | None = None) -> dict[str, Any]:
        users = await self.directory.list_users()

        if name_filter:
            needle = name_filter.lower()
            users = [
                u
                for u in users
                if needle in composite_name(u).lower()
                or needle in str(u.get("fullName") or u.get("name") or "").lower()
            ]

        summaries = [
            UserSummary(
                user_id=u.get("id"),
                full_name=u.get("fullName") or u.get("name") or composite_name(u) or None,
                email=u.get("emailAddress") or u.get("email"),
            ).model_dump(by_alias=True)
            for u in users
        ]
        return {"count": len(summaries), "users": summaries}

    # -----------------------------------------------------------------------
    # Aggregate operations
    # -----------------------------------------------------------------------

    async def _activity_users(self, activity_filter: dict[str, Any]) -> list[Any]:
        async def fetch(cursor: str | None) -> dict[str, Any]:
            return await self.client.activity_day_by_day(activity_filter, cursor)

        return await collect_items(fetch, "usersDetailedActivities", self.config.max_pages)

    async def fetch_activity(
        self, from_date: str, to_date: str, user_ids: list[str]
    ) -> list[Any]:
        """Per-user day-by-day activity, retried once without the user filter if empty."""
        users = await self._activity_users(
            {"fromDate": from_date, "toDate": to_date, "userIds": user_ids}
        )
        if not users:
            # May also be a genuine "no activity" answer; kept for upstream parity
            logger.info(
                "No activity for %s between %s and %s; retrying without user filter",
                ",".join(user_ids),
                from_date,
                to_date,
            )
            users = await self._activity_users({"fromDate": from_date, "toDate": to_date})
        return users

    async def fetch_call(self, call_id: str) -> CallRecord:
        """Fetch and normalize one call; failures yield an id-only placeholder."""
        try:
            async with self._call_slots:
                detail = await self.client.get_call(call_id)
        except GongMCPError as e:
            logger.warning("Could not fetch call %s: %s", call_id, e)
            return CallRecord(call_id=call_id)

        raw = detail.get("call") if isinstance(detail, dict) else None
        call = normalize_call(raw, self.config.web_url)
        if call.call_id is None:
            return CallRecord(call_id=call_id)
        return call

    async def hydrate_calls(self, call_ids: Iterable[str]) -> list[CallRecord]:
        """Fetch calls with bounded concurrency and sort them by start time."""
        calls = await asyncio.gather(*(self.fetch_call(cid) for cid in call_ids))
        return sort_calls(list(calls))

    async def _my_calls(
        self, from_date: str, to_date: str, user_ids: list[str]
    ) -> dict[str, Any]:
        users = await self.fetch_activity(from_date, to_date, user_ids)
        call_ids = sorted(collect_call_ids(users))

        await self.directory.ensure_loaded()
        calls = await self.hydrate_calls(call_ids)

        summaries: list[dict[str, Any]] = []
        formatted: list[str] = []
        for call in calls:
            host_name = None
            if call.host_user_id:
                host_name = self.directory.cached_name(call.host_user_id) or call.host_user_id
            summaries.append(
                CallSummary(
                    call_id=call.call_id,
                    title=call.title,
                    started_at=call.started_at,
                    duration=call.duration,
                    host_user_id=call.host_user_id,
                    host_name=host_name,
                    gong_url=call.gong_url,
                ).to_json_dict()
            )
            formatted.append(format_call_line(call, host_name, self.tz))

        return {"count": len(calls), "calls": summaries, "formatted": formatted}

    async def my_calls_range(
        self,
        from_date: str | None = None,
        to_date: str | None = None,
        days_back: int | float | None = None,
        user_ids: list[str] | None = None,
        user_id: str | None = None,
    ) -> dict[str, Any]:
        """Calls the users attended or hosted in ``[fromDate, toDate)``."""
        from_date, to_date = resolve_window(from_date, to_date, days_back, self.today())
        ids = await self.effective_user_ids(user_ids, user_id)
        result = await self._my_calls(from_date, to_date, ids)
        return {"fromDate": from_date, "toDate": to_date, **result}

    async def my_calls_today(self) -> dict[str, Any]:
        """The default user's most recent calls.

        The day-by-day stats endpoint has no data for the current day, so
        this covers yesterday → today.
        """
        today = self.today()
        yesterday = (today - timedelta(days=1)).isoformat()
        ids = [await self.directory.resolve_default_user()]
        result = await self._my_calls(yesterday, today.isoformat(), ids)
        return {
            "dateRange": (
                f"{yesterday} to {today.isoformat()} "
                "(yesterday only; current day unsupported by stats API)"
            ),
            **result,
        }
