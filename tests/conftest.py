"""Shared fixtures for tests."""

import json
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest

from gong_fast_mcp.config import Config
from gong_fast_mcp.session import GongSession

API_URL = "https://api.gong.io/v2"

# 2024-06-10 12:00 UTC; with timezone="UTC" today is 2024-06-10.
FIXED_NOW = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)

# Gong users as returned by GET /users, spread over two pages.
SAMPLE_USERS: list[dict] = [
    {
        "id": "u1",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "emailAddress": "ada@example.com",
    },
    {"id": "u2", "fullName": "Grace Hopper", "emailAddress": "grace@example.com"},
    {"id": "u3", "name": "Alan Turing", "email": "alan@example.com"},
]

# Call details as returned by GET /calls/{id} (under the "call" key).
SAMPLE_CALLS: dict[str, dict] = {
    "c1": {
        "id": "c1",
        "title": "Kickoff",
        "started": "2024-06-02T10:00:00Z",
        "duration": 1800,
        "primaryUserId": "u2",
        "url": "https://app.gong.io/call?id=c1",
    },
    "c2": {
        "id": "c2",
        "title": "Demo",
        "started": "2024-06-01T09:05:00Z",
        "duration": 427,
        "primaryUserId": "u1",
    },
    "c3": {
        "id": "c3",
        "subject": "Pipeline review",
        "startTime": "2024-06-01T15:30:00Z",
        "primaryUserId": "u9",
    },
}

# Day-by-day activity for u1 between 2024-06-01 and 2024-06-03.
SAMPLE_ACTIVITY: dict = {
    "records": {"totalRecords": 1, "currentPageSize": 1, "currentPageNumber": 0},
    "usersDetailedActivities": [
        {
            "userId": "u1",
            "userEmailAddress": "ada@example.com",
            "userDailyActivityStats": [
                {
                    "fromDate": "2024-06-01",
                    "callsAttended": ["c1"],
                    "callsAsHost": ["c2"],
                    "callsGaveFeedback": ["c9"],
                },
                {
                    "fromDate": "2024-06-02",
                    "callsAttended": ["c1"],
                    "callsAsHost": [],
                },
            ],
        }
    ],
}


class FakeGong:
    """In-memory Gong API served through ``httpx.MockTransport``."""

    def __init__(self):
        self.users: list[dict] = list(SAMPLE_USERS)
        self.users_page_size = 2
        self.calls: dict[str, dict] = dict(SAMPLE_CALLS)
        self.failing_calls: set[str] = set()
        # Called with the request body; returns the day-by-day payload or
        # a ready-made httpx.Response.
        self.activity: Callable[[dict], Any] = lambda body: SAMPLE_ACTIVITY
        self.extensive_pages: list[dict] = [{"calls": []}]
        self.requests: list[httpx.Request] = []

    def paths(self) -> list[str]:
        return [_api_path(r) for r in self.requests]

    def count(self, path: str) -> int:
        return sum(1 for p in self.paths() if p == path)

    def bodies(self, path: str) -> list[dict]:
        return [
            json.loads(r.content) for r in self.requests if _api_path(r) == path
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = _api_path(request)

        if request.method == "GET" and path == "/users":
            start = int(request.url.params.get("cursor", "0"))
            end = start + self.users_page_size
            page: dict[str, Any] = {"users": self.users[start:end], "records": {}}
            if end < len(self.users):
                page["records"]["cursor"] = str(end)
            return httpx.Response(200, json=page)

        if request.method == "GET" and path.startswith("/calls/"):
            call_id = path.rsplit("/", 1)[1]
            if call_id in self.failing_calls:
                return httpx.Response(500, json={"errors": ["internal failure"]})
            if call_id not in self.calls:
                return httpx.Response(404, json={"errors": [f"call {call_id} not found"]})
            return httpx.Response(200, json={"call": self.calls[call_id]})

        if request.method == "GET" and path == "/calls":
            return httpx.Response(200, json={"calls": list(self.calls.values())})

        if request.method == "POST" and path == "/stats/activity/day-by-day":
            result = self.activity(json.loads(request.content))
            if isinstance(result, httpx.Response):
                return result
            return httpx.Response(200, json=result)

        if request.method == "POST" and path == "/calls/extensive":
            body = json.loads(request.content)
            index = int(body.get("cursor", "0"))
            return httpx.Response(200, json=self.extensive_pages[index])

        if request.method == "POST" and path == "/calls/transcript":
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "transcripts": [
                        {"callId": cid, "transcript": []}
                        for cid in body["filter"]["callIds"]
                    ]
                },
            )

        return httpx.Response(404, json={"errors": ["unknown endpoint"]})


def _api_path(request: httpx.Request) -> str:
    return request.url.path.removeprefix("/v2")


@pytest.fixture
def fake_gong() -> FakeGong:
    return FakeGong()


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Build a Config that ignores the process environment's optional fields."""

    def _make(**overrides: Any) -> Config:
        values: dict[str, Any] = {
            "access_key": "key",
            "access_secret": "secret",
            "api_url": API_URL,
            "user_full_name": None,
            "user_id": None,
            "env_file": str(tmp_path / ".env"),
            "timezone": "UTC",
        }
        values.update(overrides)
        return Config(_env_file=None, **values)

    return _make


@pytest.fixture
def make_session(
    fake_gong: FakeGong, make_config: Callable[..., Config]
) -> Callable[..., GongSession]:
    """Build a GongSession wired to ``fake_gong``."""

    def _make(**overrides: Any) -> GongSession:
        return GongSession.from_config(
            make_config(**overrides),
            transport=httpx.MockTransport(fake_gong.handler),
            now=lambda: FIXED_NOW,
        )

    return _make
