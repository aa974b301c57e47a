"""Async client for the Gong REST API."""

import base64
import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from .errors import GongAPIError
from .signing import serialize_payload, sign_request

logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    """UTC ISO-8601 timestamp with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error_detail(response: httpx.Response) -> str:
    """Best-effort extraction of the upstream error message."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:500] or response.reason_phrase

    if isinstance(data, dict):
        errors = data.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(e) for e in errors)
        if data.get("message"):
            return str(data["message"])
    return response.text[:500]


class GongClient:
    """Signed request wrapper around ``httpx.AsyncClient``.

    Every request carries Basic auth plus the ``X-Gong-AccessKey``,
    ``X-Gong-Timestamp`` and ``X-Gong-Signature`` headers. Failures are
    raised as :class:`GongAPIError`; nothing is retried.
    """

    def __init__(
        self,
        access_key: str,
        access_secret: str,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_key = access_key
        self.access_secret = access_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self, method: str, path: str, payload: Any) -> dict[str, str]:
        timestamp = _utc_timestamp()
        credentials = base64.b64encode(
            f"{self.access_key}:{self.access_secret}".encode("utf-8")
        ).decode("ascii")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Basic {credentials}",
            "X-Gong-AccessKey": self.access_key,
            "X-Gong-Timestamp": timestamp,
            "X-Gong-Signature": sign_request(
                method, path, timestamp, payload, self.access_secret
            ),
        }

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Issue a signed request and return the parsed JSON response."""
        payload = body if body is not None else params
        headers = self._headers(method, path, payload)
        content = serialize_payload(body) if body is not None else None

        logger.debug("Gong %s %s", method, path)
        try:
            response = await self._http.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                content=content,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise GongAPIError(
                f"Gong API request timed out after {self.timeout:g}s: {method} {path}"
            ) from e
        except httpx.HTTPError as e:
            raise GongAPIError(f"Gong API request failed: {method} {path}: {e}") from e

        if not response.is_success:
            raise GongAPIError(
                f"Gong API returned {response.status_code} for {method} {path}: "
                f"{_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GongAPIError(
                f"Gong API returned invalid JSON for {method} {path}"
            ) from e

    # -----------------------------------------------------------------------
    # Endpoints
    # -----------------------------------------------------------------------

    async def list_calls(
        self, from_date_time: str | None = None, to_date_time: str | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if from_date_time:
            params["fromDateTime"] = from_date_time
        if to_date_time:
            params["toDateTime"] = to_date_time
        return await self.request("GET", "/calls", params=params)

    async def get_call(self, call_id: str) -> dict[str, Any]:
        return await self.request("GET", f"/calls/{call_id}")

    async def retrieve_transcripts(self, call_ids: list[str]) -> dict[str, Any]:
        return await self.request(
            "POST",
            "/calls/transcript",
            body={
                "filter": {
                    "callIds": call_ids,
                    "includeEntities": True,
                    "includeInteractionsSummary": True,
                    "includeTrackers": True,
                }
            },
        )

    async def list_calls_extensive(
        self, filter: dict[str, Any], cursor: str | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"filter": filter}
        if cursor:
            body["cursor"] = cursor
        return await self.request("POST", "/calls/extensive", body=body)

    async def activity_day_by_day(
        self, filter: dict[str, Any], cursor: str | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"filter": filter}
        if cursor:
            body["cursor"] = cursor
        return await self.request("POST", "/stats/activity/day-by-day", body=body)

    async def get_users(
        self, cursor: str | None = None, include_avatars: bool = False
    ) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if cursor:
            params["cursor"] = cursor
        if include_avatars:
            params["includeAvatars"] = "true"
        return await self.request("GET", "/users", params=params)
