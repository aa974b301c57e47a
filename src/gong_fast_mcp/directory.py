"""Gong user directory and default-user resolution."""

import asyncio
import logging
from typing import Any

from .client import GongClient
from .envfile import persist_env_value
from .errors import ConfigurationError, GongMCPError, UserNotFoundError
from .pagination import DEFAULT_MAX_PAGES, iterate_pages

logger = logging.getLogger(__name__)

USER_ID_ENV_KEY = "GONG_USER_ID"


def _text(user: dict[str, Any], key: str) -> str:
    value = user.get(key)
    return value.strip() if isinstance(value, str) else ""


def composite_name(user: dict[str, Any]) -> str:
    """``"first last"`` built from whichever halves are present."""
    return f"{_text(user, 'firstName')} {_text(user, 'lastName')}".strip()


def display_name(user: dict[str, Any]) -> str:
    """Best-effort display name for a raw Gong user.

    Tries fullName, legacy name, "first last", emailAddress, legacy email
    and finally the id itself.
    """
    return (
        _text(user, "fullName")
        or _text(user, "name")
        or composite_name(user)
        or _text(user, "emailAddress")
        or _text(user, "email")
        or _text(user, "id")
    )


class UserDirectory:
    """Process-wide id → display name map plus the resolved default user.

    The directory is loaded at most once; later lookups of unknown ids
    return ``None`` rather than triggering a reload. The default user, once
    resolved, never changes for the life of the instance.
    """

    def __init__(
        self,
        client: GongClient,
        user_full_name: str | None = None,
        user_id: str | None = None,
        env_file: str | None = None,
        max_pages: int = DEFAULT_MAX_PAGES,
    ):
        self.client = client
        self.user_full_name = user_full_name
        self.env_file = env_file
        self.max_pages = max_pages

        self._configured_user_id = user_id
        self._default_user_id: str | None = None
        self._names: dict[str, str] = {}
        self._loaded = False
        self._load_lock = asyncio.Lock()
        self._resolve_lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def _fetch_users(self, cursor: str | None) -> dict[str, Any]:
        return await self.client.get_users(cursor)

    async def iter_users(self):
        """Yield raw user objects across all pages."""
        async for page in iterate_pages(self._fetch_users, self.max_pages):
            for user in page.get("users") or []:
                if isinstance(user, dict):
                    yield user

    async def list_users(self) -> list[dict[str, Any]]:
        return [user async for user in self.iter_users()]

    # -----------------------------------------------------------------------
    # Directory
    # -----------------------------------------------------------------------

    async def ensure_loaded(self) -> None:
        """Load every user into the directory once; later calls are no-ops."""
        if self._loaded:
            return
        async with self._load_lock:
            if self._loaded:
                return
            names: dict[str, str] = {}
            async for user in self.iter_users():
                user_id = _text(user, "id")
                if user_id:
                    names[user_id] = display_name(user)
            self._names.update(names)
            self._loaded = True
            logger.info("Loaded %d Gong users into the directory", len(names))

    async def lookup(self, user_id: str | None) -> str | None:
        """Return the display name for *user_id*, or ``None`` if unknown."""
        if not user_id:
            return None
        if user_id in self._names:
            return self._names[user_id]
        await self.ensure_loaded()
        return self._names.get(user_id)

    def cached_name(self, user_id: str) -> str | None:
        """Return the cached display name without touching the network."""
        return self._names.get(user_id)

    # -----------------------------------------------------------------------
    # Default user
    # -----------------------------------------------------------------------

    async def resolve_default_user(self) -> str:
        """Return the default user's id, resolving it from the full name once."""
        if self._default_user_id:
            return self._default_user_id

        async with self._resolve_lock:
            if self._default_user_id:
                return self._default_user_id

            if self._configured_user_id:
                user_id = self._configured_user_id
            else:
                user_id = await self._resolve_by_name()

            self._default_user_id = user_id
            self._persist(user_id)
            return user_id

    async def _resolve_by_name(self) -> str:
        if not self.user_full_name or not self.user_full_name.strip():
            raise ConfigurationError(
                "Set GONG_USER_ID or GONG_USER_FULL_NAME to resolve the default user."
            )
        target = self.user_full_name.strip().lower()

        matches: list[str] = []
        async for user in self.iter_users():
            if display_name(user).lower() != target:
                continue
            user_id = _text(user, "id")
            if not user_id:
                raise GongMCPError("Matched user has no id field; cannot proceed.")
            matches.append(user_id)

        if not matches:
            raise UserNotFoundError(
                f"No Gong user matched configured full name '{self.user_full_name}'."
            )

        user_id = min(matches)
        if len(matches) > 1:
            logger.info(
                "%d users match '%s'; picked %s", len(matches), self.user_full_name, user_id
            )
        else:
            logger.info("Resolved default Gong user '%s' to %s", self.user_full_name, user_id)
        return user_id

    def _persist(self, user_id: str) -> None:
        if not self.env_file:
            return
        try:
            if persist_env_value(self.env_file, USER_ID_ENV_KEY, user_id):
                logger.info("Saved %s to %s", USER_ID_ENV_KEY, self.env_file)
        except (OSError, UnicodeError) as e:
            logger.warning("Failed to persist %s to %s: %s", USER_ID_ENV_KEY, self.env_file, e)
