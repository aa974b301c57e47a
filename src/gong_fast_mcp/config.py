"""Application settings via pydantic-settings."""

import os

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.gong.io/v2"
DEFAULT_WEB_URL = "https://app.gong.io"


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GONG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    access_key: str = Field(description="Gong API access key")
    access_secret: str = Field(description="Gong API access key secret")
    user_full_name: str | None = Field(
        default=None,
        description="Full name used to resolve the default Gong user.",
    )
    user_id: str | None = Field(
        default=None,
        description=(
            "Pre-resolved default Gong user id. Written back to the env file "
            "after the first successful resolution."
        ),
    )
    api_url: str = Field(default=DEFAULT_API_URL, description="Gong API base URL")
    web_url: str = Field(
        default=DEFAULT_WEB_URL,
        description="Gong web app root used to build call links.",
    )
    request_timeout: float = Field(
        default=30.0, description="Timeout in seconds for each Gong API request."
    )
    max_pages: int = Field(
        default=50,
        ge=1,
        description="Maximum number of pages fetched by any paginated listing.",
    )
    max_concurrency: int = Field(
        default=5,
        ge=1,
        description="Maximum number of call detail requests in flight at once.",
    )
    env_file: str = Field(
        default=".env",
        description="File the resolved GONG_USER_ID is persisted into.",
    )
    timezone: str | None = Field(
        default=None,
        description="IANA timezone for 'today' and displayed call times. Detected when unset.",
    )
    log_level: str = Field(default="info", description="Logging level")

    @model_validator(mode="after")
    def _normalize(self) -> "Config":
        object.__setattr__(self, "env_file", os.path.expanduser(self.env_file))
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))
        object.__setattr__(self, "web_url", self.web_url.rstrip("/"))
        if self.user_id is not None and not self.user_id.strip():
            object.__setattr__(self, "user_id", None)
        return self
