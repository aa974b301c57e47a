"""Gong MCP Server — FastMCP v2 implementation."""

import logging
import sys
from contextlib import asynccontextmanager

from fastmcp import FastMCP
from pydantic import ValidationError

from .config import Config
from .log import setup_logging
from .session import GongSession

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lifespan: build the per-process session (client, user directory, timezone)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP):
    config = Config()
    session = GongSession.from_config(config)
    try:
        yield {"config": config, "session": session}
    finally:
        await session.aclose()


# ---------------------------------------------------------------------------
# Server instance
# ---------------------------------------------------------------------------

mcp = FastMCP("gong", lifespan=lifespan)

# Importing tool modules triggers @mcp.tool() registration
from gong_fast_mcp.tools import call_ops, user_ops  # noqa: E402, F401

# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def load_config() -> Config:
    """Load settings, exiting with status 1 if they are missing or invalid."""
    try:
        return Config()
    except ValidationError as e:
        for err in e.errors():
            name = f"GONG_{str(err['loc'][0]).upper()}" if err["loc"] else "GONG_*"
            if err["type"] == "missing":
                print(f"Error: {name} environment variable is required", file=sys.stderr)
            else:
                print(f"Error: invalid {name}: {err['msg']}", file=sys.stderr)
        sys.exit(1)


def main():
    config = load_config()
    setup_logging(config.log_level)
    logger.info("Starting Gong MCP server against %s", config.api_url)
    mcp.run()
