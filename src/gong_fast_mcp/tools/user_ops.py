"""MCP tools for Gong users."""

from typing import Annotated

from fastmcp import Context
from pydantic import Field

from gong_fast_mcp.server import mcp
from gong_fast_mcp.tools.common import TOOL_ANNOTATIONS, run_tool


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def get_users(
    ctx: Context,
    name_filter: Annotated[
        str | None,
        Field(description="Optional case-insensitive substring filter on user name"),
    ] = None,
) -> str:
    """List Gong users (all pages) with an optional name filter."""
    return await run_tool(ctx, "get_users", name_filter=name_filter)
