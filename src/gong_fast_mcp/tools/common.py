"""Helpers shared by the Gong MCP tool modules."""

from typing import Any

from fastmcp import Context
from fastmcp.exceptions import ToolError

from gong_fast_mcp.dispatch import dispatch
from gong_fast_mcp.session import GongSession

TOOL_ANNOTATIONS = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}


def get_session(ctx: Context) -> GongSession:
    """Extract the session from the lifespan context."""
    lc: dict[str, Any] = ctx.request_context.lifespan_context
    return lc["session"]


async def run_tool(ctx: Context, name: str, **arguments: Any) -> str:
    """Dispatch *name* and return its text, raising ``ToolError`` on failure.

    ``None`` arguments are treated as omitted.
    """
    args = {key: value for key, value in arguments.items() if value is not None}
    result = await dispatch(get_session(ctx), name, args)
    if result.is_error:
        raise ToolError(result.text)
    return result.text
