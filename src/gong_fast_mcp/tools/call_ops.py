"""MCP tools for Gong calls, activity and transcripts."""

from typing import Annotated

from fastmcp import Context
from pydantic import Field

from gong_fast_mcp.server import mcp
from gong_fast_mcp.tools.common import TOOL_ANNOTATIONS, run_tool

# Parameter names mirror the Gong API field names callers already use.


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def list_calls(
    ctx: Context,
    fromDateTime: Annotated[
        str | None,
        Field(description="Start date/time in ISO format (e.g. 2024-03-01T00:00:00Z)"),
    ] = None,
    toDateTime: Annotated[
        str | None,
        Field(description="End date/time in ISO format (e.g. 2024-03-31T23:59:59Z)"),
    ] = None,
) -> str:
    """List Gong calls with optional date range filtering.

    Returns call details including ID, title, start/end times, participants
    and duration.
    """
    return await run_tool(
        ctx, "list_calls", fromDateTime=fromDateTime, toDateTime=toDateTime
    )


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def list_calls_extensive(
    ctx: Context,
    start_date: Annotated[
        str | None, Field(description="Start date/time ISO (fromDateTime filter)")
    ] = None,
    end_date: Annotated[
        str | None, Field(description="End date/time ISO (toDateTime filter)")
    ] = None,
    user_id: Annotated[
        str | None, Field(description="Single Gong user id to filter host/owner")
    ] = None,
    user_ids: Annotated[
        list[str] | None,
        Field(description="Gong user ids; overrides default user resolution"),
    ] = None,
    userIds: Annotated[list[str] | None, Field(description="Alias for user_ids")] = None,
    text: Annotated[
        str | None, Field(description="Optional text/customer filter supported by Gong")
    ] = None,
) -> str:
    """List detailed, normalized Gong calls via /v2/calls/extensive.

    Supports a date range, user filter and text filter. Defaults to the
    configured default user when no user ids are given.
    """
    return await run_tool(
        ctx,
        "list_calls_extensive",
        start_date=start_date,
        end_date=end_date,
        user_id=user_id,
        user_ids=user_ids,
        userIds=userIds,
        text=text,
    )


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def activity_day_by_day(
    ctx: Context,
    fromDate: Annotated[
        str, Field(description="Inclusive start date YYYY-MM-DD (company time zone).")
    ],
    toDate: Annotated[
        str, Field(description="Exclusive end date YYYY-MM-DD (company time zone).")
    ],
    userIds: Annotated[
        list[str] | None,
        Field(description="Optional Gong user IDs. Defaults to the resolved user."),
    ] = None,
    cursor: Annotated[
        str | None, Field(description="Optional cursor for pagination.")
    ] = None,
) -> str:
    """Retrieve daily activity for users between dates.

    Returns call IDs for attended/hosted calls, feedback and other daily
    stats.
    """
    return await run_tool(
        ctx,
        "activity_day_by_day",
        fromDate=fromDate,
        toDate=toDate,
        userIds=userIds,
        cursor=cursor,
    )


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def my_calls_range(
    ctx: Context,
    fromDate: Annotated[
        str | None, Field(description="Inclusive start date YYYY-MM-DD")
    ] = None,
    toDate: Annotated[str | None, Field(description="Exclusive end date YYYY-MM-DD")] = None,
    daysBack: Annotated[
        float | None,
        Field(
            description=(
                "Number of days to look back when dates are omitted (defaults to 5)"
            )
        ),
    ] = None,
    userIds: Annotated[
        list[str] | None,
        Field(description="Optional Gong user IDs; defaults to the resolved user."),
    ] = None,
    userId: Annotated[
        str | None, Field(description="Optional single Gong user ID")
    ] = None,
) -> str:
    """List calls I hosted or attended in a date range.

    Combines day-by-day stats with call details. Dates are company time
    zone; toDate is exclusive and never later than today.
    """
    return await run_tool(
        ctx,
        "my_calls_range",
        fromDate=fromDate,
        toDate=toDate,
        daysBack=daysBack,
        userIds=userIds,
        userId=userId,
    )


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def my_calls_today(ctx: Context) -> str:
    """List today's calls for the default user.

    Uses the cached GONG_USER_ID, resolving it once from
    GONG_USER_FULL_NAME when missing.
    """
    return await run_tool(ctx, "my_calls_today")


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def retrieve_transcripts(
    ctx: Context,
    callIds: Annotated[
        str | list[str],
        Field(description="A Gong call ID or array of Gong call IDs"),
    ],
) -> str:
    """Retrieve transcripts for the given call IDs.

    Returns speaker IDs, topics and timestamped sentences.
    """
    return await run_tool(ctx, "retrieve_transcripts", callIds=callIds)
