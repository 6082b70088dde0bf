"""MCP application instance.

This module exists to avoid circular import issues when running with `python -m`.
All tool modules should import `mcp` from here, not from server.py.
"""

from mcp.server.fastmcp import FastMCP

mcp = FastMCP(
    "FlixBus Trips",
    instructions="FlixBus long-distance bus trips - station lookup, trip search and earlier/later paging",
)
