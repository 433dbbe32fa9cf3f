"""MCP application instance.

This module exists to avoid circular import issues when running with `python -m`.
All tool modules should import `mcp` from here, not from server.py.
"""

from mcp.server.fastmcp import FastMCP

# Initialize the MCP server
mcp = FastMCP(
    "HK Transit",
    instructions=(
        "Hong Kong multi-modal journey planning - MTR rail, KMB buses, "
        "green minibuses and walking. "
        "Bus route numbers are approximations unless stated otherwise."
    ),
)
