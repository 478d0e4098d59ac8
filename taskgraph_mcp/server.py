"""FastMCP server initialization for TaskGraph MCP."""

from mcp.server.fastmcp import FastMCP

from taskgraph_mcp.config import get_config

# Initialize the MCP server
mcp = FastMCP("taskgraph_mcp")


def run() -> None:
    """Run the MCP server."""
    get_config().setup_logging()
    mcp.run()
