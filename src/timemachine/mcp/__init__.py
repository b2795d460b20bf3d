"""MCP server and tools."""

from .server import TimeMachineServer, create_server

__all__ = ["TimeMachineServer", "create_server"]
