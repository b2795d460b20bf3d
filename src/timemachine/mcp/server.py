"""MCP server exposing history generation and reset as tools."""

from __future__ import annotations

import random
from typing import Any, Callable, Dict

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from ..config import TimeMachineConfig
from ..git.driver import GitDriver, RepositoryDriver
from ..synth import CommitSynthesizer


class TimeMachineServer:
    """MCP server bound to a single repository driver."""

    def __init__(
        self,
        config: TimeMachineConfig | None = None,
        driver: RepositoryDriver | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or TimeMachineConfig()
        self.driver = driver or GitDriver(self.config)
        self.synthesizer = CommitSynthesizer(self.driver, self.config, rng)
        self.server = Server("timemachine")
        self.tools: Dict[str, Callable] = {}
        self.tool_metadata: Dict[str, tuple[str, Dict]] = {}

        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Set up MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return [
                types.Tool(
                    name=tool_name,
                    description=desc,
                    inputSchema=schema,
                )
                for tool_name, (desc, schema) in self.tool_metadata.items()
            ]

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
            return [types.TextContent(type="text", text=self.call(name, arguments))]

    def call(self, name: str, arguments: Dict[str, Any] | None) -> str:
        """Invoke a registered tool synchronously and return its JSON text."""

        if name not in self.tools:
            raise ValueError(f"Unknown tool: {name}")
        return self.tools[name](self, arguments or {})

    def register_tool(
        self,
        name: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: Callable,
    ) -> None:
        """Register an MCP tool.

        Parameters
        ----------
        name:
            Tool name
        description:
            Tool description
        input_schema:
            JSON schema for tool inputs
        handler:
            Called as ``handler(server, arguments)``; returns a JSON string
        """
        self.tools[name] = handler
        self.tool_metadata[name] = (description, input_schema)

    async def run(self) -> None:
        """Run the MCP server with stdio transport."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def create_server(
    config: TimeMachineConfig | None = None,
    driver: RepositoryDriver | None = None,
    rng: random.Random | None = None,
) -> TimeMachineServer:
    """Create an MCP server with the history tools registered."""
    server = TimeMachineServer(config, driver, rng)

    from . import tools

    tools.register_tools(server)
    return server
