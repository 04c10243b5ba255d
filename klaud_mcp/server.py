"""Main MCP server exposing the Klaud API catalog as tools."""

import asyncio
import logging
from typing import Optional

from mcp import Tool
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import TextContent

from .config.settings import Settings, configure_logging
from .core.dispatcher import Dispatcher
from .registry.operation_registry import OperationRegistry
from .registry.operations import create_registry

logger = logging.getLogger(__name__)

SERVER_NAME = "klaud-api"
SERVER_VERSION = "1.0.0"


class ToolInvocationError(Exception):
    """Raised inside the call_tool handler so the MCP layer sets isError."""
    pass


class KlaudMCPServer:
    """MCP Server forwarding tool calls to the Klaud API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[OperationRegistry] = None,
        dispatcher: Optional[Dispatcher] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.registry = registry if registry is not None else create_registry()
        self.dispatcher = dispatcher or Dispatcher(self.settings, self.registry)

        # Create MCP server instance
        self.server = Server(SERVER_NAME)

        # Register handlers
        self._register_handlers()

    def list_tools(self) -> list[Tool]:
        """Build one MCP tool per registered operation."""
        return [
            Tool(
                name=operation.name,
                description=operation.description,
                inputSchema=operation.input_schema,
            )
            for operation in self.registry.list_operations()
        ]

    async def call_tool(self, name: str, arguments: Optional[dict]) -> list[TextContent]:
        """Invoke an operation; failures raise ToolInvocationError with the message."""
        result = await self.dispatcher.invoke(name, arguments or {})
        if result.is_error:
            raise ToolInvocationError(result.to_text())
        return [TextContent(type="text", text=result.to_text())]

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List all available tools."""
            return self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict) -> list[TextContent]:
            """Route tool calls through the dispatcher."""
            return await self.call_tool(name, arguments)

    async def run(self):
        """Run the MCP server on stdio."""
        from mcp.server.stdio import stdio_server

        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info(f"{SERVER_NAME} MCP server running on stdio")
                await self.server.run(
                    read_stream,
                    write_stream,
                    InitializationOptions(
                        server_name=SERVER_NAME,
                        server_version=SERVER_VERSION,
                        capabilities=self.server.get_capabilities(
                            notification_options=NotificationOptions(),
                            experimental_capabilities={}
                        )
                    )
                )
        finally:
            await self.dispatcher.aclose()


def main():
    """Main entry point for the MCP server."""
    settings = Settings.from_env()
    configure_logging(settings)
    server = KlaudMCPServer(settings)
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
