"""MCP server: exposes the arXiv paper tools to a host over stdio."""

from __future__ import annotations

import asyncio
import signal
from contextlib import suppress
from typing import Any

from loguru import logger
from mcp import types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from arxiv_mcp import __version__
from arxiv_mcp.arxiv.client import ArxivClient
from arxiv_mcp.config.schema import Config
from arxiv_mcp.content.cache import PdfCache
from arxiv_mcp.errors import ToolNotFoundError, ToolValidationError
from arxiv_mcp.tools.base import ToolResult
from arxiv_mcp.tools.papers import (
    GetPaperContentTool,
    GetPaperTool,
    SearchByCategoryTool,
    SearchPapersTool,
)
from arxiv_mcp.tools.registry import ToolRegistry


def build_registry(config: Config) -> ToolRegistry:
    """Create the four paper tools wired to the configured endpoints and cache."""
    client = ArxivClient(
        api_url=config.arxiv.api_url,
        timeout_seconds=config.arxiv.timeout_seconds,
        user_agent=config.server.user_agent,
    )
    cache = PdfCache(
        config.cache_path,
        timeout_seconds=config.cache.download_timeout_seconds,
        user_agent=config.server.user_agent,
    )
    paging = {
        "default_max_results": config.arxiv.default_max_results,
        "max_results_limit": config.arxiv.max_results_limit,
    }

    registry = ToolRegistry()
    registry.register(SearchPapersTool(client, **paging))
    registry.register(GetPaperTool(client))
    registry.register(SearchByCategoryTool(client, **paging))
    registry.register(GetPaperContentTool(cache, pdf_base_url=config.arxiv.pdf_base_url))
    return registry


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


class ArxivMCPServer:
    """MCP server for arXiv paper search and retrieval."""

    def __init__(self, config: Config | None = None, registry: ToolRegistry | None = None):
        self.config = config or Config()
        self.registry = registry or build_registry(self.config)
        self.server = Server(self.config.server.name)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        @self.server.list_tools()
        async def handle_list_tools() -> list[types.Tool]:
            return self.list_tools()

        # Registered directly: the decorator form converts raised errors into
        # tool results, but validation errors must reach the host as JSON-RPC errors.
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(name=d["name"], description=d["description"], inputSchema=d["inputSchema"])
            for d in self.registry.get_definitions()
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        """Dispatch one tool call.

        Raises:
            McpError: METHOD_NOT_FOUND for an unknown tool, INVALID_PARAMS when
                arguments are missing or mistyped.
        """
        logger.debug("Tool call {} args={}", name, arguments)
        try:
            result = await self.registry.execute(name, arguments)
        except ToolNotFoundError as e:
            raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=str(e))) from e
        except ToolValidationError as e:
            logger.warning("{}", e)
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e
        return to_call_tool_result(result)

    async def _handle_call_tool(self, req: types.CallToolRequest) -> types.ServerResult:
        result = await self.call_tool(req.params.name, req.params.arguments)
        return types.ServerResult(result)

    def initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=self.config.server.name,
            server_version=__version__,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
        )

    async def run(self) -> None:
        """Serve requests on stdin/stdout until the host closes the stream."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("{} v{} running on stdio", self.config.server.name, __version__)
            await self.server.run(read_stream, write_stream, self.initialization_options())

    async def serve(self) -> None:
        """Run until EOF, SIGINT or SIGTERM."""
        loop = asyncio.get_running_loop()
        task = asyncio.current_task()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(sig, task.cancel)
        try:
            await self.run()
        except asyncio.CancelledError:
            logger.info("Shutting down {}", self.config.server.name)
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                with suppress(NotImplementedError, RuntimeError):
                    loop.remove_signal_handler(sig)
