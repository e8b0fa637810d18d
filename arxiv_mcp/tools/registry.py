"""Tool registry: routes calls by name and enforces parameter schemas."""

from typing import Any

from loguru import logger

from arxiv_mcp.errors import ToolNotFoundError, ToolValidationError
from arxiv_mcp.tools.base import Tool, ToolResult


class ToolRegistry:
    """
    Registry for tools.

    Holds no per-call state; each execute() is independent.
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool."""
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> None:
        """Unregister a tool by name."""
        self._tools.pop(name, None)

    def get(self, name: str) -> Tool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def get_definitions(self) -> list[dict[str, Any]]:
        """Get all tool definitions in MCP listing format."""
        return [tool.to_schema() for tool in self._tools.values()]

    async def execute(self, name: str, params: dict[str, Any] | None) -> ToolResult:
        """
        Execute a tool by name with given parameters.

        Raises:
            ToolNotFoundError: no tool with that name.
            ToolValidationError: arguments missing or mistyped; raised before
                the tool does any I/O.

        Any other failure inside the tool is returned as an error result.
        """
        tool = self._tools.get(name)
        if not tool:
            raise ToolNotFoundError(name)

        if params is not None and not isinstance(params, dict):
            raise ToolValidationError(name, ["arguments should be object"])
        params = tool.normalize_params(params or {})

        errors = tool.validate_params(params)
        if errors:
            raise ToolValidationError(name, errors)

        try:
            return await tool.execute(**params)
        except ToolValidationError:
            raise
        except Exception as e:
            logger.exception("Tool '{}' failed", name)
            return ToolResult.error(f"Error executing {name}: {e}")

    @property
    def tool_names(self) -> list[str]:
        """Get list of registered tool names."""
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
