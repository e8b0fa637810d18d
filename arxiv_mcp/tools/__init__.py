"""Tool layer: schema-validated tools and the registry that dispatches them."""

from arxiv_mcp.tools.base import Tool, ToolResult
from arxiv_mcp.tools.registry import ToolRegistry

__all__ = ["Tool", "ToolResult", "ToolRegistry"]
