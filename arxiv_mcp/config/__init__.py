"""Configuration module for the arXiv MCP server."""

from arxiv_mcp.config.loader import get_config_path, load_config
from arxiv_mcp.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
