"""arxiv-mcp - arXiv search and paper content tools for MCP hosts."""

__version__ = "0.2.0"
__logo__ = "📄"
