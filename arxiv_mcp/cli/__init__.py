"""CLI module for arxiv-mcp."""
