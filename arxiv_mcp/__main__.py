"""Entry point for running arxiv-mcp as a module: python -m arxiv_mcp."""

from arxiv_mcp.cli.commands import app

if __name__ == "__main__":
    app()
