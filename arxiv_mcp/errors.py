"""Exception types shared by the arXiv client, the PDF pipeline and the tools."""

from __future__ import annotations


class ArxivMCPError(Exception):
    """Base exception for arxiv-mcp failures."""


class UpstreamTransportError(ArxivMCPError):
    """Network failure, timeout, or non-success status from an arXiv endpoint."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @property
    def detail(self) -> str:
        """Upstream error body (first 1000 chars) when the server sent one, otherwise the message."""
        if self.body:
            return self.body if len(self.body) <= 1000 else self.body[:1000] + "..."
        return str(self)


class PdfDownloadError(UpstreamTransportError):
    """Raised when a PDF cannot be fetched or persisted on a cache miss."""


class ExtractionError(ArxivMCPError):
    """Raised when a PDF payload cannot be converted to text."""


class ToolNotFoundError(ArxivMCPError):
    """Raised when a call names a tool that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolValidationError(ArxivMCPError):
    """Raised when tool arguments are missing or mistyped."""

    def __init__(self, tool: str, errors: list[str]):
        self.tool = tool
        self.errors = list(errors)
        super().__init__(
            f"Missing or invalid parameters for tool '{tool}': " + "; ".join(self.errors)
        )
