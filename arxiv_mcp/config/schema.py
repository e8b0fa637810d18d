"""Configuration schema using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from arxiv_mcp import __version__


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArxivConfig(Base):
    """Upstream arXiv endpoints and query limits."""

    api_url: str = "http://export.arxiv.org/api/query"
    pdf_base_url: str = "https://arxiv.org/pdf"
    timeout_seconds: float = 30.0
    default_max_results: int = 10
    max_results_limit: int = 2000  # arXiv API hard limit per request


class CacheConfig(Base):
    """Local PDF cache configuration."""

    directory: str = "~/.arxiv-mcp/cache/pdfs"
    download_timeout_seconds: float = 60.0


class ServerConfig(Base):
    """MCP server identity."""

    name: str = "arxiv-mcp-server"
    user_agent: str = f"arxiv-mcp/{__version__}"


class LoggingConfig(Base):
    """Log sink configuration (logs always go to stderr)."""

    level: str = "INFO"


class Config(BaseSettings):
    """Root configuration for the arXiv MCP server."""

    arxiv: ArxivConfig = Field(default_factory=ArxivConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def cache_path(self) -> Path:
        """Get expanded PDF cache directory."""
        return Path(self.cache.directory).expanduser()

    model_config = SettingsConfigDict(env_prefix="ARXIV_MCP_", env_nested_delimiter="__")
