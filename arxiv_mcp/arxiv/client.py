"""HTTP client for the arXiv query API."""

from __future__ import annotations

import httpx
from loguru import logger

from arxiv_mcp.arxiv.feed import FeedOutcome, parse_feed
from arxiv_mcp.arxiv.query import UpstreamQuery
from arxiv_mcp.errors import UpstreamTransportError

ARXIV_API_URL = "http://export.arxiv.org/api/query"


class ArxivClient:
    """Issue one GET per query against the arXiv Atom API and normalize the feed."""

    def __init__(
        self,
        api_url: str = ARXIV_API_URL,
        timeout_seconds: float = 30.0,
        user_agent: str | None = None,
    ):
        self.api_url = api_url
        self.timeout_seconds = max(1.0, timeout_seconds)
        self.user_agent = user_agent

    async def fetch_raw(self, query: UpstreamQuery) -> str:
        """Return the raw response body for *query*.

        Raises:
            UpstreamTransportError: on network failure, timeout or non-2xx status.
        """
        params = query.to_params()
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        logger.debug("arXiv query {} params={}", self.api_url, params)

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                resp = await client.get(self.api_url, params=params, headers=headers)
                resp.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamTransportError(
                f"Request timed out after {self.timeout_seconds}s: {e}"
            ) from e
        except httpx.HTTPStatusError as e:
            raise UpstreamTransportError(
                f"HTTP {e.response.status_code} from arXiv API",
                status_code=e.response.status_code,
                body=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(str(e) or e.__class__.__name__) from e

        return resp.text

    async def query(self, query: UpstreamQuery) -> FeedOutcome:
        """Run *query* and parse the response into a FeedResult or FeedParseFailure."""
        raw = await self.fetch_raw(query)
        outcome = parse_feed(raw)
        if outcome.ok:
            logger.debug("arXiv query returned {} papers", len(outcome.papers))
        return outcome
