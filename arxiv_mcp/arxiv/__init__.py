"""arXiv query API: query construction, feed parsing and the HTTP client."""

from arxiv_mcp.arxiv.client import ArxivClient
from arxiv_mcp.arxiv.feed import FeedOutcome, FeedParseFailure, FeedResult, PaperLink, PaperRecord, parse_feed
from arxiv_mcp.arxiv.query import SearchCriteria, UpstreamQuery, build_upstream_query, paper_query

__all__ = [
    "ArxivClient",
    "FeedOutcome",
    "FeedParseFailure",
    "FeedResult",
    "PaperLink",
    "PaperRecord",
    "SearchCriteria",
    "UpstreamQuery",
    "build_upstream_query",
    "paper_query",
    "parse_feed",
]
