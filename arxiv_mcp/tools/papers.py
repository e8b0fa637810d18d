"""arXiv paper tools: search, get by id, search by category, full-text content."""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger
from pydantic import ValidationError

from arxiv_mcp.arxiv.client import ArxivClient
from arxiv_mcp.arxiv.query import (
    DEFAULT_MAX_RESULTS,
    MAX_RESULTS_LIMIT,
    SearchCriteria,
    UpstreamQuery,
    build_upstream_query,
    paper_query,
)
from arxiv_mcp.content.cache import PdfCache
from arxiv_mcp.content.extract import clean_text, extract_text
from arxiv_mcp.errors import ExtractionError, ToolValidationError, UpstreamTransportError
from arxiv_mcp.tools.base import Tool, ToolResult

PDF_BASE_URL = "https://arxiv.org/pdf"

_PAPER_ID_SCHEMA = {
    "type": "string",
    "minLength": 1,
    "description": "arXiv paper ID (e.g., 2104.13478 or cs/0001001)",
}

_PAGING_PROPERTIES: dict[str, Any] = {
    "startIndex": {
        "type": "integer",
        "description": "Starting index for pagination (0-based)",
    },
    "maxResults": {
        "type": "integer",
        "description": "Maximum number of results to return (max 2000)",
    },
    "sortField": {
        "type": "string",
        "description": "Sort by: relevance, lastUpdatedDate, submittedDate",
        "enum": ["relevance", "lastUpdatedDate", "submittedDate"],
    },
    "sortOrder": {
        "type": "string",
        "description": "Sort order: ascending or descending",
        "enum": ["ascending", "descending"],
    },
}

_PAGING_ALIASES = {
    "start": "startIndex",
    "max_results": "maxResults",
    "sort_by": "sortField",
    "sort_order": "sortOrder",
}


def _criteria(tool: str, params: dict[str, Any]) -> SearchCriteria:
    try:
        return SearchCriteria.model_validate(params)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or 'parameter'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ToolValidationError(tool, errors) from e


def _required_text(tool: str, field: str, value: str) -> str:
    text = value.strip()
    if not text:
        raise ToolValidationError(tool, [f"{field} must not be blank"])
    return text


async def _run_query(client: ArxivClient, query: UpstreamQuery) -> ToolResult:
    try:
        outcome = await client.query(query)
    except UpstreamTransportError as e:
        logger.error("arXiv API error: {}", e)
        return ToolResult.error(f"arXiv API error: {e.detail}")
    return ToolResult.json(outcome.to_dict())


class SearchPapersTool(Tool):
    """Search arXiv by any combination of query, category, author, title and abstract."""

    name = "search_papers"
    description = "Search for papers on arXiv by various criteria"
    parameters = {
        "type": "object",
        "properties": {
            "generalQuery": {
                "type": "string",
                "description": "General search query across all fields",
            },
            "category": {
                "type": "string",
                "description": "arXiv category (e.g., cs.AI, physics.optics)",
            },
            "author": {"type": "string", "description": "Author name"},
            "title": {"type": "string", "description": "Words in the title"},
            "abstract": {"type": "string", "description": "Words in the abstract"},
            **_PAGING_PROPERTIES,
        },
    }
    param_aliases = {"query": "generalQuery", **_PAGING_ALIASES}

    def __init__(
        self,
        client: ArxivClient,
        default_max_results: int = DEFAULT_MAX_RESULTS,
        max_results_limit: int = MAX_RESULTS_LIMIT,
    ):
        self.client = client
        self.default_max_results = default_max_results
        self.max_results_limit = max_results_limit

    async def execute(self, **kwargs: Any) -> ToolResult:
        criteria = _criteria(self.name, kwargs)
        query = build_upstream_query(criteria, self.default_max_results, self.max_results_limit)
        return await _run_query(self.client, query)


class GetPaperTool(Tool):
    """Fetch one paper's metadata by arXiv identifier."""

    name = "get_paper"
    description = "Get details about a specific paper by its arXiv ID"
    parameters = {
        "type": "object",
        "properties": {"paperId": _PAPER_ID_SCHEMA},
        "required": ["paperId"],
    }
    param_aliases = {"paper_id": "paperId"}

    def __init__(self, client: ArxivClient):
        self.client = client

    async def execute(self, paperId: str, **kwargs: Any) -> ToolResult:
        paper_id = _required_text(self.name, "paperId", paperId)
        return await _run_query(self.client, paper_query(paper_id))


class SearchByCategoryTool(Tool):
    """List papers in one arXiv category."""

    name = "search_by_category"
    description = "Search for papers in a specific arXiv category"
    parameters = {
        "type": "object",
        "properties": {
            "category": {
                "type": "string",
                "minLength": 1,
                "description": "arXiv category (e.g., cs.AI, physics.optics)",
            },
            **_PAGING_PROPERTIES,
        },
        "required": ["category"],
    }
    param_aliases = dict(_PAGING_ALIASES)

    def __init__(
        self,
        client: ArxivClient,
        default_max_results: int = DEFAULT_MAX_RESULTS,
        max_results_limit: int = MAX_RESULTS_LIMIT,
    ):
        self.client = client
        self.default_max_results = default_max_results
        self.max_results_limit = max_results_limit

    async def execute(self, **kwargs: Any) -> ToolResult:
        _required_text(self.name, "category", kwargs["category"])
        criteria = _criteria(
            self.name,
            {k: v for k, v in kwargs.items() if k == "category" or k in _PAGING_PROPERTIES},
        )
        query = build_upstream_query(criteria, self.default_max_results, self.max_results_limit)
        return await _run_query(self.client, query)


class GetPaperContentTool(Tool):
    """Download (or reuse) a paper's PDF and return its text."""

    name = "get_paper_content"
    description = (
        "Get the full text content of a paper by downloading and extracting text from its PDF"
    )
    parameters = {
        "type": "object",
        "properties": {"paperId": _PAPER_ID_SCHEMA},
        "required": ["paperId"],
    }
    param_aliases = {"paper_id": "paperId"}

    def __init__(self, cache: PdfCache, pdf_base_url: str = PDF_BASE_URL):
        self.cache = cache
        self.pdf_base_url = pdf_base_url.rstrip("/")

    def pdf_url(self, paper_id: str) -> str:
        return f"{self.pdf_base_url}/{paper_id}.pdf"

    async def execute(self, paperId: str, **kwargs: Any) -> ToolResult:
        paper_id = _required_text(self.name, "paperId", paperId)
        try:
            pdf_path = await self.cache.fetch(self.pdf_url(paper_id), paper_id)
            data = await asyncio.to_thread(pdf_path.read_bytes)
            text = await asyncio.to_thread(extract_text, data)
        except UpstreamTransportError as e:
            logger.error("Error retrieving paper content for {}: {}", paper_id, e)
            message = f"{e}: {e.detail}" if e.body else str(e)
            return ToolResult.error(f"Error retrieving paper content: {message}")
        except (ExtractionError, OSError) as e:
            logger.error("Error processing paper content for {}: {}", paper_id, e)
            return ToolResult.error(f"Error processing paper content: {e}")

        return ToolResult(clean_text(text))
