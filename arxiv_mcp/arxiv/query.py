"""Search criteria and arXiv API query construction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

SortField = Literal["relevance", "lastUpdatedDate", "submittedDate"]
SortOrder = Literal["ascending", "descending"]

DEFAULT_MAX_RESULTS = 10
MAX_RESULTS_LIMIT = 2000

# Upstream boolean AND; the API reads "+" as a term separator.
AND_JOINER = "+AND+"


class SearchCriteria(BaseModel):
    """User-supplied search fields for search_papers / search_by_category.

    Accepts the tool schema names (generalQuery, startIndex, ...) as well as
    the snake_case and legacy wire names (query, start, max_results, sort_by).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    general_query: str | None = Field(
        default=None, validation_alias=AliasChoices("generalQuery", "general_query", "query")
    )
    category: str | None = None
    author: str | None = None
    title: str | None = None
    abstract: str | None = None
    start_index: int | None = Field(
        default=None, validation_alias=AliasChoices("startIndex", "start_index", "start")
    )
    max_results: int | None = Field(
        default=None, validation_alias=AliasChoices("maxResults", "max_results")
    )
    sort_field: SortField | None = Field(
        default=None, validation_alias=AliasChoices("sortField", "sort_field", "sortBy", "sort_by")
    )
    sort_order: SortOrder | None = Field(
        default=None, validation_alias=AliasChoices("sortOrder", "sort_order")
    )


@dataclass(frozen=True)
class UpstreamQuery:
    """Normalized parameter set for one GET against the arXiv query endpoint."""

    search_query: str | None = None
    id_list: str | None = None
    start: int | None = None
    max_results: int | None = None
    sort_by: str | None = None
    sort_order: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Return the query-string parameters, omitting unset values.

        An id_list selects papers directly, so search_query is dropped when
        both are present.
        """
        params: dict[str, Any] = {}
        if self.id_list:
            params["id_list"] = self.id_list
        elif self.search_query:
            params["search_query"] = self.search_query
        if self.start is not None:
            params["start"] = self.start
        if self.max_results is not None:
            params["max_results"] = self.max_results
        if self.sort_by:
            params["sortBy"] = self.sort_by
        if self.sort_order:
            params["sortOrder"] = self.sort_order
        return params


def _clean(value: str | None) -> str:
    return (value or "").strip()


def format_term(prefix: str, value: str) -> str:
    """Build one `prefix:value` term, quoting multi-word values as a phrase."""
    trimmed = value.strip()
    if any(ch.isspace() for ch in trimmed):
        return f'{prefix}:"{trimmed}"'
    return f"{prefix}:{trimmed}"


def build_search_expression(criteria: SearchCriteria) -> str:
    """Combine populated criteria into a single search_query expression.

    Order is fixed: general, category, author, title, abstract. Returns an
    empty string when nothing is populated.
    """
    terms: list[str] = []

    if _clean(criteria.general_query):
        terms.append(format_term("all", criteria.general_query))
    if _clean(criteria.category):
        # Categories are single tokens like cs.AI, never quoted.
        terms.append(f"cat:{_clean(criteria.category)}")
    if _clean(criteria.author):
        terms.append(format_term("au", criteria.author))
    if _clean(criteria.title):
        terms.append(format_term("ti", criteria.title))
    if _clean(criteria.abstract):
        terms.append(format_term("abs", criteria.abstract))

    return AND_JOINER.join(terms)


def clamp_max_results(
    value: int | None,
    default: int = DEFAULT_MAX_RESULTS,
    limit: int = MAX_RESULTS_LIMIT,
) -> int:
    """Apply the default page size and cap at the upstream limit."""
    if value is None:
        return default
    return min(value, limit)


def build_upstream_query(
    criteria: SearchCriteria,
    default_max_results: int = DEFAULT_MAX_RESULTS,
    max_results_limit: int = MAX_RESULTS_LIMIT,
) -> UpstreamQuery:
    """Translate search criteria into the upstream parameter set."""
    return UpstreamQuery(
        search_query=build_search_expression(criteria) or None,
        start=criteria.start_index,
        max_results=clamp_max_results(criteria.max_results, default_max_results, max_results_limit),
        sort_by=criteria.sort_field,
        sort_order=criteria.sort_order,
    )


def paper_query(paper_id: str) -> UpstreamQuery:
    """Query that fetches a single paper by its arXiv identifier."""
    return UpstreamQuery(id_list=paper_id.strip())
