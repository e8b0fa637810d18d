"""Atom feed normalization for arXiv API responses."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Union
from xml.etree import ElementTree as ET

from loguru import logger

NS = {
    "a": "http://www.w3.org/2005/Atom",
    "opensearch": "http://a9.com/-/spec/opensearch/1.1/",
    "arxiv": "http://arxiv.org/schemas/atom",
}

ABS_URL_PREFIXES = ("http://arxiv.org/abs/", "https://arxiv.org/abs/")
RAW_RESPONSE_LIMIT = 1000
PARSE_ERROR_MESSAGE = "Failed to parse arXiv response"

_WS_RE = re.compile(r"\s+")


def _safe_int(value: Any) -> int | None:
    try:
        if value is None:
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


def _normalize_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _collapse(value: Any) -> str:
    return _WS_RE.sub(" ", _normalize_text(value))


def short_id(entry_id: str) -> str:
    """Strip the abs URL prefix from an entry id; unknown forms pass through."""
    v = (entry_id or "").strip()
    for prefix in ABS_URL_PREFIXES:
        if v.startswith(prefix):
            return v[len(prefix):]
    return v


@dataclass(frozen=True)
class PaperLink:
    href: str
    rel: str = "alternate"
    type: str = "text/html"

    def to_dict(self) -> dict[str, str]:
        return {"href": self.href, "rel": self.rel, "type": self.type}


@dataclass(frozen=True)
class PaperRecord:
    """One arXiv entry, normalized."""

    id: str
    arxiv_id: str
    title: str = ""
    summary: str = ""
    authors: tuple[str, ...] = ()
    published: str = ""
    updated: str = ""
    categories: tuple[str, ...] = ()
    links: tuple[PaperLink, ...] = ()
    primary_category: str = ""
    comment: str = ""
    journal_ref: str = ""
    doi: str = ""

    @property
    def pdf_url(self) -> str:
        for link in self.links:
            if link.type == "application/pdf":
                return link.href
        return ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "authors": list(self.authors),
            "published": self.published,
            "updated": self.updated,
            "categories": list(self.categories),
            "links": [link.to_dict() for link in self.links],
            "arxiv_id": self.arxiv_id,
        }
        # Optional arXiv extension fields are only emitted when present.
        for key in ("primary_category", "comment", "journal_ref", "doi"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data


@dataclass(frozen=True)
class FeedResult:
    """A successfully parsed feed page."""

    feed_title: str = ""
    total_results: int = 0
    start_index: int = 0
    items_per_page: int = 0
    papers: tuple[PaperRecord, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "feed_title": self.feed_title,
            "total_results": self.total_results,
            "start_index": self.start_index,
            "items_per_page": self.items_per_page,
            "papers": [paper.to_dict() for paper in self.papers],
        }


@dataclass(frozen=True)
class FeedParseFailure:
    """Best-effort result for a response that could not be decomposed."""

    error: str
    raw_response: str

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "raw_response": self.raw_response}


FeedOutcome = Union[FeedResult, FeedParseFailure]


def _parse_entry(entry: ET.Element) -> PaperRecord:
    """Parse one Atom entry into a PaperRecord."""
    entry_id = _normalize_text(entry.findtext("a:id", default="", namespaces=NS))

    authors = [
        _normalize_text(author.findtext("a:name", default="", namespaces=NS))
        for author in entry.findall("a:author", NS)
    ]

    categories: list[str] = []
    for category in entry.findall("a:category", NS):
        term = category.attrib.get("term", "")
        if term and term not in categories:
            categories.append(term)

    links = []
    for link in entry.findall("a:link", NS):
        href = link.attrib.get("href")
        if not href:
            continue
        links.append(
            PaperLink(
                href=href,
                rel=link.attrib.get("rel") or "alternate",
                type=link.attrib.get("type") or "text/html",
            )
        )

    primary = entry.find("arxiv:primary_category", NS)

    return PaperRecord(
        id=entry_id,
        arxiv_id=short_id(entry_id),
        title=_collapse(entry.findtext("a:title", default="", namespaces=NS)),
        summary=_collapse(entry.findtext("a:summary", default="", namespaces=NS)),
        authors=tuple(a for a in authors if a),
        published=_normalize_text(entry.findtext("a:published", default="", namespaces=NS)),
        updated=_normalize_text(entry.findtext("a:updated", default="", namespaces=NS)),
        categories=tuple(categories),
        links=tuple(links),
        primary_category=primary.attrib.get("term", "") if primary is not None else "",
        comment=_collapse(entry.findtext("arxiv:comment", default="", namespaces=NS)),
        journal_ref=_collapse(entry.findtext("arxiv:journal_ref", default="", namespaces=NS)),
        doi=_normalize_text(entry.findtext("arxiv:doi", default="", namespaces=NS)),
    )


def truncate_raw(raw: str, limit: int = RAW_RESPONSE_LIMIT) -> str:
    return raw[:limit] + "..."


def parse_feed(raw: str) -> FeedOutcome:
    """Parse an arXiv Atom response body.

    Missing feed-level fields default to "" or 0. If the document cannot be
    parsed, or any entry fails to decompose, the whole response degrades to
    a FeedParseFailure carrying the first part of the raw payload. This
    function does not raise.
    """
    try:
        root = ET.fromstring(raw)
        papers = tuple(_parse_entry(entry) for entry in root.findall("a:entry", NS))
        return FeedResult(
            feed_title=_normalize_text(root.findtext("a:title", default="", namespaces=NS)),
            total_results=_safe_int(root.findtext("opensearch:totalResults", namespaces=NS)) or 0,
            start_index=_safe_int(root.findtext("opensearch:startIndex", namespaces=NS)) or 0,
            items_per_page=_safe_int(root.findtext("opensearch:itemsPerPage", namespaces=NS)) or 0,
            papers=papers,
        )
    except (ET.ParseError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Failed to parse arXiv response ({} chars): {}", len(raw or ""), e)
        return FeedParseFailure(error=PARSE_ERROR_MESSAGE, raw_response=truncate_raw(raw or ""))
