"""Paper content pipeline: PDF cache and text extraction."""

from arxiv_mcp.content.cache import PdfCache, sanitize_paper_id
from arxiv_mcp.content.extract import clean_text, extract_text

__all__ = ["PdfCache", "clean_text", "extract_text", "sanitize_paper_id"]
