"""Local PDF cache keyed by arXiv identifier."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

import httpx
from loguru import logger

from arxiv_mcp.errors import PdfDownloadError

_SEPARATORS = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())


def sanitize_paper_id(paper_id: str) -> str:
    """Map an identifier to a flat file stem (cs/0001001 -> cs_0001001)."""
    text = (paper_id or "").strip()
    for sep in _SEPARATORS:
        text = text.replace(sep, "_")
    return text


class PdfCache:
    """Check-then-fetch cache of arXiv PDFs on local disk.

    A cached file is returned as-is: arXiv PDFs for a given identifier do
    not change, so there is no revalidation. Entries are never deleted.
    Concurrent misses for the same identifier may both download; the last
    rename wins and both writes carry the same bytes.
    """

    def __init__(
        self,
        directory: Path,
        timeout_seconds: float = 60.0,
        user_agent: str | None = None,
    ):
        self.directory = Path(directory).expanduser()
        self.timeout_seconds = max(1.0, timeout_seconds)
        self.user_agent = user_agent

    def path_for(self, paper_id: str) -> Path:
        return self.directory / f"{sanitize_paper_id(paper_id)}.pdf"

    def contains(self, paper_id: str) -> bool:
        return self.path_for(paper_id).exists()

    def entries(self) -> list[Path]:
        """Cached PDF files, sorted by name."""
        if not self.directory.exists():
            return []
        return sorted(p for p in self.directory.glob("*.pdf") if p.is_file())

    async def fetch(self, url: str, paper_id: str) -> Path:
        """Return the local path of the PDF for *paper_id*, downloading *url* on a miss.

        Raises:
            PdfDownloadError: network or filesystem failure on the miss path.
        """
        pdf_path = self.path_for(paper_id)
        if pdf_path.exists():
            logger.info("Using cached PDF for {}", paper_id)
            return pdf_path

        logger.info("Downloading PDF for {} from {}", paper_id, url)
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                follow_redirects=True,
            ) as client:
                resp = await client.get(url, headers=headers)
                resp.raise_for_status()

            await asyncio.to_thread(self._store, pdf_path, resp.content)
        except httpx.HTTPStatusError as e:
            raise PdfDownloadError(
                f"Failed to download PDF: HTTP {e.response.status_code} from {url}",
                status_code=e.response.status_code,
                body=e.response.text,
            ) from e
        except httpx.TimeoutException as e:
            raise PdfDownloadError(
                f"Failed to download PDF: timed out after {self.timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            raise PdfDownloadError(f"Failed to download PDF: {str(e) or e.__class__.__name__}") from e
        except OSError as e:
            raise PdfDownloadError(f"Failed to download PDF: {e}") from e

        logger.info("Saved PDF for {} ({} bytes)", paper_id, len(resp.content))
        return pdf_path

    def _store(self, pdf_path: Path, data: bytes) -> None:
        """Write *data* to a private temp file beside *pdf_path*, then rename it into place.

        Each call uses its own temp name, so writers in other processes
        sharing the directory never touch this partial file.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.directory,
                prefix=f"{pdf_path.stem}.",
                suffix=".part",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                f.write(data)
            os.replace(tmp_path, pdf_path)
        except OSError:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise
