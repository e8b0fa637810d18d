import os
from pathlib import Path

import httpx
import pytest

from arxiv_mcp.content.cache import PdfCache, sanitize_paper_id
from arxiv_mcp.errors import PdfDownloadError
from conftest import DummyResponse

PDF_URL = "https://arxiv.org/pdf/cs/0001001.pdf"


def test_sanitize_paper_id() -> None:
    assert sanitize_paper_id("cs/0001001") == "cs_0001001"
    assert sanitize_paper_id("2104.13478") == "2104.13478"
    assert sanitize_paper_id("a\\b/c") == "a_b_c"


def test_path_for_flattens_old_style_ids(tmp_path) -> None:
    cache = PdfCache(tmp_path)
    assert cache.path_for("cs/0001001") == tmp_path / "cs_0001001.pdf"
    assert cache.contains("cs/0001001") is False


async def test_hit_skips_network(tmp_path, fake_http) -> None:
    (tmp_path / "cs_0001001.pdf").write_bytes(b"%PDF-cached")
    fake_http.respond(httpx.ConnectError("network must not be used"))

    path = await PdfCache(tmp_path).fetch(PDF_URL, "cs/0001001")

    assert path.read_bytes() == b"%PDF-cached"
    assert fake_http.calls == []


async def test_miss_downloads_once_and_persists(tmp_path, fake_http) -> None:
    cache_dir = tmp_path / "nested" / "pdfs"
    fake_http.respond(DummyResponse(content=b"%PDF-1.4 body"))
    cache = PdfCache(cache_dir, timeout_seconds=60, user_agent="arxiv-mcp/test")

    first = await cache.fetch(PDF_URL, "cs/0001001")
    second = await cache.fetch(PDF_URL, "cs/0001001")

    assert first == second == cache_dir / "cs_0001001.pdf"
    assert first.read_bytes() == b"%PDF-1.4 body"
    assert len(fake_http.calls) == 1
    assert fake_http.calls[0]["url"] == PDF_URL
    assert fake_http.calls[0]["headers"] == {"User-Agent": "arxiv-mcp/test"}
    assert fake_http.client_kwargs[0] == {"timeout": 60, "follow_redirects": True}
    assert cache.entries() == [first]
    assert not list(cache_dir.glob("*.part"))


async def test_http_error_leaves_no_file(tmp_path, fake_http) -> None:
    fake_http.respond(DummyResponse("Not Found", status_code=404))
    cache = PdfCache(tmp_path)

    with pytest.raises(PdfDownloadError) as exc:
        await cache.fetch(PDF_URL, "cs/0001001")

    assert exc.value.status_code == 404
    assert exc.value.detail == "Not Found"
    assert cache.entries() == []


async def test_timeout_becomes_download_error(tmp_path, fake_http) -> None:
    fake_http.respond(httpx.ReadTimeout("slow"))
    with pytest.raises(PdfDownloadError) as exc:
        await PdfCache(tmp_path, timeout_seconds=60).fetch(PDF_URL, "cs/0001001")
    assert "timed out after 60" in str(exc.value)


def test_entries_on_missing_directory(tmp_path) -> None:
    assert PdfCache(tmp_path / "missing").entries() == []


async def test_racing_writer_does_not_break_miss(tmp_path, fake_http, monkeypatch) -> None:
    fake_http.respond(DummyResponse(content=b"%PDF-ours"))
    cache = PdfCache(tmp_path)
    pdf_path = tmp_path / "2104.13478.pdf"
    # A stale partial file left under the shared name by another writer.
    (tmp_path / "2104.13478.pdf.part").write_bytes(b"%PDF-partial")
    sources = []
    real_replace = os.replace

    def racing_replace(src, dst):
        sources.append(Path(src))
        # Another process finishes its own download first.
        pdf_path.write_bytes(b"%PDF-theirs")
        real_replace(src, dst)

    monkeypatch.setattr(os, "replace", racing_replace)

    path = await cache.fetch("https://arxiv.org/pdf/2104.13478.pdf", "2104.13478")

    assert path == pdf_path
    assert pdf_path.read_bytes() == b"%PDF-ours"
    assert len(sources) == 1
    assert sources[0].parent == tmp_path
    assert sources[0].name != "2104.13478.pdf.part"
    assert not sources[0].exists()
    assert (tmp_path / "2104.13478.pdf.part").read_bytes() == b"%PDF-partial"
    assert cache.entries() == [pdf_path]


async def test_failed_write_removes_temp_file(tmp_path, fake_http, monkeypatch) -> None:
    fake_http.respond(DummyResponse(content=b"%PDF-ours"))

    def failing_replace(src, dst):
        raise PermissionError("read-only cache")

    monkeypatch.setattr(os, "replace", failing_replace)

    with pytest.raises(PdfDownloadError) as exc:
        await PdfCache(tmp_path).fetch("https://arxiv.org/pdf/2104.13478.pdf", "2104.13478")

    assert "read-only cache" in str(exc.value)
    assert list(tmp_path.iterdir()) == []
