from typing import Any

import httpx
import pytest

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"
      xmlns:opensearch="http://a9.com/-/spec/opensearch/1.1/"
      xmlns:arxiv="http://arxiv.org/schemas/atom">
  <title type="html">ArXiv Query: search_query=au:LeCun&amp;id_list=&amp;start=0&amp;max_results=10</title>
  <id>http://arxiv.org/api/cHxbiOdZaP56ODnBPIenZhzg5f8</id>
  <updated>2024-01-01T00:00:00-05:00</updated>
  <opensearch:totalResults>42</opensearch:totalResults>
  <opensearch:startIndex>0</opensearch:startIndex>
  <opensearch:itemsPerPage>2</opensearch:itemsPerPage>
  <entry>
    <id>http://arxiv.org/abs/2104.13478v2</id>
    <updated>2021-05-02T17:50:55Z</updated>
    <published>2021-04-27T21:43:45Z</published>
    <title>Geometric Deep Learning:
      Grids, Groups, Graphs, Geodesics, and Gauges</title>
    <summary>  The last decade has witnessed
  an experimental revolution.
</summary>
    <author><name>Michael M. Bronstein</name></author>
    <author><name>Joan Bruna</name></author>
    <author><name></name></author>
    <arxiv:comment>156 pages</arxiv:comment>
    <link href="http://arxiv.org/abs/2104.13478v2" rel="alternate" type="text/html"/>
    <link title="pdf" href="http://arxiv.org/pdf/2104.13478v2" rel="related" type="application/pdf"/>
    <link href="http://arxiv.org/abs/2104.13478v2/extra"/>
    <link rel="related"/>
    <arxiv:primary_category term="cs.LG" scheme="http://arxiv.org/schemas/atom"/>
    <category term="cs.LG" scheme="http://arxiv.org/schemas/atom"/>
    <category term="cs.AI" scheme="http://arxiv.org/schemas/atom"/>
    <category term="cs.LG" scheme="http://arxiv.org/schemas/atom"/>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/cs/0001001v1</id>
    <updated>2000-01-01T00:00:00Z</updated>
    <published>2000-01-01T00:00:00Z</published>
    <title>An Old Style Identifier</title>
    <summary>Short.</summary>
    <author><name>A. Author</name></author>
    <category term="cs.CC" scheme="http://arxiv.org/schemas/atom"/>
  </entry>
</feed>
"""

EMPTY_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"
      xmlns:opensearch="http://a9.com/-/spec/opensearch/1.1/">
  <title>ArXiv Query: empty</title>
  <opensearch:totalResults>0</opensearch:totalResults>
  <opensearch:startIndex>0</opensearch:startIndex>
  <opensearch:itemsPerPage>0</opensearch:itemsPerPage>
</feed>
"""


class DummyResponse:
    def __init__(
        self,
        text: str = "",
        content: bytes | None = None,
        status_code: int = 200,
        url: str = "http://test.invalid/",
    ) -> None:
        self.text = text
        self.content = content if content is not None else text.encode("utf-8")
        self.status_code = status_code
        self.url = url

    def raise_for_status(self) -> None:
        if self.status_code < 400:
            return None
        request = httpx.Request("GET", self.url)
        response = httpx.Response(self.status_code, text=self.text, request=request)
        raise httpx.HTTPStatusError(
            f"HTTP {self.status_code}", request=request, response=response
        )


class FakeHttp:
    """Stands in for httpx.AsyncClient; records every GET."""

    def __init__(self) -> None:
        self.responses: list[Any] = []
        self.calls: list[dict[str, Any]] = []
        self.client_kwargs: list[dict[str, Any]] = []

    def respond(self, *items: Any) -> "FakeHttp":
        self.responses = list(items)
        return self

    def __call__(self, **kwargs: Any) -> "FakeHttp._Client":
        self.client_kwargs.append(kwargs)
        return FakeHttp._Client(self)

    class _Client:
        def __init__(self, owner: "FakeHttp") -> None:
            self.owner = owner

        async def __aenter__(self) -> "FakeHttp._Client":
            return self

        async def __aexit__(self, exc_type, exc, tb) -> bool:
            return False

        async def get(self, url: str, **kwargs: Any) -> DummyResponse:
            self.owner.calls.append({"url": url, **kwargs})
            responses = self.owner.responses
            item = responses.pop(0) if len(responses) > 1 else responses[0]
            if isinstance(item, Exception):
                raise item
            return item


@pytest.fixture
def fake_http(monkeypatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(httpx, "AsyncClient", fake)
    return fake


def build_pdf(text: str) -> bytes:
    """Assemble a one-page PDF showing *text* in Helvetica."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_at
    return bytes(out)


@pytest.fixture
def pdf_bytes() -> bytes:
    return build_pdf("Hello arXiv")
