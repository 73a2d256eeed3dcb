"""Fixtures — mock HTTP transport, sample documents."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from tablefetch.extraction import Fetcher, FetchResult

SAMPLE_HTML = """<html><body>
<h1 class="title main">Cities</h1>
<p id="intro">Largest   cities
  by <b>population</b></p>
<table id="cities">
  <thead><tr><th>City</th><th>Country</th><th>Population</th></tr></thead>
  <tbody>
    <tr><td>Tokyo</td><td>Japan</td><td>37,400,068</td></tr>
    <tr><td>Delhi</td><td>India</td><td>28,514,000</td></tr>
  </tbody>
</table>
<table id="rates">
  <tr><th>Year</th><th>Rate</th></tr>
  <tr><td>Source: national survey</td><td>Source: national survey</td></tr>
  <tr><td>2019</td><td>1.5</td></tr>
  <tr><td>2020</td><td>2.25</td></tr>
</table>
<ul>
  <li><a href="/tokyo">Tokyo</a></li>
  <li><a href="/delhi" class="ext">Delhi</a></li>
</ul>
</body></html>
"""


def make_result(
    body: str | bytes,
    content_type: str = "text/html; charset=utf-8",
    url: str = "https://example.com/",
    encoding: str | None = "utf-8",
) -> FetchResult:
    content = body.encode("utf-8") if isinstance(body, str) else body
    return FetchResult(
        url=url,
        status_code=200,
        content_type=content_type,
        content=content,
        encoding=encoding,
    )


def mock_fetcher(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> Fetcher:
    return Fetcher(transport=httpx.MockTransport(handler), **kwargs)


@pytest.fixture
def recorded() -> list[httpx.Request]:
    return []


@pytest.fixture
def html_fetcher(recorded: list[httpx.Request]) -> Fetcher:
    """Fetcher that answers every request with SAMPLE_HTML."""

    def handler(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        return httpx.Response(
            200,
            content=SAMPLE_HTML.encode("utf-8"),
            headers={"content-type": "text/html; charset=utf-8"},
        )

    return mock_fetcher(handler)
