"""
conftest.py: shared pytest fixtures
Adds the repo root to sys.path so `app.*` imports resolve correctly
regardless of where pytest is invoked from.
"""

import sys
import asyncio
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import httpx
import pytest
from fastapi.testclient import TestClient
from app.main import app
from app.schemas.crawl import PageData
from app.services.analysis.page_parser import parse_page_data
from app.services.analysis.utils.scrape_utils import parse_html

CONNECT_ERROR = "connect-error"


@pytest.fixture(scope="session")
def client():
    """Synchronous API client, the crawl service is patched or fails before any request."""
    with TestClient(app) as c:
        yield c


def _make_transport(pages, robots=None, rendered=None, calls=None):
    """
    Build an httpx.MockTransport serving a fake site.

    pages maps a path to an HTML string, a status code, CONNECT_ERROR or a
    ready made httpx.Response. Unknown paths are 404. robots is the
    robots.txt body (404 when None) and rendered is the rendering proxy's
    body (HTTP 500 when None), either may also be an httpx.Response.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))

        if request.url.host == "r.jina.ai":
            if rendered is None:
                return httpx.Response(500)
            if isinstance(rendered, httpx.Response):
                return rendered
            return httpx.Response(200, text=rendered)

        if request.url.path == "/robots.txt":
            if robots is None:
                return httpx.Response(404)
            if isinstance(robots, httpx.Response):
                return robots
            if robots == CONNECT_ERROR:
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(200, text=robots)

        page = pages.get(request.url.path)
        if page is None:
            return httpx.Response(404)
        if isinstance(page, httpx.Response):
            return page
        if page == CONNECT_ERROR:
            raise httpx.ConnectError("Connection refused", request=request)
        if isinstance(page, int):
            return httpx.Response(page)
        return httpx.Response(200, html=page)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_transport():
    return _make_transport


def _make_page(html: str, url: str = "https://example.com/", keywords=None, load_time: int = 120) -> PageData:
    return parse_page_data(parse_html(html), url, keywords or [], load_time)


@pytest.fixture
def make_page():
    return _make_page


@pytest.fixture
def organization_jsonld():
    return '<script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization", "name": "Example Corp"}</script>'


@pytest.fixture
def connect_error():
    """Value that makes the mock transport raise httpx.ConnectError for a path."""
    return CONNECT_ERROR


@pytest.fixture
def slow_response():
    """
    Factory for a 200 response whose body trickles in one small chunk per
    delay, so no single read ever stalls but the whole download is slow.
    """
    def _slow_response(chunks: int = 40, delay: float = 0.05) -> httpx.Response:
        async def body():
            yield b"<html><body>"
            for _ in range(chunks):
                await asyncio.sleep(delay)
                yield b"<p>slow</p>"
            yield b"</body></html>"

        return httpx.Response(200, headers={"Content-Type": "text/html"}, content=body())

    return _slow_response
