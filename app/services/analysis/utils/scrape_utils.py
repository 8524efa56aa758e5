"""
Scraping utility functions.
This module contains utilities for fetching and parsing website pages.
"""

import re
import time
import asyncio
import logging
import httpx
from bs4 import BeautifulSoup
from bs4.element import PreformattedString
from typing import Tuple, Dict, Optional
from urllib.parse import urlparse, urlunparse
from app.core.config import settings
from app.core.constants import NON_CONTENT_TAGS
from app.core.exceptions import InvalidUrlError

logger = logging.getLogger(__name__)

def get_crawler_headers() -> Dict[str, str]:
    """Headers sent with every page fetch."""
    return {
        "User-Agent": settings.CRAWLER_USER_AGENT,
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "en-US,en;q=0.9",
    }

def normalize_target_url(url: Optional[str]) -> str:
    """
    Normalize a user supplied URL, prefixing https:// when no scheme is given.

    Raises:
        InvalidUrlError: if the URL is missing or has no usable host
    """
    if not url or not url.strip():
        raise InvalidUrlError("URL is required")

    url = url.strip()
    if not re.match(r"^[a-z][a-z0-9+.-]*://", url, re.IGNORECASE):
        url = f"https://{url}"

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        raise InvalidUrlError("Invalid URL format")

    if parsed.scheme not in ("http", "https") or not hostname or any(c.isspace() for c in parsed.netloc):
        raise InvalidUrlError("Invalid URL format")

    return url

def get_origin(url: str) -> str:
    parsed = urlparse(url)
    return urlunparse((parsed.scheme, parsed.netloc, "", "", "", ""))

def get_homepage_url(url: str) -> str:
    return get_origin(url) + "/"

async def fetch_html(client: httpx.AsyncClient, url: str, timeout: float = None) -> Tuple[str, int]:
    """
    Fetch a page and return its HTML with the load time in milliseconds.

    Redirects are followed by the client. A single attempt is made, and the
    timeout bounds the whole request including the body download.

    Raises:
        httpx.HTTPStatusError: on a non-2xx response
        httpx.RequestError: on network errors
        asyncio.TimeoutError: when the request runs past the timeout
    """
    if timeout is None:
        timeout = settings.CRAWL_TIMEOUT_SECONDS

    start_time = time.monotonic()
    response = await asyncio.wait_for(
        client.get(url, headers=get_crawler_headers(), timeout=timeout, follow_redirects=True),
        timeout,
    )
    response.raise_for_status()
    html = response.text
    load_time = int((time.monotonic() - start_time) * 1000)
    return html, load_time

def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")

def extract_body_text(soup: BeautifulSoup) -> str:
    """
    Extract the visible text of the document body as a single line.
    Script, style and comment content is left out.
    """
    body = soup.body or soup
    texts = []
    for string in body.find_all(string=True):
        if isinstance(string, PreformattedString) or string.parent.name in NON_CONTENT_TAGS:
            continue
        texts.append(string)
    return re.sub(r"\s+", " ", " ".join(texts)).strip()

async def fetch_rendered_content(client: httpx.AsyncClient, url: str) -> Optional[str]:
    """
    Fetch a rendered, markdown-like version of a page from the rendering proxy.

    Used for client-rendered sites whose raw HTML carries little content.
    Any failure or an empty body returns None.
    """
    proxy_url = f"{settings.RENDER_PROXY_BASE_URL}{url}"
    logger.info("Fetching rendered content for %s", url)

    try:
        response = await asyncio.wait_for(
            client.get(
                proxy_url,
                headers={"Accept": "text/plain"},
                timeout=settings.RENDER_PROXY_TIMEOUT_SECONDS,
                follow_redirects=True,
            ),
            settings.RENDER_PROXY_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        logger.warning("Rendering proxy timed out for %s", url)
        return None
    except httpx.HTTPError as e:
        logger.warning("Rendering proxy error for %s: %s", url, e)
        return None

    if not response.is_success:
        logger.warning("Rendering proxy failed for %s: HTTP %s", url, response.status_code)
        return None

    content = response.text
    logger.info("Rendering proxy returned %d characters", len(content))
    if not content.strip():
        return None
    return content
