"""
Internal link discovery and prioritization for the multi-page crawl.
"""

from typing import List
from urllib.parse import urljoin, urlparse, urlunparse
from bs4 import BeautifulSoup
from app.core.constants import IMPORTANT_PATHS, MAX_LINK_PATH_SEGMENTS, SKIPPED_LINK_EXTENSIONS
from app.services.analysis.utils.scrape_utils import get_origin

def _normalize_link(href: str, origin: str, hostname: str):
    link_url = urlparse(urljoin(origin, href))
    if link_url.hostname != hostname:
        return None

    if link_url.path.lower().endswith(tuple(f".{ext}" for ext in SKIPPED_LINK_EXTENSIONS)):
        return None

    path = link_url.path[:-1] if link_url.path.endswith("/") else link_url.path
    return urlunparse((link_url.scheme, link_url.netloc, path or "/", "", "", ""))

def extract_internal_links(soup: BeautifulSoup, base_url: str) -> List[str]:
    """
    Collect same-host links from every anchor of the document.

    Relative links are resolved against the site origin. Query strings and
    fragments are dropped, a trailing slash is removed (the root stays "/"),
    and links to non-HTML resources are skipped. Order of first appearance
    is kept.
    """
    origin = get_origin(base_url)
    hostname = urlparse(base_url).hostname
    links = []
    seen = set()

    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href:
            continue
        try:
            link = _normalize_link(href, origin, hostname)
        except ValueError:
            continue
        if link and link not in seen:
            seen.add(link)
            links.append(link)

    return links

def is_important_path(path: str) -> bool:
    return any(
        path == important or path.startswith(important + "/") or path.startswith(important + "-")
        for important in IMPORTANT_PATHS
    )

def prioritize_links(links: List[str], max_links: int) -> List[str]:
    """
    Order links for crawling, important sections first.

    Links under IMPORTANT_PATHS come first, then other shallow pages. Deeper
    pages and the root are dropped. At most max_links are returned.
    """
    prioritized = []
    others = []

    for link in links:
        try:
            path = urlparse(link).path.lower()
        except ValueError:
            continue

        if is_important_path(path):
            prioritized.append(link)
        elif path != "/" and len(path.split("/")) <= MAX_LINK_PATH_SEGMENTS:
            others.append(link)

    return (prioritized + others)[:max_links]

def remove_homepage_variants(links: List[str], homepage_url: str) -> List[str]:
    origin = get_origin(homepage_url)
    variants = {homepage_url, homepage_url.rstrip("/"), origin, origin + "/"}
    return [link for link in links if link not in variants]
