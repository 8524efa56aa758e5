"""
Single page analysis.
Builds one PageData record from a parsed document, and fetches sub-pages.
"""

import asyncio
import logging
import httpx
from typing import List, Optional
from bs4 import BeautifulSoup
from app.schemas.crawl import PageData, ContentStats
from app.services.analysis.bluf import build_bluf_analysis
from app.services.analysis.headings import extract_dom_headings
from app.services.analysis.keywords import analyze_keywords, extract_technical_signals
from app.services.analysis.readability import calculate_readability, split_sentences
from app.services.analysis.structured_data import extract_schema_markup
from app.services.analysis.utils.scrape_utils import fetch_html, parse_html, extract_body_text
from app.services.analysis.utils.score_utils import round_score

logger = logging.getLogger(__name__)

def _get_text(soup: BeautifulSoup, tag: str) -> str:
    element = soup.find(tag)
    return element.get_text().strip() if element else ""

def _get_meta_description(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": "description"})
    if meta and meta.get("content"):
        return meta["content"].strip()
    return ""

def parse_page_data(soup: BeautifulSoup, url: str, keywords: List[str], load_time: int) -> PageData:
    """
    Extract one page's content record from an already parsed document.

    Args:
        soup: Parsed HTML document
        url: URL the document was fetched from
        keywords: Target keywords for the keyword analysis
        load_time: Fetch time in milliseconds

    Returns:
        PageData for the page
    """
    title = _get_text(soup, "title")
    meta_description = _get_meta_description(soup)
    headings = extract_dom_headings(soup)
    h1_text = _get_text(soup, "h1")

    body_text = extract_body_text(soup)
    words = body_text.split()
    sentences = split_sentences(body_text)

    content_stats = ContentStats(
        word_count=len(words),
        paragraph_count=len(soup.find_all("p")),
        avg_sentence_length=round_score(len(words) / len(sentences)) if sentences else 0,
        readability_score=round_score(calculate_readability(body_text)),
    )

    return PageData(
        url=url,
        title=title,
        meta_description=meta_description,
        headings=headings,
        schema_markup=extract_schema_markup(soup),
        content_stats=content_stats,
        technical_signals=extract_technical_signals(soup, url, load_time),
        bluf_analysis=build_bluf_analysis(headings),
        keyword_analysis=analyze_keywords(body_text, title, meta_description, h1_text, keywords),
    )

async def crawl_page(client: httpx.AsyncClient, url: str, keywords: List[str]) -> Optional[PageData]:
    """
    Fetch and analyze a single page.

    Returns None when the page cannot be fetched or parsed, the page is
    then simply left out of the crawl.
    """
    try:
        html, load_time = await fetch_html(client, url)
    except httpx.HTTPStatusError as e:
        logger.warning("Failed to fetch %s: HTTP %s", url, e.response.status_code)
        return None
    except asyncio.TimeoutError:
        logger.warning("Timed out crawling %s", url)
        return None
    except httpx.HTTPError as e:
        logger.warning("Error crawling %s: %s", url, e)
        return None

    try:
        soup = parse_html(html)
        return parse_page_data(soup, url, keywords, load_time)
    except Exception as e:
        logger.warning("Error parsing %s: %s", url, e)
        return None
