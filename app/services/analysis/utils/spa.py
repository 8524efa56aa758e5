"""
Client-rendered (single page application) detection and the rendering fallback.
"""

import logging
import httpx
from typing import Tuple, Optional
from bs4 import BeautifulSoup
from app.core.constants import (
    SPA_DETECTION_THRESHOLD,
    SPA_MIN_WORD_COUNT,
    SPA_ROOT_IDS,
    SPA_ROOT_ATTRIBUTES,
)
from app.schemas.crawl import PageData, SPADetectionInfo
from app.services.analysis.bluf import build_bluf_analysis
from app.services.analysis.headings import parse_rendered_text
from app.services.analysis.readability import calculate_readability
from app.services.analysis.utils.scrape_utils import fetch_rendered_content
from app.services.analysis.utils.score_utils import round_score

logger = logging.getLogger(__name__)

def has_spa_framework_root(soup: BeautifulSoup) -> bool:
    """Check for React/Vue/Next/Nuxt/Angular mount points or an ES module bundle."""
    if soup.find("div", id=lambda value: value in SPA_ROOT_IDS):
        return True
    if any(soup.find(attrs={attribute: True}) for attribute in SPA_ROOT_ATTRIBUTES):
        return True
    return soup.find("script", type="module") is not None

def is_likely_spa(word_count: int, headings_count: int, has_root: bool) -> bool:
    if has_root and word_count < SPA_DETECTION_THRESHOLD:
        return True
    return word_count < SPA_MIN_WORD_COUNT and headings_count == 0

def apply_rendered_content(page: PageData, rendered_text: str) -> PageData:
    """
    Rebuild a page's content analysis from rendered text.

    Headings, word and paragraph counts, BLUF and readability come from the
    rendered text. Schema markup is kept from the static HTML because the
    rendered text carries no script tags.
    """
    parsed = parse_rendered_text(rendered_text)

    content_stats = page.content_stats.model_copy(update={
        "word_count": parsed.word_count,
        "paragraph_count": parsed.paragraph_count,
        "readability_score": round_score(calculate_readability(rendered_text)),
    })

    return page.model_copy(update={
        "headings": parsed.headings,
        "content_stats": content_stats,
        "bluf_analysis": build_bluf_analysis(parsed.headings),
    })

async def apply_spa_fallback(client: httpx.AsyncClient, page: PageData, soup: BeautifulSoup) -> Tuple[PageData, Optional[SPADetectionInfo]]:
    """
    Run SPA detection on a page and fall back to the rendering proxy if it fires.

    Returns:
        Tuple containing:
        - page: the page, rebuilt from rendered content when the fallback succeeded
        - spa_detection: detection info, None when the page does not look client-rendered
    """
    word_count = page.content_stats.word_count
    has_root = has_spa_framework_root(soup)

    if not is_likely_spa(word_count, len(page.headings), has_root):
        return page, None

    logger.info(
        "Detected likely SPA (%d words, %d headings, SPA root: %s), trying rendering proxy",
        word_count, len(page.headings), has_root,
    )

    rendered_text = await fetch_rendered_content(client, page.url)
    used_fallback = False

    if rendered_text:
        page = apply_rendered_content(page, rendered_text)
        used_fallback = True
        logger.info(
            "Rendered content: %d words, %d headings, keeping %d schema(s) from static HTML",
            page.content_stats.word_count, len(page.headings), len(page.schema_markup),
        )
    else:
        logger.warning("Rendering proxy fallback failed for %s, using original sparse content", page.url)

    return page, SPADetectionInfo(
        detected=True,
        used_jina_fallback=used_fallback,
        original_word_count=word_count,
    )
