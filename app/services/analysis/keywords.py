"""
Keyword placement and technical SEO signals.
"""

import re
from typing import List
from urllib.parse import urlparse
from bs4 import BeautifulSoup
from app.schemas.crawl import KeywordAnalysis, TechnicalSignals
from app.services.analysis.utils.score_utils import round_half_up

def analyze_keywords(body_text: str, title: str, meta_description: str, h1_text: str, keywords: List[str]) -> KeywordAnalysis:
    """
    Check where the target keywords appear on a page.

    Args:
        body_text: Visible body text of the page
        title: Page title
        meta_description: Meta description content
        h1_text: Text of the first H1
        keywords: Caller supplied keywords, blank entries are ignored

    Returns:
        KeywordAnalysis where each placement flag is set if any keyword
        matches, with occurrences summed over all keywords
    """
    lower_body = body_text.lower()
    lower_title = title.lower()
    lower_meta = meta_description.lower()
    lower_h1 = h1_text.lower()

    total_occurrences = 0
    title_match = h1_match = meta_match = False

    for keyword in keywords:
        lower_keyword = keyword.lower().strip()
        if not lower_keyword:
            continue

        title_match = title_match or lower_keyword in lower_title
        h1_match = h1_match or lower_keyword in lower_h1
        meta_match = meta_match or lower_keyword in lower_meta

        total_occurrences += len(re.findall(re.escape(lower_keyword), lower_body, re.IGNORECASE))

    word_count = len(body_text.split())
    density = (total_occurrences / word_count) * 100 if word_count > 0 else 0.0

    return KeywordAnalysis(
        title_contains_keyword=title_match,
        h1_contains_keyword=h1_match,
        meta_contains_keyword=meta_match,
        keyword_density=round_half_up(density, 2),
        keyword_occurrences=total_occurrences,
    )

def extract_technical_signals(soup: BeautifulSoup, url: str, load_time: int) -> TechnicalSignals:
    """Presence checks for canonical, social preview and viewport tags, plus HTTPS."""
    return TechnicalSignals(
        has_canonical=soup.find("link", rel="canonical") is not None,
        has_open_graph=soup.find("meta", property=re.compile(r"^og:")) is not None,
        has_twitter_card=soup.find("meta", attrs={"name": re.compile(r"^twitter:")}) is not None,
        load_time=load_time,
        mobile_viewport=soup.find("meta", attrs={"name": "viewport"}) is not None,
        has_https=urlparse(url).scheme == "https",
    )
