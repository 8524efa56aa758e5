"""Site result building functions."""

from typing import List
from app.core.constants import (
    MIN_TITLE_LENGTH,
    MIN_PAGE_WORD_COUNT,
    MIN_PAGE_BLUF_SCORE,
    MAX_AGGREGATED_DIRECT_ANSWERS,
)
from app.schemas.crawl import (
    PageData,
    PageSummary,
    AggregatedStats,
    ContentStats,
    BlufAnalysis,
    KeywordAnalysis,
)
from app.services.analysis.utils.score_utils import average, percentage, round_half_up, round_score

def get_page_issues(page: PageData) -> List[str]:
    """
    List the content problems of a single page.

    Args:
        page: The analyzed page

    Returns:
        Short issue labels, empty when the page passes every check
    """
    issues = []
    h1_count = len([h for h in page.headings if h.level == 1])

    if len(page.title) < MIN_TITLE_LENGTH:
        issues.append("Missing/short title")
    if not page.meta_description:
        issues.append("No meta description")
    if not page.schema_markup:
        issues.append("No schema markup")
    if h1_count == 0:
        issues.append("No H1")
    if h1_count > 1:
        issues.append("Multiple H1s")
    if page.content_stats.word_count < MIN_PAGE_WORD_COUNT:
        issues.append("Low word count")
    if page.bluf_analysis.score < MIN_PAGE_BLUF_SCORE:
        issues.append("Poor BLUF score")

    return issues

def build_page_summary(page: PageData) -> PageSummary:
    return PageSummary(
        url=page.url,
        title=page.title or "Untitled",
        word_count=page.content_stats.word_count,
        headings_count=len(page.headings),
        schema_count=len(page.schema_markup),
        issues=get_page_issues(page),
    )

def build_aggregated_stats(pages: List[PageData]) -> AggregatedStats:
    return AggregatedStats(
        total_words=sum(p.content_stats.word_count for p in pages),
        total_headings=sum(len(p.headings) for p in pages),
        total_schemas=sum(len(p.schema_markup) for p in pages),
        avg_readability=round_score(average(p.content_stats.readability_score for p in pages)),
        pages_with_schema=len([p for p in pages if p.schema_markup]),
        pages_with_meta=len([p for p in pages if p.meta_description]),
    )

def aggregate_content_stats(pages: List[PageData]) -> ContentStats:
    return ContentStats(
        word_count=sum(p.content_stats.word_count for p in pages),
        paragraph_count=sum(p.content_stats.paragraph_count for p in pages),
        avg_sentence_length=round_score(average(p.content_stats.avg_sentence_length for p in pages)),
        readability_score=round_score(average(p.content_stats.readability_score for p in pages)),
    )

def aggregate_bluf_analysis(pages: List[PageData]) -> BlufAnalysis:
    """
    Site-wide BLUF over the union of every page's headings.
    Only the first direct answers are kept in the listing.
    """
    headings = [h for p in pages for h in p.headings]
    with_answers = len([h for h in headings if h.has_direct_answer])
    direct_answers = [a for p in pages for a in p.bluf_analysis.direct_answers]

    return BlufAnalysis(
        score=percentage(with_answers, len(headings)),
        direct_answers=direct_answers[:MAX_AGGREGATED_DIRECT_ANSWERS],
        total_headings=len(headings),
        headings_with_direct_answers=with_answers,
    )

def aggregate_keyword_analysis(pages: List[PageData]) -> KeywordAnalysis:
    """Placement flags are OR-ed across pages, density is averaged and occurrences summed."""
    return KeywordAnalysis(
        title_contains_keyword=any(p.keyword_analysis.title_contains_keyword for p in pages),
        h1_contains_keyword=any(p.keyword_analysis.h1_contains_keyword for p in pages),
        meta_contains_keyword=any(p.keyword_analysis.meta_contains_keyword for p in pages),
        keyword_density=round_half_up(average(p.keyword_analysis.keyword_density for p in pages), 2),
        keyword_occurrences=sum(p.keyword_analysis.keyword_occurrences for p in pages),
    )
