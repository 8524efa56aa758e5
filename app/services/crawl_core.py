import asyncio
import logging
import httpx
from typing import List, Optional, Tuple
from bs4 import BeautifulSoup
from app.core.config import settings
from app.core.constants import MAX_AGGREGATED_HEADINGS
from app.core.exceptions import HomepageFetchError, HomepageParseError
from app.schemas.crawl import PageData, RobotsTxtAnalysis, SiteCrawlResult
from app.services.analysis import RobotsTxtAnalyzer, analyze_ai_readiness
from app.services.analysis.page_parser import crawl_page, parse_page_data
from app.services.analysis.structured_data import dedupe_schema_types
from app.services.analysis.utils.links import extract_internal_links, prioritize_links, remove_homepage_variants
from app.services.analysis.utils.response import (
    build_page_summary,
    build_aggregated_stats,
    aggregate_content_stats,
    aggregate_bluf_analysis,
    aggregate_keyword_analysis,
)
from app.services.analysis.utils.scrape_utils import (
    normalize_target_url,
    get_homepage_url,
    get_origin,
    fetch_html,
    parse_html,
)
from app.services.analysis.utils.spa import apply_spa_fallback

logger = logging.getLogger(__name__)

class CrawlService:
    """Service for crawling a website and building its AI readiness report"""

    @classmethod
    async def crawl_website(cls, url: Optional[str], keywords: Optional[List[str]] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> SiteCrawlResult:
        """
        Crawl the homepage and up to CRAWL_MAX_SUBPAGES internal pages, then
        aggregate them into a single site report.

        Args:
            url: URL of the site, https:// is assumed when no scheme is given
            keywords: Target keywords checked on every page
            transport: Optional httpx transport for the shared client

        Raises:
            InvalidUrlError: the URL is missing or malformed, no request is made
            HomepageFetchError: the homepage could not be fetched
            HomepageParseError: the homepage could not be parsed
        """
        target_url = normalize_target_url(url)
        keywords = keywords or []
        homepage_url = get_homepage_url(target_url)
        logger.info("Starting multi-page crawl for %s", get_origin(target_url))

        async with httpx.AsyncClient(transport=transport) as client:
            # Step 1: robots.txt does not depend on page content, run it alongside the crawl
            robots_task = asyncio.create_task(RobotsTxtAnalyzer().analyze(client, target_url))

            try:
                # Step 2: Fetch and parse the homepage, the only fatal step
                homepage, homepage_soup = await cls._fetch_homepage(client, homepage_url, keywords)
            except (HomepageFetchError, HomepageParseError):
                await cls._cancel(robots_task)
                raise

            # Step 3: Rendering fallback for client-rendered homepages
            homepage, spa_detection = await apply_spa_fallback(client, homepage, homepage_soup)

            # Step 4: Discover and prioritize internal links
            sub_page_urls = cls._select_sub_pages(homepage_soup, target_url, homepage_url)

            # Step 5: Crawl the sub-pages concurrently, failures are dropped
            sub_pages = await cls._crawl_sub_pages(client, sub_page_urls, keywords)

            # Step 6: Wait for the robots.txt analysis
            robots_txt = await cls._await_robots_txt(robots_task)

        pages = [homepage] + sub_pages
        logger.info("Successfully crawled %d pages", len(pages))

        return cls._build_site_result(pages, robots_txt, spa_detection)

    @classmethod
    async def _fetch_homepage(cls, client: httpx.AsyncClient, homepage_url: str, keywords: List[str]) -> Tuple[PageData, BeautifulSoup]:
        """Fetch the homepage once, its document is reused for link discovery."""
        try:
            html, load_time = await fetch_html(client, homepage_url)
        except (httpx.HTTPError, asyncio.TimeoutError) as e:
            logger.error("Failed to fetch homepage %s: %s", homepage_url, e)
            raise HomepageFetchError("Failed to fetch the homepage") from e

        logger.info("Fetched homepage in %dms, %d chars", load_time, len(html))

        try:
            soup = parse_html(html)
            homepage = parse_page_data(soup, homepage_url, keywords, load_time)
        except Exception as e:
            logger.error("Failed to parse homepage %s: %s", homepage_url, e)
            raise HomepageParseError("Failed to parse homepage HTML") from e

        return homepage, soup

    @classmethod
    def _select_sub_pages(cls, soup: BeautifulSoup, target_url: str, homepage_url: str) -> List[str]:
        links = extract_internal_links(soup, target_url)
        logger.info("Found %d internal links on homepage", len(links))

        prioritized = prioritize_links(
            remove_homepage_variants(links, homepage_url),
            settings.CRAWL_MAX_SUBPAGES,
        )
        logger.info("Prioritized %d links for crawling: %s", len(prioritized), ", ".join(prioritized))
        return prioritized

    @classmethod
    async def _crawl_sub_pages(cls, client: httpx.AsyncClient, urls: List[str], keywords: List[str]) -> List[PageData]:
        results = await asyncio.gather(
            *[crawl_page(client, url, keywords) for url in urls],
            return_exceptions=True,
        )

        pages = []
        for url, result in zip(urls, results):
            if isinstance(result, PageData):
                pages.append(result)
            elif isinstance(result, Exception):
                logger.warning("Crawl of %s failed: %s", url, result)
        return pages

    @classmethod
    async def _await_robots_txt(cls, robots_task: asyncio.Task) -> RobotsTxtAnalysis:
        try:
            return await robots_task
        except Exception as e:
            logger.warning("robots.txt analysis failed: %s", e)
            return RobotsTxtAnalyzer.unavailable(str(e) or type(e).__name__)

    @classmethod
    async def _cancel(cls, task: asyncio.Task):
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug("Cancelled task ended with: %s", e)

    @classmethod
    def _build_site_result(cls, pages: List[PageData], robots_txt: RobotsTxtAnalysis, spa_detection) -> SiteCrawlResult:
        """
        Merge the crawled pages into the site report.

        The homepage (always first) provides the URL, title, meta description
        and technical signals; every other block is aggregated over all pages.
        """
        homepage = pages[0]
        schemas = dedupe_schema_types(pages)
        all_headings = [h for p in pages for h in p.headings]

        ai_readiness = analyze_ai_readiness(robots_txt, schemas)
        logger.info("AI Readiness: %s, issues: %d", ai_readiness.overall_status.value, len(ai_readiness.issues))

        return SiteCrawlResult(
            url=homepage.url,
            title=homepage.title,
            meta_description=homepage.meta_description,
            headings=all_headings[:MAX_AGGREGATED_HEADINGS],
            schema_markup=schemas,
            content_stats=aggregate_content_stats(pages),
            technical_signals=homepage.technical_signals,
            bluf_analysis=aggregate_bluf_analysis(pages),
            keyword_analysis=aggregate_keyword_analysis(pages),
            pages_analyzed=len(pages),
            pages=[build_page_summary(p) for p in pages],
            aggregated_stats=build_aggregated_stats(pages),
            ai_readiness=ai_readiness,
            spa_detection=spa_detection,
        )
