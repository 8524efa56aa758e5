"""
Robots.txt policy analysis for known AI crawlers.
"""

import asyncio
import logging
import httpx
from typing import List
from app.core.config import settings
from app.core.constants import AI_CRAWLERS, CrawlerStatus
from app.schemas.crawl import AICrawlerRule, RobotsTxtAnalysis
from app.services.analysis.utils.scrape_utils import get_origin

logger = logging.getLogger(__name__)

def default_crawler_rules() -> List[AICrawlerRule]:
    return [
        AICrawlerRule(
            crawler=crawler["name"],
            description=crawler["description"],
            status=CrawlerStatus.NOT_SPECIFIED,
            is_search_crawler=crawler["is_search_crawler"],
        )
        for crawler in AI_CRAWLERS
    ]

def parse_robots_txt_for_crawler(content: str, crawler_name: str) -> CrawlerStatus:
    """
    Resolve the robots.txt verdict for one crawler.

    Only whole-site rules count: "Disallow: /" or an empty "Disallow:" marks
    a group as blocking, "Allow: /" marks it as allowing. Consecutive
    User-agent lines share the rules that follow them. A group naming the
    crawler takes precedence over the "*" group.

    Args:
        content: Raw robots.txt body
        crawler_name: User-agent token, matched case-insensitively

    Returns:
        CrawlerStatus for the crawler
    """
    crawler_lower = crawler_name.lower()

    group_agents = set()
    previous_was_agent = False
    crawler_disallow = crawler_allow = False
    wildcard_disallow = wildcard_allow = False

    for line in content.lower().splitlines():
        line = line.split("#", 1)[0].strip()
        if not line:
            continue

        if line.startswith("user-agent:"):
            if not previous_was_agent:
                group_agents = set()
            group_agents.add(line[len("user-agent:"):].strip())
            previous_was_agent = True
            continue
        previous_was_agent = False

        in_crawler_group = crawler_lower in group_agents
        in_wildcard_group = "*" in group_agents

        if line.startswith("disallow:"):
            path = line[len("disallow:"):].strip()
            if path in ("/", ""):
                crawler_disallow = crawler_disallow or in_crawler_group
                wildcard_disallow = wildcard_disallow or in_wildcard_group
        elif line.startswith("allow:"):
            path = line[len("allow:"):].strip()
            if path == "/":
                crawler_allow = crawler_allow or in_crawler_group
                wildcard_allow = wildcard_allow or in_wildcard_group

    if crawler_disallow and not crawler_allow:
        return CrawlerStatus.BLOCKED
    if crawler_allow:
        return CrawlerStatus.ALLOWED

    if wildcard_disallow and not wildcard_allow:
        return CrawlerStatus.BLOCKED
    if wildcard_allow:
        return CrawlerStatus.ALLOWED

    return CrawlerStatus.NOT_SPECIFIED

class RobotsTxtAnalyzer:
    """Fetches a site's robots.txt and reports the policy for each AI crawler."""

    @staticmethod
    def unavailable(fetch_error: str) -> RobotsTxtAnalysis:
        return RobotsTxtAnalysis(
            exists=False,
            fetch_error=fetch_error,
            crawlers=default_crawler_rules(),
        )

    @staticmethod
    def analyze_content(content: str) -> RobotsTxtAnalysis:
        crawlers = [
            AICrawlerRule(
                crawler=crawler["name"],
                description=crawler["description"],
                status=parse_robots_txt_for_crawler(content, crawler["name"]),
                is_search_crawler=crawler["is_search_crawler"],
            )
            for crawler in AI_CRAWLERS
        ]

        return RobotsTxtAnalysis(
            exists=True,
            crawlers=crawlers,
            has_blocked_search_crawlers=any(
                rule.is_search_crawler and rule.status == CrawlerStatus.BLOCKED for rule in crawlers
            ),
            has_blocked_training_crawlers=any(
                not rule.is_search_crawler and rule.status == CrawlerStatus.BLOCKED for rule in crawlers
            ),
        )

    async def analyze(self, client: httpx.AsyncClient, base_url: str) -> RobotsTxtAnalysis:
        """
        Fetch {origin}/robots.txt and evaluate every catalogued AI crawler.

        Never raises: a missing file, an error status, a network failure or a
        timeout give exists=False with every crawler not_specified and the reason in
        fetch_error.
        """
        robots_url = f"{get_origin(base_url)}/robots.txt"

        try:
            response = await asyncio.wait_for(
                client.get(
                    robots_url,
                    headers={"User-Agent": settings.CRAWLER_USER_AGENT},
                    timeout=settings.ROBOTS_TXT_TIMEOUT_SECONDS,
                    follow_redirects=True,
                ),
                settings.ROBOTS_TXT_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching robots.txt from %s", robots_url)
            return self.unavailable(f"Timed out after {settings.ROBOTS_TXT_TIMEOUT_SECONDS}s")
        except httpx.HTTPError as e:
            logger.warning("Error fetching robots.txt from %s: %s", robots_url, e)
            return self.unavailable(str(e) or type(e).__name__)

        if not response.is_success:
            logger.warning("robots.txt not available at %s: HTTP %s", robots_url, response.status_code)
            return self.unavailable(f"HTTP {response.status_code}")

        return self.analyze_content(response.text)
