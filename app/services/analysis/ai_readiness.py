"""
AI readiness synthesis.
Combines the robots.txt policy and the site's structured data into an overall verdict.
"""

from typing import List
from app.core.constants import (
    CrawlerStatus,
    ReadinessStatus,
    ECOMMERCE_SCHEMA_TYPES,
    KEY_SEARCH_CRAWLER_ISSUES,
    PLATFORM_RECOMMENDATIONS,
)
from app.schemas.crawl import (
    AIPlatformRecommendation,
    AIReadinessAnalysis,
    RobotsTxtAnalysis,
    SchemaMarkup,
)

BLOCKED_SEARCH_CRAWLERS_ISSUE = "AI search crawlers are blocked in robots.txt - your site may be invisible to ChatGPT Search and Perplexity"
MISSING_ROBOTS_TXT_ISSUE = "No robots.txt found - consider adding one to explicitly allow AI crawlers"
ECOMMERCE_ISSUE = "E-commerce site detected - consider submitting to ChatGPT Merchant Portal"

def has_product_schema(schemas: List[SchemaMarkup]) -> bool:
    for schema in schemas:
        types = schema.type if isinstance(schema.type, list) else [schema.type]
        if any(schema_type in ECOMMERCE_SCHEMA_TYPES for schema_type in types):
            return True
    return False

def generate_platform_recommendations(is_ecommerce: bool) -> List[AIPlatformRecommendation]:
    recommendations = []
    for platform in PLATFORM_RECOMMENDATIONS:
        applicable = is_ecommerce or not platform["requires_ecommerce"]
        recommendations.append(AIPlatformRecommendation(
            platform=platform["platform"],
            url=platform["url"],
            description=platform["description"],
            applicable=applicable,
            reason=platform["reason"] if applicable else platform["not_applicable_reason"],
        ))
    return recommendations

def _escalate(current: ReadinessStatus, status: ReadinessStatus) -> ReadinessStatus:
    severity = [ReadinessStatus.GOOD, ReadinessStatus.WARNING, ReadinessStatus.CRITICAL]
    return status if severity.index(status) > severity.index(current) else current

def analyze_ai_readiness(robots_txt: RobotsTxtAnalysis, schemas: List[SchemaMarkup]) -> AIReadinessAnalysis:
    """
    Build the AI readiness verdict.

    Issues are appended in a fixed order and every trigger adds its issue,
    while the overall status only keeps the most severe level reached.

    Args:
        robots_txt: Result of the robots.txt analysis
        schemas: Site-wide deduplicated schema markup

    Returns:
        AIReadinessAnalysis with recommendations, status and issues
    """
    is_ecommerce = has_product_schema(schemas)
    issues = []
    overall_status = ReadinessStatus.GOOD

    if robots_txt.has_blocked_search_crawlers:
        issues.append(BLOCKED_SEARCH_CRAWLERS_ISSUE)
        overall_status = _escalate(overall_status, ReadinessStatus.CRITICAL)

    if not robots_txt.exists:
        issues.append(MISSING_ROBOTS_TXT_ISSUE)
        overall_status = _escalate(overall_status, ReadinessStatus.WARNING)

    statuses = {rule.crawler: rule.status for rule in robots_txt.crawlers}
    for crawler, issue in KEY_SEARCH_CRAWLER_ISSUES.items():
        if statuses.get(crawler) == CrawlerStatus.BLOCKED:
            issues.append(issue)
            overall_status = _escalate(overall_status, ReadinessStatus.CRITICAL)

    if is_ecommerce:
        issues.append(ECOMMERCE_ISSUE)
        overall_status = _escalate(overall_status, ReadinessStatus.WARNING)

    return AIReadinessAnalysis(
        robots_txt=robots_txt,
        platform_recommendations=generate_platform_recommendations(is_ecommerce),
        is_ecommerce=is_ecommerce,
        overall_status=overall_status,
        issues=issues,
    )
