from pydantic import Field
from typing import List, Optional, Any, Dict, Union
from app.core.constants import CrawlerStatus, ReadinessStatus
from app.core.models import CamelCaseModel

class CrawlRequest(CamelCaseModel):
    url: Optional[str] = None
    keywords: List[str] = []


# Page content models
class Heading(CamelCaseModel):
    level: int = Field(..., ge=1, le=6)
    text: str
    has_direct_answer: bool
    following_content: str

class SchemaMarkup(CamelCaseModel):
    type: Union[str, List[str]]
    properties: Dict[str, Any]

class ContentStats(CamelCaseModel):
    word_count: int
    paragraph_count: int
    avg_sentence_length: int
    readability_score: int = Field(..., ge=0, le=100)

class TechnicalSignals(CamelCaseModel):
    has_canonical: bool
    has_open_graph: bool
    has_twitter_card: bool
    load_time: int
    mobile_viewport: bool
    has_https: bool

class DirectAnswer(CamelCaseModel):
    heading: str
    answer: str

class BlufAnalysis(CamelCaseModel):
    score: int = Field(..., ge=0, le=100)
    direct_answers: List[DirectAnswer]
    total_headings: int
    headings_with_direct_answers: int

class KeywordAnalysis(CamelCaseModel):
    title_contains_keyword: bool = False
    h1_contains_keyword: bool = False
    meta_contains_keyword: bool = False
    keyword_density: float = 0.0
    keyword_occurrences: int = 0

class PageData(CamelCaseModel):
    url: str
    title: str
    meta_description: str
    headings: List[Heading]
    schema_markup: List[SchemaMarkup]
    content_stats: ContentStats
    technical_signals: TechnicalSignals
    bluf_analysis: BlufAnalysis
    keyword_analysis: KeywordAnalysis


# Site level models
class PageSummary(CamelCaseModel):
    url: str
    title: str
    word_count: int
    headings_count: int
    schema_count: int
    issues: List[str]

class AggregatedStats(CamelCaseModel):
    total_words: int
    total_headings: int
    total_schemas: int
    avg_readability: int
    pages_with_schema: int
    pages_with_meta: int

class SPADetectionInfo(CamelCaseModel):
    detected: bool
    used_jina_fallback: bool
    original_word_count: Optional[int] = None


# AI readiness models
class AICrawlerRule(CamelCaseModel):
    crawler: str
    description: str
    status: CrawlerStatus
    is_search_crawler: bool

class RobotsTxtAnalysis(CamelCaseModel):
    exists: bool
    fetch_error: Optional[str] = None
    crawlers: List[AICrawlerRule]
    has_blocked_search_crawlers: bool = False
    has_blocked_training_crawlers: bool = False

class AIPlatformRecommendation(CamelCaseModel):
    platform: str
    url: str
    description: str
    applicable: bool
    reason: str

class AIReadinessAnalysis(CamelCaseModel):
    robots_txt: RobotsTxtAnalysis
    platform_recommendations: List[AIPlatformRecommendation]
    is_ecommerce: bool
    overall_status: ReadinessStatus
    issues: List[str]

class SiteCrawlResult(PageData):
    pages_analyzed: int = Field(..., ge=1)
    pages: List[PageSummary]
    aggregated_stats: AggregatedStats
    ai_readiness: AIReadinessAnalysis
    spa_detection: Optional[SPADetectionInfo] = None

class CrawlResponse(CamelCaseModel):
    success: bool
    data: Optional[SiteCrawlResult] = None
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "Failed to fetch the homepage",
            }
        }
