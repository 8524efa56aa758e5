"""
Constants module for the AI readiness crawler.

This module contains constant values used throughout the application:
heuristic thresholds, the AI crawler catalog and the other fixed tables
the analyzers read from.
"""
from enum import Enum

class CrawlerStatus(str, Enum):
    """Robots.txt verdict for a single AI crawler"""
    ALLOWED = "allowed"
    BLOCKED = "blocked"
    NOT_SPECIFIED = "not_specified"

class ReadinessStatus(str, Enum):
    """Overall AI readiness verdict, ordered by severity"""
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"

# Content heuristics
SPA_DETECTION_THRESHOLD = 100  # word count below this with an SPA root suggests client rendering
SPA_MIN_WORD_COUNT = 50  # word count below this with no headings suggests client rendering
DEFAULT_READABILITY_SCORE = 50
MIN_DIRECT_ANSWER_LENGTH = 20
MIN_CONCISE_SENTENCE_LENGTH = 30
MAX_CONCISE_SENTENCE_LENGTH = 150
FOLLOWING_CONTENT_SCAN_CHARS = 500
FOLLOWING_CONTENT_MAX_CHARS = 200
MIN_PARAGRAPH_LINE_LENGTH = 50
MAX_AGGREGATED_HEADINGS = 50
MAX_AGGREGATED_DIRECT_ANSWERS = 10

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
CONTENT_TAGS = {"p", "ul", "ol", "div", "span", "li"}
NON_CONTENT_TAGS = {"script", "style", "noscript", "template"}

# Marker the rendering proxy puts in front of the page body
RENDERED_CONTENT_MARKER = "Markdown Content:"

# Link discovery
IMPORTANT_PATHS = ("/blog", "/services", "/about", "/contact", "/pricing", "/features", "/products", "/faq", "/help")
MAX_LINK_PATH_SEGMENTS = 3  # "/a/b".split("/") -> ["", "a", "b"]
SKIPPED_LINK_EXTENSIONS = ("pdf", "jpg", "jpeg", "png", "gif", "svg", "css", "js", "xml", "json", "zip", "mp3", "mp4", "webp")

# SPA framework root markers
SPA_ROOT_IDS = {"root", "app", "__next", "__nuxt"}
SPA_ROOT_ATTRIBUTES = ("ng-app", "data-ng-app", "ng-controller")

# Page quality checks
MIN_TITLE_LENGTH = 10
MIN_PAGE_WORD_COUNT = 300
MIN_PAGE_BLUF_SCORE = 30

# AI crawlers checked in robots.txt
AI_CRAWLERS = [
    # Search/citation crawlers, these decide whether a site can be cited
    {"name": "OAI-SearchBot", "description": "ChatGPT Search", "is_search_crawler": True},
    {"name": "PerplexityBot", "description": "Perplexity Search", "is_search_crawler": True},
    {"name": "ChatGPT-User", "description": "ChatGPT Browsing", "is_search_crawler": True},
    {"name": "Applebot-Extended", "description": "Apple Intelligence", "is_search_crawler": True},
    # Training crawlers
    {"name": "GPTBot", "description": "OpenAI Training", "is_search_crawler": False},
    {"name": "ClaudeBot", "description": "Claude Training", "is_search_crawler": False},
    {"name": "Claude-Web", "description": "Claude Web", "is_search_crawler": False},
    {"name": "anthropic-ai", "description": "Anthropic AI", "is_search_crawler": False},
    {"name": "Google-Extended", "description": "Gemini Training", "is_search_crawler": False},
    {"name": "Googlebot-Extended", "description": "Google AI Features", "is_search_crawler": False},
    {"name": "Meta-ExternalAgent", "description": "Meta AI Training", "is_search_crawler": False},
    {"name": "Meta-ExternalFetcher", "description": "Meta AI Fetcher", "is_search_crawler": False},
    {"name": "FacebookBot", "description": "Meta/Facebook AI", "is_search_crawler": False},
    {"name": "cohere-ai", "description": "Cohere AI", "is_search_crawler": False},
    {"name": "Bytespider", "description": "ByteDance/TikTok AI", "is_search_crawler": False},
    {"name": "CCBot", "description": "Common Crawl (AI Training)", "is_search_crawler": False},
    {"name": "Amazonbot", "description": "Amazon AI", "is_search_crawler": False},
]

# Search crawlers whose individual block gets its own issue
KEY_SEARCH_CRAWLER_ISSUES = {
    "OAI-SearchBot": "OAI-SearchBot is blocked - your site will not appear in ChatGPT Search results",
    "PerplexityBot": "PerplexityBot is blocked - your site will not be cited by Perplexity",
}

ECOMMERCE_SCHEMA_TYPES = {"Product", "Offer", "AggregateOffer", "ItemList", "ShoppingCart"}

PLATFORM_RECOMMENDATIONS = [
    {
        "platform": "ChatGPT Merchant Portal",
        "url": "https://chatgpt.com/merchants",
        "description": "Submit your products to appear in ChatGPT shopping results with Instant Checkout",
        "requires_ecommerce": True,
        "reason": "Product schema detected - submit your catalog for ChatGPT Shopping",
        "not_applicable_reason": "Not applicable - no e-commerce schema detected",
    },
    {
        "platform": "Bing Webmaster Tools",
        "url": "https://www.bing.com/webmasters",
        "description": "Improves visibility in ChatGPT browsing mode and Microsoft Copilot",
        "requires_ecommerce": False,
        "reason": "Recommended for all sites - Bing powers ChatGPT web browsing",
    },
    {
        "platform": "Google Search Console",
        "url": "https://search.google.com/search-console",
        "description": "Improves visibility in Google Gemini responses",
        "requires_ecommerce": False,
        "reason": "Recommended for all sites - Google powers Gemini search",
    },
]
