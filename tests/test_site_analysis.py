"""
Site level analysis tests: link discovery, robots.txt policy, AI readiness,
SPA detection and per-page issues.
"""
import httpx
import pytest
from app.core.config import settings
from app.core.constants import AI_CRAWLERS, CrawlerStatus, ReadinessStatus
from app.core.exceptions import InvalidUrlError
from app.schemas.crawl import SchemaMarkup
from app.services.analysis.ai_readiness import analyze_ai_readiness, has_product_schema
from app.services.analysis.robots_txt import RobotsTxtAnalyzer, parse_robots_txt_for_crawler
from app.services.analysis.utils.links import (
    extract_internal_links,
    prioritize_links,
    remove_homepage_variants,
    is_important_path,
)
from app.services.analysis.utils.response import get_page_issues, build_page_summary
from app.services.analysis.utils.scrape_utils import normalize_target_url, get_homepage_url, parse_html
from app.services.analysis.utils.spa import (
    has_spa_framework_root,
    is_likely_spa,
    apply_rendered_content,
    apply_spa_fallback,
)

BASE = "https://example.com"

RENDERED_MARKDOWN = """Title: Example App
URL Source: https://example.com/

Markdown Content:
# Example App
Example App is a scheduling tool for busy teams who coordinate meetings across time zones.

## Features
Teams can share calendars, book rooms and send reminders from a single dashboard.

## Pricing
Plans start at ten dollars per user per month with a free trial for new accounts.
"""


# ─── URL normalization ─────────────────────────────────────────────────────────

class TestUrlNormalization:

    def test_scheme_is_added(self):
        assert normalize_target_url("example.com") == "https://example.com"

    def test_existing_scheme_is_kept(self):
        assert normalize_target_url(" http://example.com/page ") == "http://example.com/page"

    @pytest.mark.parametrize("url,expected", [
        ("httpbin.org", "https://httpbin.org"),
        ("httpie.io/docs", "https://httpie.io/docs"),
        ("localhost:8000", "https://localhost:8000"),
        ("HTTPS://Example.com", "HTTPS://Example.com"),
    ])
    def test_scheme_detection(self, url, expected):
        assert normalize_target_url(url) == expected

    @pytest.mark.parametrize("url", [None, "", "   "])
    def test_missing_url(self, url):
        with pytest.raises(InvalidUrlError) as exc:
            normalize_target_url(url)
        assert exc.value.message == "URL is required"

    @pytest.mark.parametrize("url", ["https://", "http://exa mple.com", "ftp://example.com"])
    def test_invalid_url(self, url):
        with pytest.raises(InvalidUrlError) as exc:
            normalize_target_url(url)
        assert exc.value.message == "Invalid URL format"

    def test_homepage_url_is_origin_root(self):
        assert get_homepage_url("https://example.com/blog/post?x=1") == "https://example.com/"


# ─── Link discovery ────────────────────────────────────────────────────────────

class TestLinkDiscovery:

    def test_extract_internal_links(self):
        soup = parse_html(
            '<a href="/about">About</a>'
            '<a href="https://example.com/pricing/">Pricing</a>'
            '<a href="/about#team">Team</a>'
            '<a href="/blog?page=2">Blog</a>'
            '<a href="https://other.com/page">Other</a>'
            '<a href="mailto:hi@example.com">Mail</a>'
            '<a href="/files/guide.PDF">Guide</a>'
            '<a href="/logo.png">Logo</a>'
            '<a href="/">Home</a>'
            '<a href="">Empty</a>'
        )
        links = extract_internal_links(soup, BASE + "/")
        assert links == [
            f"{BASE}/about",
            f"{BASE}/pricing",
            f"{BASE}/blog",
            f"{BASE}/",
        ]

    def test_homepage_variants_are_removed(self):
        links = [f"{BASE}/", BASE, f"{BASE}/about"]
        assert remove_homepage_variants(links, f"{BASE}/") == [f"{BASE}/about"]

    def test_important_pages_come_first(self):
        links = remove_homepage_variants(
            [f"{BASE}/team", f"{BASE}/about", f"{BASE}/random/deep/nested/path", f"{BASE}/blog/post-1", f"{BASE}/"],
            f"{BASE}/",
        )
        prioritized = prioritize_links(links, 5)
        assert prioritized == [f"{BASE}/about", f"{BASE}/blog/post-1", f"{BASE}/team"]

    def test_result_is_capped(self):
        links = [f"{BASE}/page-{i}" for i in range(12)]
        assert len(prioritize_links(links, 5)) == 5
        assert prioritize_links(links, 0) == []

    def test_shallow_two_segment_paths_are_kept(self):
        assert prioritize_links([f"{BASE}/docs/start", f"{BASE}/docs/start/deep"], 5) == [f"{BASE}/docs/start"]

    @pytest.mark.parametrize("path,expected", [
        ("/blog", True),
        ("/blog/post-1", True),
        ("/blog-news", True),
        ("/blogger", False),
        ("/", False),
    ])
    def test_is_important_path(self, path, expected):
        assert is_important_path(path) is expected


# ─── Robots.txt ────────────────────────────────────────────────────────────────

class TestRobotsTxtParsing:

    def test_specific_rule_wins_over_wildcard(self):
        content = "User-agent: OAI-SearchBot\nDisallow: /\n\nUser-agent: *\nAllow: /"
        analysis = RobotsTxtAnalyzer.analyze_content(content)

        statuses = {rule.crawler: rule.status for rule in analysis.crawlers}
        assert statuses.pop("OAI-SearchBot") == CrawlerStatus.BLOCKED
        assert all(status == CrawlerStatus.ALLOWED for status in statuses.values())
        assert analysis.has_blocked_search_crawlers is True
        assert analysis.has_blocked_training_crawlers is False

    def test_matching_is_case_insensitive(self):
        assert parse_robots_txt_for_crawler("USER-AGENT: gptbot\nDISALLOW: /", "GPTBot") == CrawlerStatus.BLOCKED

    def test_consecutive_user_agents_share_rules(self):
        content = "User-agent: GPTBot\nUser-agent: CCBot\nDisallow: /\n\nUser-agent: ClaudeBot\nAllow: /"
        assert parse_robots_txt_for_crawler(content, "GPTBot") == CrawlerStatus.BLOCKED
        assert parse_robots_txt_for_crawler(content, "CCBot") == CrawlerStatus.BLOCKED
        assert parse_robots_txt_for_crawler(content, "ClaudeBot") == CrawlerStatus.ALLOWED

    def test_inline_comments_are_ignored(self):
        content = "# AI bots\nUser-agent: GPTBot # OpenAI\nDisallow: / # everything"
        assert parse_robots_txt_for_crawler(content, "GPTBot") == CrawlerStatus.BLOCKED

    def test_empty_disallow_counts_as_blocking(self):
        assert parse_robots_txt_for_crawler("User-agent: *\nDisallow:", "GPTBot") == CrawlerStatus.BLOCKED

    def test_partial_rules_are_not_specified(self):
        content = "User-agent: GPTBot\nDisallow: /private\nAllow: /public"
        assert parse_robots_txt_for_crawler(content, "GPTBot") == CrawlerStatus.NOT_SPECIFIED

    def test_allow_overrides_disallow_for_same_crawler(self):
        content = "User-agent: GPTBot\nDisallow: /\nAllow: /"
        assert parse_robots_txt_for_crawler(content, "GPTBot") == CrawlerStatus.ALLOWED

    def test_wildcard_block_applies_to_unlisted_crawlers(self):
        content = "User-agent: *\nDisallow: /\n\nUser-agent: PerplexityBot\nAllow: /"
        assert parse_robots_txt_for_crawler(content, "PerplexityBot") == CrawlerStatus.ALLOWED
        assert parse_robots_txt_for_crawler(content, "Bytespider") == CrawlerStatus.BLOCKED

    def test_empty_file(self):
        assert parse_robots_txt_for_crawler("", "GPTBot") == CrawlerStatus.NOT_SPECIFIED


class TestRobotsTxtFetch:

    @pytest.mark.asyncio
    async def test_missing_robots_txt(self, make_transport):
        async with httpx.AsyncClient(transport=make_transport({})) as client:
            analysis = await RobotsTxtAnalyzer().analyze(client, BASE + "/about")

        assert analysis.exists is False
        assert analysis.fetch_error == "HTTP 404"
        assert len(analysis.crawlers) == len(AI_CRAWLERS)
        assert all(rule.status == CrawlerStatus.NOT_SPECIFIED for rule in analysis.crawlers)

    @pytest.mark.asyncio
    async def test_network_error(self, make_transport, connect_error):
        async with httpx.AsyncClient(transport=make_transport({}, robots=connect_error)) as client:
            analysis = await RobotsTxtAnalyzer().analyze(client, BASE)

        assert analysis.exists is False
        assert analysis.fetch_error
        assert len(analysis.crawlers) == len(AI_CRAWLERS)

    @pytest.mark.asyncio
    async def test_slow_robots_txt_times_out(self, make_transport, slow_response, monkeypatch):
        monkeypatch.setattr(settings, "ROBOTS_TXT_TIMEOUT_SECONDS", 0.2)
        async with httpx.AsyncClient(transport=make_transport({}, robots=slow_response())) as client:
            analysis = await RobotsTxtAnalyzer().analyze(client, BASE)

        assert analysis.exists is False
        assert analysis.fetch_error == "Timed out after 0.2s"

    @pytest.mark.asyncio
    async def test_fetched_from_origin(self, make_transport):
        calls = []
        transport = make_transport({}, robots="User-agent: GPTBot\nDisallow: /", calls=calls)
        async with httpx.AsyncClient(transport=transport) as client:
            analysis = await RobotsTxtAnalyzer().analyze(client, BASE + "/blog/post")

        assert calls == [f"{BASE}/robots.txt"]
        assert analysis.exists is True
        assert analysis.fetch_error is None
        assert analysis.has_blocked_training_crawlers is True
        assert analysis.has_blocked_search_crawlers is False

    def test_catalog_classification(self):
        search = [c["name"] for c in AI_CRAWLERS if c["is_search_crawler"]]
        assert search == ["OAI-SearchBot", "PerplexityBot", "ChatGPT-User", "Applebot-Extended"]
        assert len(AI_CRAWLERS) == 17


# ─── AI readiness ──────────────────────────────────────────────────────────────

class TestAIReadiness:

    def test_all_allowed_site_is_good(self):
        robots = RobotsTxtAnalyzer.analyze_content("User-agent: *\nAllow: /")
        readiness = analyze_ai_readiness(robots, [SchemaMarkup(type="Organization", properties={})])

        assert readiness.overall_status == ReadinessStatus.GOOD
        assert readiness.issues == []
        assert readiness.is_ecommerce is False
        assert [r.platform for r in readiness.platform_recommendations] == [
            "ChatGPT Merchant Portal", "Bing Webmaster Tools", "Google Search Console",
        ]
        assert [r.applicable for r in readiness.platform_recommendations] == [False, True, True]
        assert readiness.platform_recommendations[0].reason.startswith("Not applicable")

    def test_any_blocked_search_crawler_is_critical(self):
        robots = RobotsTxtAnalyzer.analyze_content("User-agent: ChatGPT-User\nDisallow: /")
        readiness = analyze_ai_readiness(robots, [SchemaMarkup(type="Product", properties={})])

        assert readiness.overall_status == ReadinessStatus.CRITICAL
        assert len(readiness.issues) == 2
        assert readiness.issues[0].startswith("AI search crawlers are blocked")
        assert readiness.issues[1].startswith("E-commerce site detected")

    def test_key_search_crawlers_add_their_own_issues(self):
        robots = RobotsTxtAnalyzer.analyze_content(
            "User-agent: OAI-SearchBot\nUser-agent: PerplexityBot\nDisallow: /"
        )
        readiness = analyze_ai_readiness(robots, [])

        assert readiness.overall_status == ReadinessStatus.CRITICAL
        assert readiness.issues[0].startswith("AI search crawlers are blocked")
        assert readiness.issues[1].startswith("OAI-SearchBot is blocked")
        assert readiness.issues[2].startswith("PerplexityBot is blocked")

    def test_blocked_training_crawlers_alone_stay_good(self):
        robots = RobotsTxtAnalyzer.analyze_content("User-agent: GPTBot\nDisallow: /")
        assert analyze_ai_readiness(robots, []).overall_status == ReadinessStatus.GOOD

    def test_missing_robots_and_ecommerce_are_warnings(self):
        robots = RobotsTxtAnalyzer.unavailable("HTTP 404")
        readiness = analyze_ai_readiness(robots, [SchemaMarkup(type=["Thing", "Offer"], properties={})])

        assert readiness.overall_status == ReadinessStatus.WARNING
        assert readiness.is_ecommerce is True
        assert readiness.issues[0].startswith("No robots.txt found")
        assert readiness.issues[1].startswith("E-commerce site detected")
        assert all(r.applicable for r in readiness.platform_recommendations)

    def test_has_product_schema(self):
        assert has_product_schema([SchemaMarkup(type="ItemList", properties={})]) is True
        assert has_product_schema([SchemaMarkup(type=["Organization"], properties={})]) is False
        assert has_product_schema([]) is False


# ─── SPA detection ─────────────────────────────────────────────────────────────

class TestSpaDetection:

    @pytest.mark.parametrize("html,expected", [
        ('<div id="root"></div>', True),
        ('<div id="__next"></div>', True),
        ('<div ng-app="shop"></div>', True),
        ('<script type="module" src="/main.js"></script>', True),
        ('<div id="content"><p>Hello</p></div>', False),
    ])
    def test_framework_root(self, html, expected):
        assert has_spa_framework_root(parse_html(html)) is expected

    @pytest.mark.parametrize("word_count,headings_count,has_root,expected", [
        (80, 0, True, True),
        (80, 3, True, True),
        (120, 0, True, False),
        (40, 0, False, True),
        (40, 2, False, False),
        (60, 0, False, False),
    ])
    def test_is_likely_spa(self, word_count, headings_count, has_root, expected):
        assert is_likely_spa(word_count, headings_count, has_root) is expected

    def test_rendered_content_keeps_static_schema(self, make_page, organization_jsonld):
        page = make_page(f'<head>{organization_jsonld}</head><body><div id="root"></div></body>')
        updated = apply_rendered_content(page, RENDERED_MARKDOWN)

        assert len(updated.headings) == 3
        assert updated.bluf_analysis.total_headings == 3
        assert updated.content_stats.word_count > page.content_stats.word_count
        assert [s.type for s in updated.schema_markup] == ["Organization"]
        assert page.headings == []

    @pytest.mark.asyncio
    async def test_failed_proxy_keeps_sparse_page(self, make_page, make_transport):
        html = '<body><div id="root"></div></body>'
        page = make_page(html)
        async with httpx.AsyncClient(transport=make_transport({})) as client:
            result, detection = await apply_spa_fallback(client, page, parse_html(html))

        assert result == page
        assert detection.detected is True
        assert detection.used_jina_fallback is False
        assert detection.original_word_count == 0

    @pytest.mark.asyncio
    async def test_slow_proxy_keeps_sparse_page(self, make_page, make_transport, slow_response, monkeypatch):
        monkeypatch.setattr(settings, "RENDER_PROXY_TIMEOUT_SECONDS", 0.2)
        html = '<body><div id="root"></div></body>'
        page = make_page(html)
        transport = make_transport({}, rendered=slow_response())
        async with httpx.AsyncClient(transport=transport) as client:
            result, detection = await apply_spa_fallback(client, page, parse_html(html))

        assert result == page
        assert detection.used_jina_fallback is False

    @pytest.mark.asyncio
    async def test_content_rich_page_skips_fallback(self, make_page, make_transport):
        html = "<body><h1>Title</h1>" + "<p>" + "word " * 120 + "</p></body>"
        calls = []
        async with httpx.AsyncClient(transport=make_transport({}, calls=calls)) as client:
            result, detection = await apply_spa_fallback(client, make_page(html), parse_html(html))

        assert detection is None
        assert calls == []


# ─── Page issues ───────────────────────────────────────────────────────────────

class TestPageIssues:

    def test_bare_page_has_every_issue(self, make_page):
        issues = get_page_issues(make_page("<body><p>Hi</p></body>"))
        assert issues == [
            "Missing/short title",
            "No meta description",
            "No schema markup",
            "No H1",
            "Low word count",
            "Poor BLUF score",
        ]

    def test_multiple_h1s(self, make_page):
        issues = get_page_issues(make_page("<body><h1>One</h1><h1>Two</h1></body>"))
        assert "Multiple H1s" in issues
        assert "No H1" not in issues

    def test_complete_page_has_no_issues(self, make_page, organization_jsonld):
        html = (
            f'<head><title>Example Corp widgets</title><meta name="description" content="Widgets.">{organization_jsonld}</head>'
            "<body><h1>About</h1><p>Example Corp is a leading provider of widgets. " + "More words. " * 150 + "</p></body>"
        )
        assert get_page_issues(make_page(html)) == []

    def test_summary_title_fallback(self, make_page):
        summary = build_page_summary(make_page("<body><h2>Hi</h2></body>", "https://example.com/about"))
        assert summary.title == "Untitled"
        assert summary.url == "https://example.com/about"
        assert summary.headings_count == 1
