import sys
import asyncio
import logging
from app.core.exceptions import CrawlError
from app.services import CrawlService

async def main():
    url = sys.argv[1] if len(sys.argv) > 1 else "https://warwick.ac.uk/"
    keywords = sys.argv[2:]
    print(f"Crawling: {url} (keywords: {keywords})")

    try:
        result = await CrawlService.crawl_website(url, keywords)
    except CrawlError as e:
        print(f"Crawl failed: {e.message}")
        return

    print(f"Pages analyzed: {result.pages_analyzed}")
    for page in result.pages:
        print(f"  {page.url}: {page.word_count} words, {page.headings_count} headings, issues: {page.issues}")

    print(f"BLUF score: {result.bluf_analysis.score}")
    print(f"AI readiness: {result.ai_readiness.overall_status.value}")
    for issue in result.ai_readiness.issues:
        print(f"  - {issue}")

    if result.spa_detection:
        print(f"SPA detected, rendering fallback used: {result.spa_detection.used_jina_fallback}")

    # print(result.model_dump_json(by_alias=True, exclude_none=True, indent=4))

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
