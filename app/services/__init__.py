"""
Service module containing the crawl orchestration
"""
from .crawl_core import CrawlService

__all__ = ["CrawlService"]
