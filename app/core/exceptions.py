"""
Fatal crawl errors.

Only these reach the caller. Every other failure (a sub-page, robots.txt,
the rendering proxy, a single JSON-LD block) is absorbed where it happens
and shows up as missing data in the result.
"""


class CrawlError(Exception):
    """Base class for errors that abort a crawl request."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidUrlError(CrawlError):
    """The requested URL is missing or cannot be normalized."""


class HomepageFetchError(CrawlError):
    """The homepage could not be fetched (network error, timeout or non-2xx)."""


class HomepageParseError(CrawlError):
    """The homepage HTML could not be parsed into a document."""
