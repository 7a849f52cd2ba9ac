"""intake_crawler.errors: request-level failures of a crawl.

Each error carries the user-facing message and the HTTP status the
``POST /intake/crawl`` endpoint answers with. Page-level problems
(timeouts, non-HTML responses, 5xx) never become exceptions; the
orchestrator skips such pages.
"""
from __future__ import annotations

__all__ = [
    "CrawlError",
    "InvalidURLError",
    "InternalAddressError",
    "RobotsBlockedError",
    "NoContentError",
    "CrawlTimeoutError",
]


class CrawlError(Exception):
    """Base class for crawl failures that are reported to the caller."""

    status: int = 400
    default_message: str = "Crawl failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidURLError(CrawlError):
    status = 400
    default_message = "Invalid URL. Please enter a valid HTTP or HTTPS URL."


class InternalAddressError(CrawlError):
    status = 400
    default_message = "Cannot crawl internal network addresses"


class RobotsBlockedError(CrawlError):
    status = 403
    default_message = "Website blocks automated crawling via robots.txt"


class NoContentError(CrawlError):
    status = 400
    default_message = "No content could be extracted from the website"


class CrawlTimeoutError(CrawlError):
    status = 408
    default_message = "Request timed out. The website may be too slow to respond."
