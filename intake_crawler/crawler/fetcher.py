# intake_crawler/crawler/fetcher.py
"""
Fetcher module: one GET per page, bounded by the per-request timeout and
by whatever is left of the crawl-wide deadline.
"""
from __future__ import annotations

import asyncio
import time

from aiohttp import ClientError, ClientSession, ClientTimeout

from intake_crawler.config import CrawlerConfig
from intake_crawler.crawler.models import FetchResult
from intake_crawler.logger import logger

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class Fetcher:
    """Fetches HTML pages; every failure degrades to ``FetchResult.ok == False``."""

    def __init__(self, session: ClientSession, config: CrawlerConfig) -> None:
        self.session = session
        self.config = config
        self.headers = {"User-Agent": config.user_agent, "Accept": ACCEPT_HEADER}

    async def fetch(self, url: str, deadline: float | None = None) -> FetchResult:
        """
        GET *url* and return its HTML.

        *deadline* is a ``time.monotonic()`` timestamp; the request never
        outlives it.
        """
        timeout = self.config.request_timeout
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return FetchResult.failed("crawl deadline reached")
            timeout = min(timeout, remaining)

        try:
            async with self.session.get(
                url, headers=self.headers, timeout=ClientTimeout(total=timeout)
            ) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning("Failed to fetch page %s: HTTP %s", url, resp.status)
                    return FetchResult.failed(f"HTTP {resp.status}", resp.status)
                ctype = resp.headers.get("Content-Type", "").lower()
                if "text/html" not in ctype:
                    logger.warning("Skipping %s: content type %r is not HTML", url, ctype)
                    return FetchResult.failed(f"content type {ctype or 'missing'}", resp.status)
                html = await resp.text(errors="replace")
                return FetchResult(html=html, ok=True, status=resp.status)
        except asyncio.TimeoutError:
            logger.warning("Failed to fetch page %s: timed out after %.1f s", url, timeout)
            return FetchResult.failed("timeout")
        except (ClientError, UnicodeError, ValueError) as exc:
            logger.warning("Failed to fetch page %s: %s", url, exc)
            return FetchResult.failed(str(exc) or type(exc).__name__)
