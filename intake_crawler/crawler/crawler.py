# === FILE: intake_crawler/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Optional

from aiohttp import ClientSession

from intake_crawler.config import CrawlerConfig
from intake_crawler.crawler.fetcher import Fetcher
from intake_crawler.crawler.link_extractor import extract_links
from intake_crawler.crawler.models import CrawlRequest, CrawlSession, FrontierEntry, PageContent
from intake_crawler.crawler.robots import is_blocked_by_robots
from intake_crawler.crawler.text_extractor import extract_text
from intake_crawler.logger import logger
from intake_crawler.utils import visit_key

__all__ = ("SiteCrawler",)


class SiteCrawler:
    """Breadth-first crawler: one page at a time, fixed politeness delay, hard deadline."""

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session: Optional[ClientSession] = session
        self._owns_session = session is None

    async def __aenter__(self) -> SiteCrawler:
        if self.session is None:
            self.session = ClientSession(raise_for_status=False)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    def _require_session(self) -> ClientSession:
        if not self.session:
            raise RuntimeError("Session not initialized")
        return self.session

    async def is_blocked(self, base_url: str) -> bool:
        """True when robots.txt of *base_url* disallows the whole site for this crawler."""
        return await is_blocked_by_robots(
            self._require_session(),
            base_url,
            self.config.robots_agent,
            timeout=self.config.request_timeout,
            user_agent=self.config.user_agent,
        )

    async def crawl(self, request: CrawlRequest) -> CrawlSession:
        """Run the BFS for *request*; pages collected before the deadline are kept."""
        fetcher = Fetcher(self._require_session(), self.config)
        start = time.monotonic()
        state = CrawlSession(request=request, deadline=start + self.config.crawl_timeout)
        state.queue.append(FrontierEntry(request.seed_url, 0))

        while state.queue and state.budget_left:
            if time.monotonic() >= state.deadline:
                state.timed_out = True
                break

            entry = state.queue.popleft()
            key = visit_key(entry.url)
            if key in state.visited or entry.depth > request.max_depth:
                continue
            state.visited.add(key)

            result = await fetcher.fetch(entry.url, state.deadline)
            if not result.ok or not result.html:
                if time.monotonic() >= state.deadline:
                    state.timed_out = True
                    break
                continue

            text = extract_text(result.html)
            if len(text) >= self.config.min_page_chars:
                state.pages.append(PageContent(url=entry.url, text=text, depth=entry.depth))
            else:
                logger.debug("Dropping %s: only %d chars of text", entry.url, len(text))

            if state.budget_left and entry.depth < request.max_depth:
                for link in extract_links(result.html, entry.url):
                    if visit_key(link) not in state.visited:
                        state.queue.append(FrontierEntry(link, entry.depth + 1))

            if state.queue:
                await self._pause(state.deadline)

        duration = time.monotonic() - start
        logger.info(
            "Crawl of %s finished: %d pages, %d visited in %.2f s%s",
            request.seed_url,
            len(state.pages),
            len(state.visited),
            duration,
            " (deadline reached)" if state.timed_out else "",
        )
        return state

    async def _pause(self, deadline: float) -> None:
        delay = min(self.config.request_delay, deadline - time.monotonic())
        if delay > 0:
            await asyncio.sleep(delay)
