# File: intake_crawler/engine.py
"""intake_crawler.engine: Orchestration layer: проверки запроса, обход сайта и сборка результата."""

from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientSession

from intake_crawler.aggregator import aggregate_results
from intake_crawler.config import CrawlerConfig
from intake_crawler.crawler.crawler import SiteCrawler
from intake_crawler.crawler.models import CrawlRequest, CrawlResult
from intake_crawler.errors import CrawlTimeoutError, NoContentError, RobotsBlockedError
from intake_crawler.logger import logger
from intake_crawler.utils import guard_host, validate_seed_url

__all__ = ["Engine", "run_crawl"]


async def run_crawl(
    request: CrawlRequest,
    config: CrawlerConfig,
    session: Optional[ClientSession] = None,
) -> CrawlResult:
    """
    Полный цикл обхода для одного запроса.

    Порядок: проверка URL → защита от внутренних адресов → robots.txt →
    BFS-обход → дедупликация. Ошибки уровня запроса выбрасываются как
    подклассы :class:`~intake_crawler.errors.CrawlError`.
    """
    seed = validate_seed_url(request.seed_url)
    if not config.allow_private_hosts:
        await guard_host(seed)
    request.seed_url = seed

    logger.info(
        "Starting multi-page crawl: url=%s max_pages=%d max_depth=%d project=%s",
        seed,
        request.max_pages,
        request.max_depth,
        request.project_id,
    )

    async with SiteCrawler(config, session=session) as crawler:
        if await crawler.is_blocked(seed):
            raise RobotsBlockedError()
        state = await crawler.crawl(request)

    if not state.pages:
        if state.timed_out:
            raise CrawlTimeoutError()
        raise NoContentError()

    result = aggregate_results(state)
    logger.info(
        "Multi-page crawl completed: url=%s pages_scraped=%d content_length=%d visited=%d project=%s",
        seed,
        result.page_count,
        len(result.combined_text),
        len(state.visited),
        request.project_id,
    )
    return result


class Engine:
    """Фасад для CLI и тестов: загрузка конфига и синхронный запуск обхода."""

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config

    def build_request(
        self,
        url: str,
        max_pages: Optional[int] = None,
        max_depth: Optional[int] = None,
        project_id: Optional[str] = None,
    ) -> CrawlRequest:
        return CrawlRequest(
            seed_url=url,
            max_pages=self.config.max_pages if max_pages is None else max_pages,
            max_depth=self.config.max_depth if max_depth is None else max_depth,
            project_id=project_id,
        )

    def start_crawl(
        self,
        url: str,
        max_pages: Optional[int] = None,
        max_depth: Optional[int] = None,
        project_id: Optional[str] = None,
    ) -> CrawlResult:
        """Запускает обход в новом event loop и возвращает CrawlResult."""
        request = self.build_request(url, max_pages, max_depth, project_id)
        return asyncio.run(run_crawl(request, self.config))
