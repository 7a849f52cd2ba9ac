# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from typing import Callable, Dict, Optional

import pytest
import pytest_asyncio
from aiohttp import web

from intake_crawler.config import CrawlerConfig

LOREM = (
    "Our coaching program helps founders turn a single webinar into a repeatable "
    "sales engine with clear offers and honest follow-up."
)


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


def article(title: str, links: tuple[str, ...] = (), extra: str = "") -> str:
    """HTML page with enough main-content text to be kept by the crawler."""
    nav = "".join(f'<a href="{href}">{href}</a>' for href in links)
    return (
        f"<html><head><title>{title}</title></head><body>"
        f"<nav>{nav}</nav>"
        f"<main><h1>{title}</h1><p>{title}: {LOREM}</p>{extra}</main>"
        "<footer>Footer links</footer></body></html>"
    )


def make_site(
    pages: Dict[str, str],
    robots: Optional[str] = None,
    hits: Optional[Counter] = None,
    content_type: str = "text/html",
) -> web.Application:
    """Build an aiohttp app serving *pages*; every request path is counted in *hits*."""
    app = web.Application()
    counter = hits if hits is not None else Counter()

    def _page_handler(path: str, html: str) -> Callable:
        async def handler(_):
            counter[path] += 1
            return web.Response(text=html, content_type=content_type)

        return handler

    for path, html in pages.items():
        app.router.add_get(path, _page_handler(path, html))

    if robots is not None:
        async def handle_robots(_):
            counter["/robots.txt"] += 1
            return web.Response(text=robots, content_type="text/plain")

        app.router.add_get("/robots.txt", handle_robots)
    return app


@pytest.fixture()
def fast_config() -> CrawlerConfig:
    """Config for tests against local servers: no politeness delay, private hosts allowed."""
    return CrawlerConfig(
        request_delay=0.0,
        request_timeout=2.0,
        crawl_timeout=10.0,
        allow_private_hosts=True,
        robots_agent="intakecrawler",
    )


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory):
    """Start aiohttp apps on free ports; yields ``async serve(app) -> base_url``."""
    runners: list[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    try:
        yield _serve
    finally:
        for runner in runners:
            await runner.cleanup()
