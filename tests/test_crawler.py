# File: tests/test_crawler.py
# Test-suite for the BFS orchestrator against real local aiohttp servers
from __future__ import annotations

import asyncio
import time
from collections import Counter

import pytest
from aiohttp import web

from conftest import article, make_site
from intake_crawler.config import CrawlerConfig
from intake_crawler.crawler.crawler import SiteCrawler
from intake_crawler.crawler.models import CrawlRequest, CrawlSession


async def run_crawler(config: CrawlerConfig, request: CrawlRequest) -> CrawlSession:
    async with SiteCrawler(config) as crawler:
        return await asyncio.wait_for(crawler.crawl(request), timeout=15)


def paths(state: CrawlSession, base: str) -> list[str]:
    return [p.url.removeprefix(base) or "/" for p in state.pages]


# --------------------------------------------------------------------------- #
#                                   Tests                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_breadth_first_order(fast_config, serve):
    site = make_site(
        {
            "/": article("Home", ("/a", "/b")),
            "/a": article("Page A", ("/a/deep",)),
            "/b": article("Page B"),
            "/a/deep": article("Deep page"),
        }
    )
    base = await serve(site)
    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_depth=3))

    assert paths(state, base) == ["/", "/a", "/b", "/a/deep"]
    assert [p.depth for p in state.pages] == [0, 1, 1, 2]
    assert not state.timed_out


@pytest.mark.asyncio()
async def test_single_page_when_depth_is_zero(fast_config, serve):
    hits: Counter = Counter()
    site = make_site({"/": article("Home", ("/a",)), "/a": article("Page A")}, hits=hits)
    base = await serve(site)

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_pages=1, max_depth=0))

    assert len(state.pages) == 1
    assert hits == Counter({"/": 1})


@pytest.mark.asyncio()
async def test_page_budget(fast_config, serve):
    links = tuple(f"/p{i}" for i in range(10))
    pages = {"/": article("Home", links)}
    pages.update({path: article(f"Page {path}") for path in links})
    base = await serve(make_site(pages))

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_pages=3, max_depth=1))

    assert len(state.pages) == 3
    assert paths(state, base) == ["/", "/p0", "/p1"]


@pytest.mark.asyncio()
async def test_zero_page_budget_fetches_nothing(fast_config, serve):
    hits: Counter = Counter()
    base = await serve(make_site({"/": article("Home")}, hits=hits))

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_pages=0))

    assert state.pages == []
    assert not hits


@pytest.mark.asyncio()
async def test_each_url_fetched_once(fast_config, serve):
    hits: Counter = Counter()
    site = make_site(
        {
            "/": article("Home", ("/a", "/a/", "/a?ref=nav", "/a#top", "/b")),
            "/a": article("Page A", ("/", "/b", "/b/")),
            "/b": article("Page B", ("/a", "/")),
        },
        hits=hits,
    )
    base = await serve(site)

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base + "/", max_depth=3))

    urls = [p.url for p in state.pages]
    assert len(urls) == len(set(urls)) == 3
    assert all(count == 1 for count in hits.values())


@pytest.mark.asyncio()
async def test_depth_never_exceeds_max(fast_config, serve):
    site = make_site(
        {
            "/": article("Home", ("/l1",)),
            "/l1": article("Level one", ("/l2",)),
            "/l2": article("Level two", ("/l3",)),
            "/l3": article("Level three", ("/l4",)),
            "/l4": article("Level four"),
        }
    )
    base = await serve(site)

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_depth=2))

    assert max(p.depth for p in state.pages) == 2
    assert paths(state, base) == ["/", "/l1", "/l2"]


@pytest.mark.asyncio()
async def test_page_at_max_depth_is_crawled(fast_config, serve):
    site = make_site(
        {
            "/": article("Home", ("/l1",)),
            "/l1": article("Level one", ("/l2",)),
            "/l2": article("Level two", ("/l3",)),
            "/l3": article("Level three"),
        }
    )
    base = await serve(site)

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_depth=3))

    assert state.pages[-1].url == f"{base}/l3"
    assert state.pages[-1].depth == 3


@pytest.mark.asyncio()
async def test_short_pages_are_dropped_but_followed(fast_config, serve):
    site = make_site(
        {
            "/": '<html><body><a href="/full">more</a><p>Tiny.</p></body></html>',
            "/full": article("Full page"),
        }
    )
    base = await serve(site)

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_depth=1))

    assert paths(state, base) == ["/full"]
    assert all(len(p.text) >= fast_config.min_page_chars for p in state.pages)


@pytest.mark.asyncio()
async def test_cross_domain_links_not_enqueued(fast_config, serve):
    site = make_site({"/": article("Home", ("https://otherdomain.com/about", "/local")), "/local": article("Local")})
    base = await serve(site)

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_depth=1))

    assert all(key.startswith(base) for key in state.visited)
    assert paths(state, base) == ["/", "/local"]


@pytest.mark.asyncio()
async def test_non_html_seed_yields_nothing(fast_config, serve):
    base = await serve(make_site({"/": "%PDF-1.4 fake"}, content_type="application/pdf"))

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base))

    assert state.pages == []
    assert not state.timed_out


@pytest.mark.asyncio()
async def test_broken_links_are_skipped(fast_config, serve):
    site = make_site({"/": article("Home", ("/missing", "/ok")), "/ok": article("Fine page")})
    base = await serve(site)

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_depth=1))

    assert paths(state, base) == ["/", "/ok"]
    assert f"{base}/missing" in state.visited


@pytest.mark.asyncio()
async def test_deadline_returns_partial_result(serve):
    app = make_site({"/": article("Home", ("/slow", "/after"))})

    async def handle_slow(_):
        await asyncio.sleep(3)
        return web.Response(text=article("Slow"), content_type="text/html")

    async def handle_after(_):
        return web.Response(text=article("After"), content_type="text/html")

    app.router.add_get("/slow", handle_slow)
    app.router.add_get("/after", handle_after)
    base = await serve(app)
    config = CrawlerConfig(request_delay=0.0, request_timeout=5.0, crawl_timeout=0.5, allow_private_hosts=True)

    start = time.monotonic()
    state = await run_crawler(config, CrawlRequest(seed_url=base, max_depth=1))
    elapsed = time.monotonic() - start

    assert elapsed < 2.0
    assert state.timed_out
    assert paths(state, base) == ["/"]


@pytest.mark.asyncio()
async def test_politeness_delay_between_requests(serve):
    site = make_site({"/": article("Home", ("/a", "/b")), "/a": article("Page A"), "/b": article("Page B")})
    base = await serve(site)
    config = CrawlerConfig(request_delay=0.2, crawl_timeout=10.0, allow_private_hosts=True)

    start = time.monotonic()
    state = await run_crawler(config, CrawlRequest(seed_url=base, max_depth=1))
    elapsed = time.monotonic() - start

    assert len(state.pages) == 3
    # two pauses: after "/" and after "/a"; none once the queue is empty
    assert elapsed >= 0.4


@pytest.mark.asyncio()
@pytest.mark.slow()
async def test_stress_crawl_respects_budget(fast_config, serve):
    links = tuple(f"/page{i}" for i in range(1, 201))
    pages = {"/": article("Home", links)}
    pages.update({path: article(f"Stress {path}") for path in links})
    base = await serve(make_site(pages))

    state = await run_crawler(fast_config, CrawlRequest(seed_url=base, max_pages=50, max_depth=1))

    assert len(state.pages) == 50
    assert len({p.url for p in state.pages}) == 50
