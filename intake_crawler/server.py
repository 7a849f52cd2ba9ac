# File: intake_crawler/server.py
"""HTTP surface of IntakeCrawler: ``POST /intake/crawl`` on top of :mod:`aiohttp.web`."""

from __future__ import annotations

import json
from typing import Optional

from aiohttp import web
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from intake_crawler.config import CrawlerConfig
from intake_crawler.crawler.models import CrawlRequest
from intake_crawler.engine import run_crawl
from intake_crawler.errors import CrawlError
from intake_crawler.logger import logger, report_exception

__all__ = ["CrawlPayload", "create_app", "run_server", "CONFIG_KEY"]

CRAWL_ENDPOINT = "POST /intake/crawl"
CONFIG_KEY = web.AppKey("config", CrawlerConfig)
_MISSING_TYPES = frozenset({"missing", "string_too_short"})


class CrawlPayload(BaseModel):
    """Тело запроса ``POST /intake/crawl``."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    project_id: str = Field(..., alias="projectId", min_length=1)
    url: str = Field(..., min_length=1)
    max_pages: Optional[int] = Field(None, alias="maxPages", ge=0)
    max_depth: Optional[int] = Field(None, alias="maxDepth", ge=0)


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _payload_error(exc: ValidationError) -> str:
    # пустая строка в обязательном поле равносильна его отсутствию
    missing = {str(err["loc"][0]) for err in exc.errors() if err["type"] in _MISSING_TYPES}
    if missing & {"projectId", "url"}:
        return "Missing required fields: projectId and url"
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    return f"Invalid field {field}: {first['msg']}"


async def handle_crawl(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error("Request body must be valid JSON", 400)
    if not isinstance(body, dict):
        return _error("Request body must be a JSON object", 400)

    try:
        payload = CrawlPayload.model_validate(body)
    except ValidationError as exc:
        return _error(_payload_error(exc), 400)

    crawl_request = CrawlRequest(
        seed_url=payload.url,
        max_pages=config.max_pages if payload.max_pages is None else payload.max_pages,
        max_depth=config.max_depth if payload.max_depth is None else payload.max_depth,
        project_id=payload.project_id,
    )
    try:
        result = await run_crawl(crawl_request, config)
    except CrawlError as exc:
        logger.info("Crawl of %s rejected (%d): %s", payload.url, exc.status, exc.message)
        return _error(exc.message, exc.status)
    except Exception as exc:
        report_exception(exc, component="api", endpoint=CRAWL_ENDPOINT)
        return _error("Internal server error", 500)

    return web.json_response(result.to_response())


async def handle_health(_: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


def create_app(config: Optional[CrawlerConfig] = None) -> web.Application:
    """Собирает приложение aiohttp с маршрутами краулера."""
    app = web.Application()
    app[CONFIG_KEY] = config or CrawlerConfig()
    app.router.add_post("/intake/crawl", handle_crawl)
    app.router.add_get("/health", handle_health)
    return app


def run_server(config: CrawlerConfig) -> None:
    """Запускает HTTP-сервер до остановки процесса."""
    logger.info("Serving on http://%s:%d", config.host, config.port)
    web.run_app(create_app(config), host=config.host, port=config.port, print=None)
