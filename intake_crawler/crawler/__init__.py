"""intake_crawler.crawler: robots gate, page fetcher, extractors and the BFS orchestrator."""

from intake_crawler.crawler.crawler import SiteCrawler
from intake_crawler.crawler.models import CrawlRequest, CrawlResult, CrawlSession, FetchResult, PageContent

__all__ = ["SiteCrawler", "CrawlRequest", "CrawlResult", "CrawlSession", "FetchResult", "PageContent"]
