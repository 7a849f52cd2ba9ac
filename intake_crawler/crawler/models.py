# intake_crawler/crawler/models.py
"""
Data models for the IntakeCrawler crawler.

Everything here lives only for the duration of one crawl.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Set


@dataclass(slots=True)
class CrawlRequest:
    """What to crawl and within which budget."""

    seed_url: str
    max_pages: int = 50
    max_depth: int = 3
    project_id: Optional[str] = None


@dataclass(slots=True)
class FrontierEntry:
    """A discovered URL waiting in the BFS queue."""

    url: str
    depth: int


@dataclass(slots=True)
class FetchResult:
    """Outcome of a single GET. ``ok=False`` always comes with empty html."""

    html: str
    ok: bool
    status: Optional[int] = None
    reason: str = ""

    @classmethod
    def failed(cls, reason: str, status: Optional[int] = None) -> FetchResult:
        return cls(html="", ok=False, status=status, reason=reason)


@dataclass(slots=True, frozen=True)
class PageContent:
    """Extracted text of one crawled page."""

    url: str
    text: str
    depth: int


@dataclass(slots=True)
class CrawlSession:
    """Mutable state of a single crawl invocation."""

    request: CrawlRequest
    deadline: float
    queue: Deque[FrontierEntry] = field(default_factory=deque)
    visited: Set[str] = field(default_factory=set)
    pages: List[PageContent] = field(default_factory=list)
    timed_out: bool = False

    @property
    def budget_left(self) -> bool:
        return len(self.pages) < self.request.max_pages


@dataclass(slots=True)
class CrawlResult:
    """Deduplicated text of a finished crawl."""

    combined_text: str
    page_count: int
    urls: List[str]

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "content": self.combined_text,
            "pagesScraped": self.page_count,
            "urls": list(self.urls),
        }
