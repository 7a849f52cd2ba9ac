# intake_crawler/crawler/link_extractor.py
"""
Link extraction for IntakeCrawler: same-host, navigable pages only.
"""
from __future__ import annotations

import re
from typing import List
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from intake_crawler.utils import normalize_url

SKIP_PREFIXES = ("#", "javascript:", "mailto:", "tel:")
ASSET_RE = re.compile(r"\.(pdf|jpg|jpeg|png|gif|svg|ico|css|js|xml|json)$", re.IGNORECASE)


def _is_navigable(href: str) -> bool:
    lowered = href.lower()
    return not (lowered.startswith(SKIP_PREFIXES) or ASSET_RE.search(href))


def extract_links(html: str, base_url: str) -> List[str]:
    """
    Return unique normalized URLs on the same hostname as *base_url*.

    Every element with an ``href`` is considered (``<a>``, ``<link>``,
    ``<area>``). Query strings, fragments and trailing slashes are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    base_host = urlparse(base_url).hostname
    seen: set[str] = set()
    links: List[str] = []
    for tag in soup.find_all(href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or not _is_navigable(raw):
            continue
        try:
            absolute = urljoin(base_url, raw)
            parsed = urlparse(absolute)
            host = parsed.hostname
        except ValueError:
            continue
        if parsed.scheme not in ("http", "https") or host != base_host:
            continue
        link = normalize_url(absolute)
        if link not in seen:
            seen.add(link)
            links.append(link)
    return links
