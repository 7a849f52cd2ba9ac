# intake_crawler/crawler/text_extractor.py
"""
Main-content text extraction.

Noise elements are removed from the tree first, then the content regions
are tried in order and the first non-blank one wins. Short regions fall
back to the whole ``<body>``.
"""
from __future__ import annotations

import re
from typing import Sequence

from bs4 import BeautifulSoup

from intake_crawler.logger import logger

__all__: Sequence[str] = ("NOISE_SELECTORS", "CONTENT_SELECTORS", "extract_text")

NOISE_SELECTORS: Sequence[str] = (
    "script",
    "style",
    "nav",
    "header",
    "footer",
    "iframe",
    "noscript",
    "aside",
    ".sidebar",
    "#sidebar",
    ".advertisement",
    ".ad",
    ".cookie-banner",
    ".popup",
    ".modal",
)

CONTENT_SELECTORS: Sequence[str] = (
    "main",
    "article",
    '[role="main"]',
    ".content",
    "#content",
    ".main-content",
    "#main-content",
)

MIN_REGION_CHARS = 100

_WS_RE = re.compile(r"\s+")


def _region_text(soup: BeautifulSoup) -> str:
    for selector in CONTENT_SELECTORS:
        text = " ".join(node.get_text(" ") for node in soup.select(selector))
        if text.strip():
            return text
    return ""


def extract_text(html: str) -> str:
    """Return whitespace-collapsed visible text of the page's main content."""
    try:
        soup = BeautifulSoup(html, "html.parser")
        for node in soup.select(", ".join(NOISE_SELECTORS)):
            # nested matches are gone with their removed ancestor
            if not node.decomposed:
                node.decompose()

        text = _region_text(soup)
        if len(text.strip()) < MIN_REGION_CHARS:
            body = soup.body
            text = body.get_text(" ") if body is not None else soup.get_text(" ")
    except Exception as exc:  # parser bugs must not abort the crawl
        logger.warning("Text extraction failed: %s", exc)
        return ""
    return _WS_RE.sub(" ", text).strip()
