# File: intake_crawler/aggregator.py
"""intake_crawler.aggregator: сборка общего текста обхода и удаление повторяющихся абзацев."""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional

from intake_crawler.crawler.models import CrawlResult, CrawlSession, PageContent

__all__ = [
    "SECTION_MARKER_RE",
    "combine_pages",
    "deduplicate_content",
    "aggregate_results",
]

MIN_SECTION_CHARS = 50
MIN_PARAGRAPH_CHARS = 20

SECTION_MARKER_RE = re.compile(r"^---\s*From:\s*(?P<url>.*?)\s*---[ \t]*$", re.MULTILINE)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_WS_RE = re.compile(r"\s+")


@dataclass(slots=True)
class _Section:
    header: Optional[str]
    paragraphs: List[str]


def _marker(url: str) -> str:
    return f"--- From: {url} ---"


def combine_pages(pages: Iterable[PageContent], min_chars: int = MIN_SECTION_CHARS) -> str:
    """Склеивает тексты страниц, помечая каждую строкой ``--- From: <url> ---``."""
    parts = []
    for page in pages:
        text = page.text.strip()
        if len(text) < min_chars:
            continue
        parts.append(f"{_marker(page.url)}\n{text}")
    return "\n\n".join(parts)


def _split_sections(content: str) -> List[_Section]:
    sections: List[_Section] = []
    matches = list(SECTION_MARKER_RE.finditer(content))
    # текст до первого маркера (если есть) считается отдельной секцией без заголовка
    lead_end = matches[0].start() if matches else len(content)
    bodies = [(None, content[:lead_end])]
    for idx, match in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(content)
        bodies.append((match.group(0).strip(), content[match.end():end]))
    for header, body in bodies:
        paragraphs = [p.strip() for p in _PARAGRAPH_SPLIT_RE.split(body)]
        paragraphs = [p for p in paragraphs if p]
        if header is None and not paragraphs:
            continue
        sections.append(_Section(header=header, paragraphs=paragraphs))
    return sections


def _normalize(paragraph: str) -> str:
    return _WS_RE.sub(" ", paragraph.lower())


def _is_exempt(paragraph: str) -> bool:
    return len(paragraph) <= MIN_PARAGRAPH_CHARS or paragraph.startswith("http")


def _candidates(section: _Section) -> List[str]:
    # первый абзац после маркера принадлежит своей странице и в подсчёт не входит
    return section.paragraphs[1:] if section.header else section.paragraphs


def _dedup_pass(content: str) -> str:
    sections = _split_sections(content)
    if not sections:
        return ""

    counts: Counter[str] = Counter()
    for section in sections:
        counts.update({_normalize(p) for p in _candidates(section) if not _is_exempt(p)})

    threshold = max(2, math.ceil(len(sections) * 0.5))
    boilerplate = {para for para, count in counts.items() if count >= threshold}

    result: List[str] = []
    for section in sections:
        kept = [p for p in _candidates(section) if _is_exempt(p) or _normalize(p) not in boilerplate]
        if section.header and section.paragraphs:
            kept.insert(0, section.paragraphs[0])
        body = "\n\n".join(kept)
        if len(body) <= MIN_SECTION_CHARS:
            continue
        result.append(f"{section.header}\n{body}" if section.header else body)
    return "\n\n".join(result)


def deduplicate_content(content: str) -> str:
    """
    Удаляет абзацы, повторяющиеся в половине и более секций (минимум в двух).

    Короткие абзацы (до 20 символов) и строки, начинающиеся с ``http``,
    не трогаются, как и первый абзац каждой секции после маркера. Секции,
    от которых осталось не больше 50 символов, выбрасываются целиком.
    Проходы повторяются, пока результат меняется, поэтому
    повторный вызов на выходе функции ничего не меняет.
    """
    current = content
    while True:
        reduced = _dedup_pass(current)
        if reduced == current:
            return reduced
        current = reduced


def aggregate_results(state: CrawlSession) -> CrawlResult:
    """Собирает CrawlResult из состояния завершённого обхода."""
    combined = combine_pages(state.pages)
    return CrawlResult(
        combined_text=deduplicate_content(combined),
        page_count=len(state.pages),
        urls=[page.url for page in state.pages],
    )
