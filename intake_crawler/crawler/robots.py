# intake_crawler/crawler/robots.py
"""
Site-wide robots.txt gate.

Only answers one question: does robots.txt forbid this crawler the whole
site? Path-level rules and ``Allow:`` lines are not evaluated.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from urllib.parse import urlparse, urlunparse

from aiohttp import ClientError, ClientSession, ClientTimeout

from intake_crawler.logger import logger

__all__ = ("RobotsPolicy", "robots_url", "is_blocked_by_robots")

_ROOT_RULES = frozenset({"/", "/*"})


@dataclass(slots=True, frozen=True)
class RobotsPolicy:
    """Parsed verdict for one robots.txt and one crawler name."""

    blocks_all: bool = False

    @classmethod
    def parse(cls, text: str, agent_token: str) -> RobotsPolicy:
        """Walk the file line by line; a root Disallow in an applicable group blocks."""
        token = agent_token.lower()
        applies = False
        for raw in text.lower().splitlines():
            line = raw.strip()
            key, sep, val = line.partition(":")
            if not sep:
                continue
            key = key.strip()
            val = val.strip()
            if key == "user-agent":
                applies = val == "*" or (bool(val) and token in val)
            elif key == "disallow" and applies and val in _ROOT_RULES:
                return cls(blocks_all=True)
        return cls(blocks_all=False)


def robots_url(base_url: str) -> str:
    parsed = urlparse(base_url)
    return urlunparse((parsed.scheme, parsed.netloc, "/robots.txt", "", "", ""))


async def is_blocked_by_robots(
    session: ClientSession,
    base_url: str,
    agent_token: str,
    timeout: float = 10.0,
    user_agent: str | None = None,
) -> bool:
    """Fetch robots.txt of *base_url*; any failure or non-2xx means allowed."""
    url = robots_url(base_url)
    try:
        headers = {"User-Agent": user_agent} if user_agent else None
        async with session.get(url, headers=headers, timeout=ClientTimeout(total=timeout)) as resp:
            if not 200 <= resp.status < 300:
                logger.debug("robots.txt %s -> HTTP %s, assuming allowed", url, resp.status)
                return False
            text = await resp.text(errors="replace")
    except (ClientError, asyncio.TimeoutError, UnicodeError) as exc:
        logger.warning("Error loading robots.txt %s: %s", url, exc)
        return False

    policy = RobotsPolicy.parse(text, agent_token)
    if policy.blocks_all:
        logger.warning("robots.txt at %s disallows the whole site", url)
    return policy.blocks_all
