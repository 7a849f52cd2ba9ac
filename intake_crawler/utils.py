# File: intake_crawler/utils.py
"""intake_crawler.utils: Утилиты для нормализации URL и защиты от обхода внутренних адресов (SSRF)."""

from __future__ import annotations

import asyncio
import ipaddress
import socket
from typing import Sequence
from urllib.parse import urlparse, urlunparse

from intake_crawler.errors import InternalAddressError, InvalidURLError
from intake_crawler.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "visit_key",
    "validate_seed_url",
    "is_internal_host",
    "resolves_to_internal",
    "guard_host",
)

_INTERNAL_PREFIXES = ("127.", "10.", "192.168.")
_INTERNAL_SUFFIXES = (".local", ".localhost")
_INTERNAL_NAMES = frozenset({"localhost", "localhost.localdomain"})


def normalize_url(url: str) -> str:
    """Убирает query, fragment и завершающий слеш."""
    parsed = urlparse(url)
    path = parsed.path.rstrip("/")
    return urlunparse((parsed.scheme, parsed.netloc, path, "", "", ""))


def visit_key(url: str) -> str:
    """Ключ множества посещённых URL: адрес без завершающего слеша."""
    return url.rstrip("/")


def validate_seed_url(url: str) -> str:
    """Проверяет, что URL абсолютный и использует http(s). Возвращает его без пробелов по краям."""
    candidate = (url or "").strip()
    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
    except ValueError as exc:
        raise InvalidURLError() from exc
    if parsed.scheme not in ("http", "https") or not hostname:
        raise InvalidURLError()
    return candidate


def _is_internal_ip(ip: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_unspecified
        or ip.is_reserved
        or ip.is_multicast
    )


def is_internal_host(hostname: str) -> bool:
    """Истина для localhost, *.local, частных диапазонов и IP-литералов внутренних сетей."""
    host = (hostname or "").strip().lower().strip("[]").rstrip(".")
    if not host:
        return True
    if host in _INTERNAL_NAMES or host.endswith(_INTERNAL_SUFFIXES):
        return True
    if host.startswith(_INTERNAL_PREFIXES):
        return True
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    return _is_internal_ip(ip)


async def resolves_to_internal(hostname: str) -> bool:
    """Разрешает имя через DNS; истина, если хотя бы один адрес внутренний."""
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(hostname, None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError) as exc:
        # Неразрешимое имя не считается внутренним: запрос просто не пройдёт.
        logger.debug("DNS resolution failed for %s: %s", hostname, exc)
        return False
    for info in infos:
        try:
            ip = ipaddress.ip_address(info[4][0].split("%", 1)[0])
        except ValueError:
            continue
        if _is_internal_ip(ip):
            logger.debug("Host %s resolves to internal address %s", hostname, ip)
            return True
    return False


async def guard_host(url: str) -> None:
    """Бросает InternalAddressError, если URL указывает во внутреннюю сеть."""
    hostname = urlparse(url).hostname or ""
    if is_internal_host(hostname) or await resolves_to_internal(hostname):
        raise InternalAddressError()
