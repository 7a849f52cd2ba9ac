# === FILE: intake_crawler/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера IntakeCrawler.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; IntakeCrawler/1.0; +https://example.com/bot)"


class CrawlerConfig(BaseModel):
    """Настройки краулера и HTTP-сервера."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    robots_agent: str = Field(
        "intakecrawler", min_length=1, description="Имя бота для секций User-agent в robots.txt."
    )
    max_pages: int = Field(50, ge=0, description="Лимит страниц по умолчанию.")
    max_depth: int = Field(3, ge=0, description="Глубина обхода по умолчанию.")
    request_timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    crawl_timeout: float = Field(60.0, gt=0, description="Общий таймаут обхода (секунд).")
    request_delay: float = Field(0.5, ge=0, description="Пауза между запросами (секунд).")
    min_page_chars: int = Field(50, ge=0, description="Минимальная длина текста страницы.")
    allow_private_hosts: bool = Field(
        False, description="Отключить защиту от SSRF (только для локальной разработки)."
    )
    host: str = Field("127.0.0.1", min_length=1, description="Адрес HTTP-сервера.")
    port: int = Field(8080, ge=1, le=65535, description="Порт HTTP-сервера.")


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути использует configs/default.yaml, а если его нет, встроенные значения.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "DEFAULT_USER_AGENT", "load_config"]
