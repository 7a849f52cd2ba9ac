"""intake_crawler.report: сохранение результатов обхода в файлы для CLI."""

from __future__ import annotations

from intake_crawler.report.json_report import render_json

__all__ = ["render_json"]
