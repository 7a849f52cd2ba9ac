# intake_crawler/report/json_report.py

"""
Генерация JSON-отчёта для проекта IntakeCrawler.

Сериализация CrawlResult в файл в том же виде, что отдаёт HTTP API.
"""
import json
from pathlib import Path

from intake_crawler.crawler.models import CrawlResult


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода result в формате JSON по указанному пути.

    :param result: объект CrawlResult
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела вместо компактной записи
    :return: Path сохранённого файла

    Пример:
    ```python
    from intake_crawler.report.json_report import render_json
    report_path = render_json(result, 'reports/crawl.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(result.to_response(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
