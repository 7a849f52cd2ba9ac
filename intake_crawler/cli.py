#!/usr/bin/env python3
# === FILE: intake_crawler/cli.py ===
"""
Точка входа для запуска краулера IntakeCrawler через командную строку.

Команды:
  crawl URL   Обойти сайт и вывести/сохранить собранный текст
  serve       Запустить HTTP-сервер с POST /intake/crawl
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --max-pages INT     Лимит страниц (override max_pages)
  --max-depth INT     Глубина обхода (override max_depth)
  --project-id ID     Идентификатор проекта для логов
  --json PATH         Сохранить JSON-результат в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)

Дополнительно:
  --version, -v       Показать версию IntakeCrawler

Пример:
  intake-crawler crawl https://example.com --max-pages 10 --json crawl.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from intake_crawler import __version__
from intake_crawler.config import load_config
from intake_crawler.engine import Engine, run_crawl
from intake_crawler.errors import CrawlError
from intake_crawler.logger import configure as configure_logging
from intake_crawler.report.json_report import render_json
from intake_crawler.server import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='IntakeCrawler, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд IntakeCrawler CLI."""
    configure_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--max-pages', '-p', 'max_pages', type=click.IntRange(min=0), default=None,
              help='Макс. число страниц (override max_pages)')
@click.option('--max-depth', '-d', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Макс. глубина обхода (override max_depth)')
@click.option('--project-id', 'project_id', default=None, help='Идентификатор проекта')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-результат в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, url, max_pages, max_depth, project_id, json_output, pretty):
    """Обойти сайт начиная с URL и собрать текст страниц."""
    cfg = ctx.obj['config']
    request = Engine(cfg).build_request(url, max_pages, max_depth, project_id)
    try:
        result = asyncio.run(run_crawl(request, cfg))
    except CrawlError as e:
        print_error(f'Ошибка обхода ({e.status}): {e.message}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if json_output:
        try:
            saved = render_json(result, json_output, pretty=pretty)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        click.echo(f'JSON report: {saved}')
        return

    indent = 2 if pretty else None
    click.echo(json.dumps(result.to_response(), ensure_ascii=False, indent=indent))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес для прослушивания (override host)')
@click.option('--port', type=click.IntRange(1, 65535), default=None, help='Порт (override port)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP API краулера."""
    cfg = ctx.obj['config']
    overrides = {k: v for k, v in (('host', host), ('port', port)) if v is not None}
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    run_server(cfg)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
