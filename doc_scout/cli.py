# === FILE: doc_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска DocScout через командную строку.

Команды:
  explore URL   Обойти страницу и её окрестность в пределах домена
  config        Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда explore опции:
  --depth, -d INT     Глубина обхода 1..5 (значения вне диапазона прижимаются)
  --json PATH         Сохранить JSON-ответ в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --deadline SEC      Переопределить глобальный дедлайн (секунд)

Пример:
  doc-scout explore https://docs.python.org/3/ --depth 2 --pretty
"""
import sys
from pathlib import Path

import click

from doc_scout import __version__
from doc_scout.config import load_config
from doc_scout.engine import Engine
from doc_scout.logger import init_logging
from doc_scout.report.json_report import dumps, render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])
MIN_DEPTH, MAX_DEPTH = 1, 5


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='DocScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(name)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд DocScout CLI."""
    init_logging(
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


@cli.command('explore', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--depth', '-d', 'depth',
    default=1, show_default=True,
    type=click.IntRange(MIN_DEPTH, MAX_DEPTH, clamp=True),
    help='Максимальная глубина обхода (1 = только корневая страница)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-ответ в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--deadline', 'deadline',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Глобальный дедлайн обхода (секунд)'
)
@click.pass_context
def explore(ctx, url, depth, json_output, pretty, deadline):
    """Обойти URL и вывести/сохранить JSON-ответ."""
    cfg = ctx.obj['config']
    if deadline is not None:
        cfg = cfg.model_copy(update={'deadline': deadline})

    result = Engine(cfg).explore(url, depth)

    if json_output:
        try:
            saved = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
    else:
        click.echo(dumps(result, pretty=pretty))

    if result.is_error:
        print_error(result.error or 'Обход завершился ошибкой')
    if result.error:
        click.secho(result.error, fg='yellow', err=True)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
