# === FILE: wiki_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа WikiScout для командной строки.

Через API Википедии (generator=allpages) выгружает заголовки, идентификаторы
и адреса страниц, пачка за пачкой.

Команды:
  extract   Выгрузить список страниц в stdout (текст или JSON)
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (по умолчанию встроенные значения)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда extract опции:
  --start, -s STR     Начало диапазона (включительно)
  --end, -e STR       Граница диапазона: префикс заголовков
  --lang, -L CODE     Языковой раздел Википедии (en, de, ...)
  --limit, -l INT     Лимит числа записей (при значении больше 500 выгрузка идёт пачками по 500)
  --json, -j          Вывод в JSON
  --verbose, -v       Подробный вывод в stderr

Пример:
  wiki-scout extract --start Ban --end Ban --limit 100 --json
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from wiki_scout import __version__
from wiki_scout.config import ExtractorConfig, load_config
from wiki_scout.extractor import run_extraction
from wiki_scout.logger import DEFAULT_FORMAT, configure
from wiki_scout.report import open_writer

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-V', message='WikiScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(LOG_LEVELS),
    help='Уровень логирования (по умолчанию WARNING, с --verbose INFO)'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """URL extractor для Википедии."""
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg
    ctx.obj['logging'] = dict(level=log_level, log_file=log_file, log_format=log_format)


@cli.command('extract', context_settings=CONTEXT_SETTINGS)
@click.option('--start', '-s', 'start', default=None, help='Начало диапазона (включительно)')
@click.option('--end', '-e', 'end', default=None, help='Граница диапазона: префикс заголовков')
@click.option('--lang', '-L', 'lang', default=None, help='Языковой раздел Википедии [default: en]')
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=0),
    default=None,
    help='Лимит числа записей (проверяется между пачками)'
)
@click.option('--json', '-j', 'json_format', is_flag=True, help='Вывод в JSON')
@click.option('--verbose', '-v', 'verbose', is_flag=True, help='Подробный вывод в stderr')
@click.pass_context
def extract(ctx, start, end, lang, limit, json_format, verbose):
    """Выгрузить заголовки и адреса страниц в stdout."""
    base: ExtractorConfig = ctx.obj['config']
    overrides = {
        key: value
        for key, value in dict(start=start, end=end, lang=lang, limit=limit).items()
        if value is not None
    }
    overrides['json_format'] = json_format or base.json_format
    overrides['verbose'] = verbose or base.verbose
    try:
        cfg = ExtractorConfig(**{**base.model_dump(), **overrides})
    except ValidationError as e:
        print_error(f'Неверные параметры: {e}')

    log_opts = ctx.obj['logging']
    configure(
        level=log_opts['level'] or ('INFO' if cfg.verbose else 'WARNING'),
        log_file=str(log_opts['log_file']) if log_opts['log_file'] else None,
        log_format=log_opts['log_format'],
    )

    writer = open_writer(sys.stdout, json_format=cfg.json_format)
    try:
        with writer:
            asyncio.run(run_extraction(cfg, writer))
    except Exception as e:
        print_error(f'Ошибка при выгрузке: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
