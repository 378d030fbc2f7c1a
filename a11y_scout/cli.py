# === FILE: a11y_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска сканера доступности A11yScout через командную строку.

Команды:
  scan URL    Обойти сайт, проверить страницы axe-core и вывести/сохранить отчёт
  user add    Зарегистрировать пользователя по e-mail
  reports     Показать прошлые сканирования пользователя
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --limit INT         Макс. число страниц для сканирования (override max_pages)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда scan опции:
  --email EMAIL       E-mail зарегистрированного пользователя
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном report.html.j2
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC  Таймаут всего сканирования (секунд)

Пример:
  a11y-scout user add me@example.com
  a11y-scout scan https://example.com --email me@example.com --html report.html
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from a11y_scout import __version__
from a11y_scout.config import load_config
from a11y_scout.logger import DEFAULT_FORMAT, init_logging
from a11y_scout.report.html_report import render_html
from a11y_scout.report.json_report import render_json
from a11y_scout.scanner import list_reports, register_user, start_scan
from a11y_scout.utils import is_valid_email, normalize_email

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='A11yScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Макс. число страниц для сканирования (override max_pages)'
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
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """Группа команд A11yScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    if limit is not None:
        cfg = cfg.model_copy(update={'max_pages': limit})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--email', '-e', 'email',
    required=True,
    envvar='A11Y_SCOUT_EMAIL',
    help='E-mail пользователя, от имени которого выполняется сканирование'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (встроенный шаблон по умолчанию)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Таймаут всего сканирования (секунд)'
)
@click.pass_context
def scan(ctx, url, email, json_output, html_output, template_dir, pretty, scan_timeout):
    """Запустить сканирование и сгенерировать отчёты."""
    cfg = ctx.obj['config']
    click.echo(f'Starting scan: {url}', err=True)
    try:
        if scan_timeout:
            outcome = asyncio.run(
                asyncio.wait_for(start_scan(cfg, url, email), timeout=scan_timeout)
            )
        else:
            outcome = asyncio.run(start_scan(cfg, url, email))
    except asyncio.TimeoutError:
        print_error(f'Сканирование не завершено за {scan_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при сканировании: {e}')

    # Если не сохраняем в файл, печатаем в stdout
    if not json_output and not html_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=indent))

    # JSON-отчёт
    if json_output:
        try:
            saved_json = render_json(outcome, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}', err=True)
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    # HTML-отчёт
    if html_output:
        try:
            saved_html = render_html(outcome, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}', err=True)
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    if not outcome.success:
        print_error(outcome.message)
    click.echo(f'Score: {outcome.score}', err=True)


@cli.group('user', context_settings=CONTEXT_SETTINGS)
def user():
    """Управление пользователями."""


@user.command('add', context_settings=CONTEXT_SETTINGS)
@click.argument('email')
@click.pass_context
def user_add(ctx, email):
    """Зарегистрировать пользователя по e-mail."""
    if not is_valid_email(email):
        print_error('Please enter a valid email address.')
    cfg = ctx.obj['config']
    try:
        registered = asyncio.run(register_user(cfg, normalize_email(email)))
    except Exception as e:
        print_error(f'Ошибка регистрации: {e}')
    click.echo(f'User registered: {registered.email}')


@cli.command('reports', context_settings=CONTEXT_SETTINGS)
@click.option('--email', '-e', 'email', required=True, envvar='A11Y_SCOUT_EMAIL')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def reports(ctx, email, pretty):
    """Показать прошлые сканирования пользователя в JSON."""
    cfg = ctx.obj['config']
    try:
        rows = asyncio.run(list_reports(cfg, normalize_email(email)))
    except Exception as e:
        print_error(f'Ошибка чтения отчётов: {e}')
    click.echo(json.dumps(rows, ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
