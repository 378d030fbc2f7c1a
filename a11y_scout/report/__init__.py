"""a11y_scout.report: генерация отчётов (JSON и HTML) по итогам сканирования."""

from a11y_scout.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from a11y_scout.report.json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
