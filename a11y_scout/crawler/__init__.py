"""a11y_scout.crawler: пакетный обход сайта с аудитом страниц."""

from a11y_scout.crawler.crawler import AsyncCrawler, crawl
from a11y_scout.crawler.models import FrontierEntry, PageAuditResult

__all__ = ["AsyncCrawler", "crawl", "FrontierEntry", "PageAuditResult"]
