# File: a11y_scout/utils.py
"""a11y_scout.utils: проверка входных данных сканирования."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from a11y_scout.crawler.link_extractor import is_http_url
from a11y_scout.logger import logger

__all__: Sequence[str] = ("is_valid_url", "is_valid_email", "normalize_email", "validate_scan_input")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_url(url: object) -> bool:
    """Проверяет, что это абсолютный URL со схемой http(s) и хостом."""
    valid = isinstance(url, str) and bool(url.strip()) and is_http_url(url.strip())
    logger.debug("URL valid: %r -> %s", url, valid)
    return valid


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: object) -> bool:
    return isinstance(email, str) and bool(_EMAIL_RE.match(email.strip()))


def validate_scan_input(url: object, email: object) -> Optional[str]:
    """Возвращает текст ошибки для неверного URL или e-mail, иначе None."""
    if not isinstance(url, str) or not url.strip():
        return "URL is required"
    if not is_valid_url(url):
        return f"Invalid URL: {url}"
    if not isinstance(email, str) or not email.strip():
        return "User email is required"
    if not is_valid_email(email):
        return f"Invalid email: {email}"
    return None
