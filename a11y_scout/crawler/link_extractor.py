# a11y_scout/crawler/link_extractor.py
"""
Link extraction and URL normalization utilities for A11yScout.
"""
from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__ = ["extract_links", "filter_links", "normalize_url", "is_http_url"]

_SKIPPED_MARKERS = ("#", "mailto:", "tel:")


def extract_links(html: str, base_url: str) -> List[str]:
    """
    Extract the ``href`` of every anchor in *html*, resolved against *base_url*.

    Mirrors what a browser reports for ``a.href``: relative links become
    absolute, empty ``href`` attributes resolve to the page itself.
    No filtering happens here, see :func:`filter_links`.
    """
    soup = BeautifulSoup(html, "html.parser")
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag) and isinstance(base_tag.get("href"), str):
        base_url = urljoin(base_url, base_tag["href"].strip())
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        links.append(urljoin(base_url, href_val.strip()))
    return links


def is_http_url(url: str) -> bool:
    """True for absolute ``http``/``https`` URLs with a host."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def filter_links(links: Iterable[str], limit: Optional[int] = None) -> List[str]:
    """
    Keep absolute http(s) links that carry no fragment, ``mailto:`` or ``tel:``,
    in discovery order, and cut the list at *limit*.
    """
    kept: List[str] = []
    for link in links:
        if limit is not None and len(kept) >= limit:
            break
        if not isinstance(link, str) or not link.startswith("http"):
            continue
        if any(marker in link for marker in _SKIPPED_MARKERS):
            continue
        if not is_http_url(link):
            continue
        kept.append(link)
    return kept


def normalize_url(url: str) -> str:
    """
    Normalize URL to the canonical absolute form used for deduplication.

    Lowercases scheme and host, drops default ports and the fragment,
    turns an empty path into ``/``. Path case, trailing slashes and
    the query string are kept: they address different documents.
    Raises ValueError for anything that is not an absolute http(s) URL.
    """
    parsed = urlparse(url.strip())
    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Not an absolute http(s) URL: {url!r}")
    host = (parsed.hostname or "").lower()
    if not host:
        raise ValueError(f"URL has no host: {url!r}")
    port = parsed.port
    netloc = host if ":" not in host else f"[{host}]"
    if port is not None and not (
        (scheme == "http" and port == 80) or (scheme == "https" and port == 443)
    ):
        netloc = f"{netloc}:{port}"
    if parsed.username:
        auth = parsed.username
        if parsed.password:
            auth = f"{auth}:{parsed.password}"
        netloc = f"{auth}@{netloc}"
    path = parsed.path or "/"
    return urlunparse((scheme, netloc, path, parsed.params, parsed.query, ""))
