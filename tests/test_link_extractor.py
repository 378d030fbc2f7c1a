# File: tests/test_link_extractor.py
import pytest

from a11y_scout.crawler.link_extractor import extract_links, filter_links, is_http_url, normalize_url


def test_extract_links_resolves_relative():
    html = """
    <html><body>
      <a href="/about">About</a>
      <a href="contact">Contact</a>
      <a href="https://other.example/x">Other</a>
      <a href="#main">Skip</a>
      <a name="anchor-without-href">No href</a>
    </body></html>
    """
    links = extract_links(html, "https://example.com/team/")

    assert links == [
        "https://example.com/about",
        "https://example.com/team/contact",
        "https://other.example/x",
        "https://example.com/team/#main",
    ]


def test_extract_links_honours_base_tag():
    html = '<head><base href="https://cdn.example.com/docs/"></head><a href="page">P</a>'
    assert extract_links(html, "https://example.com/") == ["https://cdn.example.com/docs/page"]


def test_filter_links_keeps_order_and_limit():
    links = [f"https://example.com/p{i}" for i in range(15)]
    assert filter_links(links, 10) == links[:10]
    assert filter_links(links) == links


def test_filter_links_drops_unwanted():
    links = [
        "https://example.com/a#frag",
        "mailto:x@example.com",
        "https://example.com/tel:123",
        "tel:123",
        "javascript:alert(1)",
        "//example.com/protocol-relative",
        "http://example.com/ok",
    ]
    assert filter_links(links) == ["http://example.com/ok"]


def test_filter_limit_counts_kept_links_only():
    links = ["mailto:a@b.c"] * 5 + ["https://example.com/1", "https://example.com/2"]
    assert filter_links(links, 1) == ["https://example.com/1"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://example.com", "https://example.com/"),
        ("HTTPS://Example.COM/Path", "https://example.com/Path"),
        ("http://example.com:80/a", "http://example.com/a"),
        ("https://example.com:443/a", "https://example.com/a"),
        ("https://example.com:8443/a", "https://example.com:8443/a"),
        ("https://example.com/a?b=1#frag", "https://example.com/a?b=1"),
        ("https://example.com/a/", "https://example.com/a/"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def test_normalize_url_is_idempotent():
    url = "HTTP://Example.com:80/x?y=1#z"
    assert normalize_url(normalize_url(url)) == normalize_url(url)


@pytest.mark.parametrize("raw", ["example.com", "/relative", "ftp://example.com/", "mailto:a@b.c"])
def test_normalize_url_rejects_non_http(raw):
    with pytest.raises(ValueError):
        normalize_url(raw)


def test_is_http_url():
    assert is_http_url("https://example.com")
    assert not is_http_url("https:///nohost")
    assert not is_http_url("file:///etc/passwd")
