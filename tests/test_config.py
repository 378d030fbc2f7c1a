# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from a11y_scout.config import ScannerConfig, load_config, resolve_browser_path


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,expect_exc",
    [
        ("max_depth: 1\nmax_pages: 5", None),
        (json.dumps({"max_depth": 1, "max_pages": 5}), None),
        ("max_pages: 0", ValidationError),
        ("unknown_key: 1", ValidationError),
        ("not: a: mapping", ValueError),
        ("::invalid yaml", TypeError),
    ],
)
def test_load_config_variants(tmp_path, content, expect_exc):
    suffix = ".yaml" if not content.strip().startswith("{") else ".json"
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, ScannerConfig)
        assert cfg.max_depth == 1
        assert cfg.max_pages == 5
        assert cfg.concurrency == 3


def test_default_crawl_bounds():
    cfg = ScannerConfig()
    assert (cfg.max_depth, cfg.max_pages, cfg.concurrency) == (2, 10, 3)
    assert cfg.navigation_timeout == 30.0
    assert cfg.settle_delay == 2.0
    assert cfg.max_links_per_page == 10
    assert (cfg.score_baseline, cfg.score_max_weight) == (10, 5)
    assert "best-practice" in cfg.axe_tags


def test_load_config_default_missing_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config(None)
    assert cfg.max_pages == 10
    assert cfg.database_url == "sqlite+aiosqlite:///a11y_scout.db"


def test_load_config_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("concurrency: 7\n", encoding="utf-8")
    assert load_config(None).concurrency == 7


def test_explicit_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_unsupported_suffix(tmp_path):
    with pytest.raises(ValueError):
        load_config(write_file(tmp_path, "max_depth = 1", ".toml"))


def test_empty_axe_tags_rejected():
    with pytest.raises(ValidationError):
        ScannerConfig(axe_tags=["  "])


def test_config_is_frozen():
    cfg = ScannerConfig()
    with pytest.raises(ValidationError):
        cfg.max_pages = 3


def test_browser_path_from_environment(monkeypatch):
    monkeypatch.setenv("CHROME_PATH", "/opt/chrome/chrome")
    assert resolve_browser_path() == "/opt/chrome/chrome"
    assert ScannerConfig().browser_path == "/opt/chrome/chrome"


def test_browser_path_falls_back_to_bundled(monkeypatch):
    monkeypatch.delenv("CHROME_PATH", raising=False)
    monkeypatch.setattr("a11y_scout.config._PLATFORM_BROWSERS", {})
    assert resolve_browser_path() is None
