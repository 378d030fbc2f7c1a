# File: tests/test_report.py
import json

import pytest
import pytest_asyncio

from a11y_scout.engine import Engine, NO_RESULTS_MESSAGE, OUTCOME_NO_RESULTS, ScanOutcome
from a11y_scout.report import DEFAULT_TEMPLATE_DIR, render_html, render_json
from tests.conftest import SEED, FakeAuditor, FakeBrowser, FakePageSpec, violation


@pytest_asyncio.fixture()
async def outcome(basic_config, store):
    await store.add_user("me@example.com")
    site = {
        SEED: FakePageSpec(
            links=["https://example.com/about"],
            violations=[violation("image-alt", "critical"), violation("color-contrast", "serious", nodes=2)],
        ),
        "https://example.com/about": FakePageSpec(),
    }
    engine = Engine(basic_config, store, store, FakeBrowser(site), FakeAuditor())
    return await engine.perform_scan(SEED, "me@example.com")


@pytest.mark.asyncio()
async def test_render_json_writes_outcome(outcome, tmp_path):
    path = render_json(outcome, tmp_path / "nested" / "report.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == json.loads(json.dumps(outcome.to_dict()))
    assert data["summary"]["totalIssues"] == 3
    assert "\n  " in path.read_text(encoding="utf-8")


@pytest.mark.asyncio()
async def test_render_json_compact(outcome, tmp_path):
    path = render_json(outcome, tmp_path / "report.json", pretty=False)
    assert "\n" not in path.read_text(encoding="utf-8")


@pytest.mark.asyncio()
async def test_render_html_bundled_template(outcome, tmp_path):
    path = render_html(outcome, None, tmp_path / "report.html")

    html = path.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert f"Score: {outcome.score:.1f} / 100" in html
    assert "https://example.com/about" in html
    assert "No violations found." in html
    assert "color-contrast (serious)" in html
    # снипеты экранируются
    assert "&lt;div id=&#39;n0&#39;&gt;" in html


def test_render_html_failed_outcome(tmp_path):
    failed = ScanOutcome.failure(OUTCOME_NO_RESULTS, NO_RESULTS_MESSAGE)

    html = render_html(failed, DEFAULT_TEMPLATE_DIR, tmp_path / "report.html").read_text(encoding="utf-8")

    assert NO_RESULTS_MESSAGE in html
    assert "Score:" not in html


def test_render_html_custom_template(tmp_path):
    tpl_dir = tmp_path / "tpl"
    tpl_dir.mkdir()
    (tpl_dir / "report.html.j2").write_text("{{ outcome.status }}|{{ levels|join(',') }}", encoding="utf-8")

    failed = ScanOutcome.failure(OUTCOME_NO_RESULTS, NO_RESULTS_MESSAGE)
    html = render_html(failed, tpl_dir, tmp_path / "out.html").read_text(encoding="utf-8")

    assert html == "no_results|critical,serious,moderate,minor,none"
