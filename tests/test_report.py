import json

import pytest

from ideation.model import FindingStore, Report
from ideation.report import InsightsReporter
from ideation.suggestions import build_suggestions

from helpers import make_finding


def _results(root):
	store = FindingStore().replace(
		"security",
		[
			make_finding("security", "Hardcoded secret detected", severity="critical", impact="widespread",
				frequency="often", fix_cost="low", file=str(root / "src" / "app.py"), line=3,
				description="secret in code", recommendation="use env vars"),
			make_finding("security", "Eval", severity="high", file=str(root / "src" / "app.py"), line=9),
		],
	).replace(
		"debt",
		[make_finding("debt", "TODO comment requires attention", severity="low", files=[str(root / "b.py"), str(root / "c.py")])],
	)
	return store, build_suggestions(store.flatten())


def test_json_round_trip(tmp_path):
	store, suggestions = _results(tmp_path)
	text = InsightsReporter(str(tmp_path)).render(store, suggestions, "json")

	report = Report.model_validate_json(text)
	assert report.findings == store
	assert report.suggestions == suggestions
	assert report.summary.total == 3

	raw = json.loads(text)
	assert [f["title"] for f in raw["findings"]["security"]] == ["Hardcoded secret detected", "Eval"]


def test_markdown_sections(tmp_path):
	store, suggestions = _results(tmp_path)
	text = InsightsReporter(str(tmp_path)).render(store, suggestions, "markdown")

	assert text.startswith(f"# Project Insights Report: {tmp_path.name}")
	assert "**Total Issues Found:** 3" in text
	assert "### 1. 🔴 Hardcoded secret detected" in text
	assert "- `src/app.py`" in text
	assert "`src/app.py:3`" in text
	assert "## Performance Bottlenecks" in text
	assert "✅ No issues found in this category." in text
	assert "(Priority: 24.0)" in text


def test_markdown_without_critical_issues(tmp_path):
	store = FindingStore().replace("docs", [make_finding("docs", "README missing usage section", severity="low")])
	text = InsightsReporter(str(tmp_path)).render(store, build_suggestions(store.flatten()))
	assert "No critical issues found" in text


def test_markdown_truncates_long_severity_groups(tmp_path):
	findings = [make_finding("debt", f"todo {i}", severity="low") for i in range(7)]
	store = FindingStore().replace("debt", findings)
	text = InsightsReporter(str(tmp_path)).render(store, build_suggestions(findings))
	assert "*...and 2 more low issues*" in text


def test_unknown_format(tmp_path):
	with pytest.raises(ValueError):
		InsightsReporter(str(tmp_path)).render(FindingStore(), [], "html")
