import pytest

from ideation.effort import estimate_effort
from ideation.priority import prioritize, score
from ideation.suggestions import build_suggestions

from helpers import make_finding


def test_score_maximum():
	a = make_finding(severity="critical", impact="widespread", frequency="always", fix_cost="low", files=["a.js"])
	assert score(a) == 36


def test_score_minimum():
	b = make_finding(severity="low", impact="localized", frequency="rare", fix_cost="high", files=["b.js", "c.js"])
	assert score(b) == pytest.approx(1 / 3)


def test_score_defaults_for_missing_fields():
	# severity/impact/frequency default to 1, fix cost to medium (2)
	assert score(make_finding()) == 0.5
	assert score(make_finding(severity="high")) == 1.5


def test_prioritize_is_stable_for_ties():
	first = make_finding("security", "first", severity="medium")
	second = make_finding("docs", "second", severity="medium")
	third = make_finding("debt", "third", severity="medium")
	top = make_finding("debt", "top", severity="critical")
	ordered = [f.title for f, _ in prioritize([first, second, third, top])]
	assert ordered == ["top", "first", "second", "third"]
	assert [f.title for f, _ in prioritize([first, second, third, top])] == ordered


def test_build_suggestions_orders_and_estimates():
	a = make_finding("security", "A", severity="critical", impact="widespread", frequency="always", fix_cost="low", files=["a.js"])
	b = make_finding("debt", "B", severity="low", impact="localized", frequency="rare", fix_cost="high", files=["b.js", "c.js"])
	suggestions = build_suggestions([b, a])
	assert [s.title for s in suggestions] == ["A", "B"]
	assert suggestions[0].priority == 36
	assert suggestions[0].effort == "Quick (< 1 hour)"
	assert suggestions[1].effort == "Extended (> 8 hours)"
	assert suggestions[1].files == ["b.js", "c.js"]


def test_suggestion_uses_singular_file_fallback():
	f = make_finding(file="only.py", fix_cost="low")
	[s] = build_suggestions([f])
	assert s.files == ["only.py"]
	assert s.effort == "Quick (< 1 hour)"


@pytest.mark.parametrize(
	"fix_cost,count,expected",
	[
		("low", 1, "Quick (< 1 hour)"),
		("low", 3, "Short (1-2 hours)"),
		("low", 4, "Extended (> 8 hours)"),
		("medium", 5, "Medium (2-4 hours)"),
		("medium", 6, "Long (4-8 hours)"),
		(None, 1, "Medium (2-4 hours)"),
		("high", 1, "Extended (> 8 hours)"),
		("high", 50, "Extended (> 8 hours)"),
	],
)
def test_effort_table(fix_cost, count, expected):
	assert estimate_effort(fix_cost, count) == expected
