import json

import pytest

from ideation.config import IdeationConfig
from ideation.engine import IdeationEngine, run_category
from ideation.errors import AnalyzerError, DiscoveryError, ReportWriteError
from ideation.model import FindingStore

from helpers import FailingAnalyzer, StubAnalyzer, make_finding


A = make_finding("security", "A", severity="critical", impact="widespread", frequency="always", fix_cost="low", files=["a.js"])
B = make_finding("debt", "B", severity="low", impact="localized", frequency="rare", fix_cost="high", files=["b.js", "c.js"])


def test_store_starts_empty(project, stubs):
	engine = IdeationEngine(str(project), analyzers=stubs)
	assert engine.findings.counts() == {"security": 0, "performance": 0, "docs": 0, "debt": 0}
	assert engine.generate_suggestions() == []


def test_analyze_codebase_runs_all_categories_once(project, stubs):
	stubs["security"] = StubAnalyzer([A])
	stubs["debt"] = StubAnalyzer([B])
	engine = IdeationEngine(str(project), analyzers=stubs)
	result = engine.analyze_codebase()

	assert result.file_count == 3
	assert [s.title for s in result.suggestions] == ["A", "B"]
	assert result.suggestions[0].priority == 36
	assert result.findings.security == (A,)
	for stub in stubs.values():
		assert len(stub.calls) == 1
		assert len(stub.calls[0]) == 3


def test_focus_isolation(project, stubs):
	for category in stubs:
		stubs[category] = StubAnalyzer([make_finding(category, f"{category} issue")])
	engine = IdeationEngine(str(project), config=IdeationConfig(focus="performance"), analyzers=stubs)
	engine.analyze_codebase()

	counts = engine.findings.counts()
	assert counts == {"security": 0, "performance": 1, "docs": 0, "debt": 0}
	assert stubs["security"].calls == []
	assert stubs["docs"].calls == []


def test_unknown_focus_means_all(project, stubs):
	engine = IdeationEngine(str(project), config=IdeationConfig(focus="everything"), analyzers=stubs)
	engine.analyze_codebase()
	assert all(len(stub.calls) == 1 for stub in stubs.values())


def test_rerun_overwrites_bucket(project, stubs):
	first = make_finding("security", "first")
	second = make_finding("security", "second")
	stubs["security"] = StubAnalyzer([first], [second])
	stubs["docs"] = StubAnalyzer([make_finding("docs", "doc gap")])
	engine = IdeationEngine(str(project), analyzers=stubs)
	engine.find_doc_gaps(["x.md"])

	engine.find_vulnerabilities(["a.py"])
	engine.find_vulnerabilities(["a.py"])

	assert [f.title for f in engine.findings.security] == ["second"]
	assert [f.title for f in engine.findings.docs] == ["doc gap"]


def test_finder_rediscovers_without_files(project, stubs):
	engine = IdeationEngine(str(project), analyzers=stubs)
	engine.track_tech_debt()
	assert len(stubs["debt"].calls[0]) == 3


def test_run_category_returns_new_store():
	empty = FindingStore()
	finding = make_finding("performance", "slow")
	updated = run_category(empty, "performance", StubAnalyzer([finding]), ["a.py"])
	assert empty.performance == ()
	assert updated.performance == (finding,)


def test_derived_store_does_not_share_buckets():
	first = make_finding("security", "first")
	original = FindingStore().replace("security", [first])
	updated = original.replace("performance", [make_finding("performance", "slow")])

	with pytest.raises(AttributeError):
		updated.security.append(make_finding("security", "sneaky"))
	assert original.security == (first,)
	assert updated.security == (first,)


def test_replace_copies_the_given_sequence():
	findings = [make_finding("debt", "one")]
	store = FindingStore().replace("debt", findings)
	findings.append(make_finding("debt", "two"))
	assert [f.title for f in store.debt] == ["one"]


def test_result_snapshot_cannot_alter_engine_state(project, stubs):
	engine = IdeationEngine(str(project), analyzers=stubs)
	result = engine.analyze_codebase()

	with pytest.raises(AttributeError):
		result.findings.debt.append(make_finding("debt", "injected"))
	assert engine.get_summary().total == 0


def test_finding_files_are_immutable():
	finding = make_finding("security", "A", files=["a.py", "b.py"])
	assert finding.files == ("a.py", "b.py")
	with pytest.raises(AttributeError):
		finding.files.append("c.py")


def test_category_mismatch_is_rejected(project, stubs):
	stubs["security"] = StubAnalyzer([make_finding("docs", "wrong bucket")])
	engine = IdeationEngine(str(project), analyzers=stubs)
	with pytest.raises(AnalyzerError) as exc:
		engine.find_vulnerabilities(["a.py"])
	assert exc.value.category == "security"


def test_analyzer_failure_propagates_and_keeps_earlier_buckets(project, stubs):
	stubs["security"] = StubAnalyzer([A])
	stubs["docs"] = FailingAnalyzer()
	engine = IdeationEngine(str(project), analyzers=stubs)
	with pytest.raises(RuntimeError, match="exploded"):
		engine.analyze_codebase()
	assert engine.findings.security == (A,)
	assert stubs["debt"].calls == []


def test_parallel_matches_sequential(project):
	def analyzers():
		return {
			"security": StubAnalyzer([A]),
			"performance": StubAnalyzer([make_finding("performance", "P", severity="high")]),
			"docs": StubAnalyzer([make_finding("docs", "D", severity="high")]),
			"debt": StubAnalyzer([B]),
		}

	sequential = IdeationEngine(str(project), analyzers=analyzers()).analyze_codebase()
	parallel = IdeationEngine(str(project), config=IdeationConfig(workers=4), analyzers=analyzers()).analyze_codebase()
	assert parallel.suggestions == sequential.suggestions
	assert parallel.findings == sequential.findings


def test_parallel_failure_propagates(project, stubs):
	stubs["performance"] = FailingAnalyzer()
	engine = IdeationEngine(str(project), config=IdeationConfig(workers=2), analyzers=stubs)
	with pytest.raises(RuntimeError):
		engine.analyze_codebase()


def test_discovery_error_propagates(tmp_path, stubs):
	engine = IdeationEngine(str(tmp_path / "missing"), analyzers=stubs)
	with pytest.raises(DiscoveryError):
		engine.analyze_codebase()


def test_summary_consistency(project, stubs):
	stubs["security"] = StubAnalyzer([A, make_finding("security", "unrated")])
	stubs["debt"] = StubAnalyzer([B, make_finding("debt", "m", severity="medium")])
	engine = IdeationEngine(str(project), analyzers=stubs)
	engine.analyze_codebase()

	summary = engine.get_summary()
	assert summary.total == 4
	assert sum(summary.by_category.values()) == summary.total
	assert sum(summary.by_severity.values()) == summary.total
	assert summary.by_severity == {"critical": 1, "high": 0, "medium": 1, "low": 2}


def test_generate_report_writes_file(project, stubs, tmp_path):
	stubs["security"] = StubAnalyzer([A])
	engine = IdeationEngine(str(project), analyzers=stubs)
	engine.analyze_codebase()

	out = tmp_path / "INSIGHTS.json"
	text = engine.generate_report(str(out), "json")
	assert out.read_text(encoding="utf-8") == text
	assert json.loads(text)["suggestions"][0]["title"] == "A"


def test_generate_report_write_failure(project, stubs, tmp_path):
	engine = IdeationEngine(str(project), analyzers=stubs)
	with pytest.raises(ReportWriteError) as exc:
		engine.generate_report(str(tmp_path / "no" / "such" / "dir" / "r.md"))
	assert isinstance(exc.value.__cause__, OSError)
