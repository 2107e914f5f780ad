import json
import logging

import pytest

import cli


@pytest.fixture(autouse=True)
def reset_logging():
	yield
	# Handlers bind the captured stderr of the test that created them.
	logging.getLogger("ideation").handlers.clear()


def test_analyze_writes_default_report(tmp_path, capsys):
	(tmp_path / "app.py").write_text("# TODO: tidy up\n")
	cli.main(["analyze", str(tmp_path)])
	out = capsys.readouterr().out
	assert "Analysis Summary" in out
	assert (tmp_path / "INSIGHTS.md").read_text(encoding="utf-8").startswith("# Project Insights Report")


def test_analyze_json_output(tmp_path):
	(tmp_path / "app.py").write_text("# TODO: tidy up\n")
	out_path = tmp_path / "out.json"
	cli.main(["analyze", str(tmp_path), "--format", "json", "-o", str(out_path), "--focus", "debt"])
	report = json.loads(out_path.read_text(encoding="utf-8"))
	assert report["summary"]["by_category"]["debt"] == 1
	assert report["summary"]["by_category"]["docs"] == 0


def test_missing_root_exits_nonzero(tmp_path, capsys):
	with pytest.raises(SystemExit) as exc:
		cli.main(["stats", str(tmp_path / "missing")])
	assert exc.value.code == 1
	assert "does not exist" in capsys.readouterr().err


def test_ignore_flag_adds_to_default_globs(tmp_path, capsys):
	for rel in ("app.py", "gen/made.py", "node_modules/dep/index.py"):
		path = tmp_path / rel
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text("# TODO: tidy up\n")
	cli.main(["stats", str(tmp_path), "--focus", "debt", "--ignore", "gen/**"])
	assert "Total Issues: 1" in capsys.readouterr().out
