import pytest

from helpers import StubAnalyzer


@pytest.fixture
def project(tmp_path):
	(tmp_path / "src").mkdir()
	(tmp_path / "src" / "app.py").write_text("def run():\n\treturn 1\n")
	(tmp_path / "src" / "util.js").write_text("export const x = 1;\n")
	(tmp_path / "README.md").write_text("# Demo\n")
	(tmp_path / "notes.txt").write_text("not a candidate\n")
	(tmp_path / "node_modules" / "dep").mkdir(parents=True)
	(tmp_path / "node_modules" / "dep" / "index.js").write_text("module.exports = 1;\n")
	return tmp_path


@pytest.fixture
def stubs():
	return {category: StubAnalyzer() for category in ("security", "performance", "docs", "debt")}
