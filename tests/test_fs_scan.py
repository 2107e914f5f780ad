import os

import pytest

from ideation.config import IdeationConfig
from ideation.errors import DiscoveryError
from ideation.fs_scan import discover, is_candidate, is_ignored


def _rel(root, paths):
	return [os.path.relpath(p, root).replace(os.sep, "/") for p in paths]


def test_discover_applies_include_and_ignore(project):
	files = discover(str(project), IdeationConfig())
	assert _rel(project, files) == ["README.md", "src/app.py", "src/util.js"]
	assert all(os.path.isabs(f) for f in files)


def test_discover_is_deterministic(project):
	config = IdeationConfig()
	assert discover(str(project), config) == discover(str(project), config)


def test_discover_truncates_in_enumeration_order(project):
	files = discover(str(project), IdeationConfig(max_files=2))
	assert _rel(project, files) == ["README.md", "src/app.py"]


def test_custom_ignore_patterns_replace_defaults(project):
	config = IdeationConfig(ignore_patterns=["**/*.md"])
	rel = _rel(project, discover(str(project), config))
	assert "README.md" not in rel
	assert "node_modules/dep/index.js" in rel


def test_discover_missing_root(tmp_path):
	with pytest.raises(DiscoveryError):
		discover(str(tmp_path / "nope"), IdeationConfig())


def test_discover_root_is_file(tmp_path):
	f = tmp_path / "file.py"
	f.write_text("")
	with pytest.raises(DiscoveryError):
		discover(str(f), IdeationConfig())


def test_is_ignored_matches_at_root_and_nested():
	patterns = ["**/node_modules/**"]
	assert is_ignored("node_modules/x.js", patterns)
	assert is_ignored("a/b/node_modules/x.js", patterns)
	assert not is_ignored("src/modules/x.js", patterns)


def test_is_candidate_by_extension():
	assert is_candidate("a/b.py")
	assert is_candidate("x.TSX")
	assert is_candidate("package.json")
	assert is_candidate("README.md")
	assert not is_candidate("notes.txt")
	assert not is_candidate("Makefile")


@pytest.fixture
def locked_project(project):
	locked = project / "locked"
	locked.mkdir()
	(locked / "secret.py").write_text("x = 1\n")
	return project


def test_unreadable_subdirectory_is_skipped(locked_project, monkeypatch):
	real_scandir = os.scandir

	def scandir(path="."):
		if os.path.basename(os.fspath(path)) == "locked":
			raise PermissionError(13, "Permission denied", os.fspath(path))
		return real_scandir(path)

	monkeypatch.setattr(os, "scandir", scandir)
	files = discover(str(locked_project), IdeationConfig())
	assert _rel(locked_project, files) == ["README.md", "src/app.py", "src/util.js"]


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root ignores directory permissions")
def test_chmod_locked_subdirectory_is_skipped(locked_project):
	locked = locked_project / "locked"
	locked.chmod(0)
	try:
		files = discover(str(locked_project), IdeationConfig())
	finally:
		locked.chmod(0o755)
	assert "locked/secret.py" not in _rel(locked_project, files)
	assert "src/app.py" in _rel(locked_project, files)


def test_discover_unreadable_root(project, monkeypatch):
	monkeypatch.setattr("ideation.fs_scan.os.access", lambda path, mode: False)
	with pytest.raises(DiscoveryError, match="not readable"):
		discover(str(project), IdeationConfig())
