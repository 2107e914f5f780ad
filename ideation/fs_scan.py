from __future__ import annotations

import fnmatch
import logging
import os
from typing import List, Sequence

from .config import IdeationConfig
from .errors import DiscoveryError

logger = logging.getLogger(__name__)


CODE_EXTENSIONS = {".py", ".js", ".jsx", ".ts", ".tsx", ".java", ".go", ".rs", ".c", ".cpp"}
CONFIG_EXTENSIONS = {".json", ".toml", ".yaml", ".yml", ".cfg", ".ini"}
DOC_EXTENSIONS = {".md"}


def is_candidate(filename: str) -> bool:
	_, ext = os.path.splitext(filename)
	ext = ext.lower()
	return ext in CODE_EXTENSIONS or ext in CONFIG_EXTENSIONS or ext in DOC_EXTENSIONS


def is_ignored(rel_path: str, patterns: Sequence[str]) -> bool:
	for pattern in patterns:
		if fnmatch.fnmatchcase(rel_path, pattern):
			return True
		# "**/x/**" should also match "x/..." directly under the root
		if pattern.startswith("**/") and fnmatch.fnmatchcase(rel_path, pattern[3:]):
			return True
	return False


def _to_posix(root: str, path: str) -> str:
	return os.path.relpath(path, root).replace(os.sep, "/")


def discover(root: str, config: IdeationConfig) -> List[str]:
	"""Return absolute paths of candidate files under ``root``.

	Directories and files are visited in sorted order, so identical trees
	always produce the same sequence. The result is cut at
	``config.max_files`` in that order.
	"""
	root = os.path.abspath(root)
	if not os.path.exists(root):
		raise DiscoveryError(f"Project root does not exist: {root}")
	if not os.path.isdir(root):
		raise DiscoveryError(f"Project root is not a directory: {root}")
	if not os.access(root, os.R_OK | os.X_OK):
		raise DiscoveryError(f"Project root is not readable: {root}")

	files: List[str] = []
	for dirpath, dirnames, filenames in os.walk(root):
		dirnames[:] = sorted(
			d for d in dirnames
			if not is_ignored(_to_posix(root, os.path.join(dirpath, d)) + "/", config.ignore_patterns)
		)
		for filename in sorted(filenames):
			if not is_candidate(filename):
				continue
			path = os.path.join(dirpath, filename)
			if is_ignored(_to_posix(root, path), config.ignore_patterns):
				continue
			files.append(path)
			if len(files) >= config.max_files:
				logger.debug("Discovery stopped at max_files=%d", config.max_files)
				return files
	return files
