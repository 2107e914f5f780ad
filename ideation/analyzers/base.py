from __future__ import annotations

import fnmatch
import logging
import os
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..model import Finding

logger = logging.getLogger(__name__)


class AnalyzerPort(Protocol):
	"""Contract every category analyzer satisfies."""

	def analyze(self, files: Sequence[str]) -> List[Finding]:
		...


@dataclass(frozen=True)
class LinePattern:
	rule: str
	regex: re.Pattern
	severity: str


def compile_rules(rules: dict) -> List[LinePattern]:
	patterns: List[LinePattern] = []
	for rule, entries in rules.items():
		for expr, severity in entries:
			patterns.append(LinePattern(rule=rule, regex=re.compile(expr, re.IGNORECASE), severity=severity))
	return patterns


def impact_for(severity: str) -> str:
	return {"critical": "widespread", "high": "moderate"}.get(severity, "localized")


class BaseAnalyzer:
	"""Shared plumbing for the built-in analyzers.

	Subclasses set ``category`` and implement ``analyze``. Paths in findings
	are the absolute paths handed in by discovery.
	"""

	category: str = ""

	def __init__(self, project_root: str):
		self.project_root = os.path.abspath(project_root)

	def analyze(self, files: Sequence[str]) -> List[Finding]:
		raise NotImplementedError

	def read_text(self, path: str) -> Optional[str]:
		try:
			with open(path, "r", encoding="utf-8") as fh:
				return fh.read()
		except (OSError, UnicodeDecodeError) as exc:
			logger.debug("Skipping unreadable file %s: %s", path, exc)
			return None

	def finding(self, path: str, **fields) -> Finding:
		return Finding(category=self.category, file=path, **fields)

	def scan_lines(self, path: str, text: str, patterns: Sequence[LinePattern], **defaults) -> List[Finding]:
		"""One finding per (pattern, matching line), in pattern order."""
		findings: List[Finding] = []
		lines = text.splitlines()
		for pattern in patterns:
			for lineno, line in enumerate(lines, start=1):
				match = pattern.regex.search(line)
				if not match:
					continue
				findings.append(
					self.finding(
						path,
						subcategory=self.subcategory(pattern.rule),
						severity=pattern.severity,
						impact=impact_for(pattern.severity),
						title=self.title(pattern.rule),
						description=self.description(pattern.rule, match.group(0)),
						recommendation=self.recommendation(pattern.rule),
						line=lineno,
						snippet=line.strip(),
						**defaults,
					)
				)
		return findings

	def subcategory(self, rule: str) -> str:
		return rule.replace("_", " ").title()

	def title(self, rule: str) -> str:
		return self.subcategory(rule)

	def description(self, rule: str, match: str) -> str:
		return f"Matched: {match}"

	def recommendation(self, rule: str) -> str:
		return "Review and fix this issue"


def is_code_file(path: str) -> bool:
	return path.endswith((".py", ".js", ".jsx", ".ts", ".tsx"))


TEST_FILE_PATTERNS = ("test_*", "*_test.*", "*.test.*", "*.spec.*", "conftest.py")


def is_test_file(path: str) -> bool:
	name = os.path.basename(path).lower()
	return any(fnmatch.fnmatchcase(name, pattern) for pattern in TEST_FILE_PATTERNS)


def brace_block(text: str, start: int) -> str:
	"""Text from ``start`` through the brace closing the first ``{`` after it."""
	depth = 0
	opened = False
	for i in range(start, len(text)):
		if text[i] == "{":
			depth += 1
			opened = True
		elif text[i] == "}":
			depth -= 1
		if opened and depth == 0:
			return text[start:i + 1]
	return text[start:]
