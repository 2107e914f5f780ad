from __future__ import annotations

import os
import re
from typing import List, Optional, Sequence

from ..model import Finding
from . import pyast
from .base import BaseAnalyzer, brace_block


JS_EXPORT_PATTERNS = [
	re.compile(r"^export\s+(?:default\s+)?(?:async\s+)?function\s+(\w+)", re.MULTILINE),
	re.compile(r"^export\s+(?:default\s+)?class\s+(\w+)", re.MULTILINE),
	re.compile(r"^export\s+const\s+(\w+)\s*=", re.MULTILINE),
	re.compile(r"^module\.exports\s*=\s*(\w+)", re.MULTILINE),
]

README_SECTIONS = [
	("installation", re.compile(r"^#+\s*install", re.IGNORECASE | re.MULTILINE)),
	("usage", re.compile(r"^#+\s*usage", re.IGNORECASE | re.MULTILINE)),
	("api", re.compile(r"^#+\s*api", re.IGNORECASE | re.MULTILINE)),
	("examples", re.compile(r"^#+\s*example", re.IGNORECASE | re.MULTILINE)),
	("contributing", re.compile(r"^#+\s*contribut", re.IGNORECASE | re.MULTILINE)),
]

# How far above an export we look for a JSDoc block.
JSDOC_WINDOW = 5

COMPLEXITY_THRESHOLD = 10

JS_FUNCTION_PATTERN = re.compile(r"function\s+(\w+)\s*\([^)]*\)\s*\{")
JS_BRANCH_PATTERNS = [
	re.compile(r"\bif\s*\("),
	re.compile(r"\bfor\s*\("),
	re.compile(r"\bwhile\s*\("),
	re.compile(r"\bswitch\s*\("),
	re.compile(r"\?[^:]+:"),
]


class DocsAnalyzer(BaseAnalyzer):
	"""Undocumented public APIs, unexplained complex functions and README gaps."""

	category = "docs"

	def analyze(self, files: Sequence[str]) -> List[Finding]:
		findings: List[Finding] = []
		for path in files:
			if not path.endswith((".py", ".js", ".jsx", ".ts", ".tsx")):
				continue
			text = self.read_text(path)
			if text is None:
				continue
			if path.endswith(".py"):
				findings.extend(self.analyze_python(path, text))
			else:
				findings.extend(self.analyze_javascript(path, text))
			findings.extend(self.find_complex_functions(path, text))
		findings.extend(self.check_readme(files))
		return findings

	def analyze_python(self, path: str, text: str) -> List[Finding]:
		defs = pyast.parse_definitions(path, text)
		if not defs:
			return []
		findings: List[Finding] = []
		for d in defs:
			if d.has_docstring or not d.is_public or d.kind == "method":
				continue
			findings.append(
				self.finding(
					path,
					subcategory="Missing Docstring",
					severity="medium",
					impact="moderate",
					frequency="always",
					fix_cost="low",
					title=f"Missing documentation for {d.kind}: {d.name}",
					description=f"Public {d.kind} '{d.name}' has no docstring",
					recommendation="Add a docstring describing purpose, arguments and return value",
					line=d.line,
				)
			)
		return findings

	def analyze_javascript(self, path: str, text: str) -> List[Finding]:
		lines = text.splitlines()
		findings: List[Finding] = []
		for pattern in JS_EXPORT_PATTERNS:
			for match in pattern.finditer(text):
				line = text.count("\n", 0, match.start()) + 1
				window = lines[max(0, line - 1 - JSDOC_WINDOW):line - 1]
				if any("/**" in l or "* @" in l for l in window):
					continue
				name = match.group(1)
				findings.append(
					self.finding(
						path,
						subcategory="Missing JSDoc",
						severity="medium",
						impact="moderate",
						frequency="always",
						fix_cost="low",
						title=f"Missing documentation for export: {name}",
						description=f"'{name}' is exported but lacks JSDoc documentation",
						recommendation="Add a JSDoc comment describing purpose, parameters, return value, and usage",
						line=line,
						snippet=lines[line - 1].strip() if line <= len(lines) else None,
					)
				)
		return findings

	def find_complex_functions(self, path: str, text: str) -> List[Finding]:
		"""Functions above COMPLEXITY_THRESHOLD branches with no docstring or nearby comment."""
		lines = text.splitlines()
		if path.endswith(".py"):
			candidates = [
				(d.name, d.line, score)
				for d, score in pyast.complex_functions(path, text, COMPLEXITY_THRESHOLD)
				if not d.has_docstring
			]
		else:
			candidates = []
			for match in JS_FUNCTION_PATTERN.finditer(text):
				body = brace_block(text, match.start())
				score = sum(len(p.findall(body)) for p in JS_BRANCH_PATTERNS)
				if score > COMPLEXITY_THRESHOLD:
					candidates.append((match.group(1), text.count("\n", 0, match.start()) + 1, score))

		findings: List[Finding] = []
		for name, line, score in candidates:
			nearby = lines[max(0, line - 3):line + 4]
			if any(marker in l for l in nearby for marker in ("#", "//", "/*")):
				continue
			findings.append(
				self.finding(
					path,
					subcategory="Complex Code",
					severity="low",
					impact="localized",
					frequency="often",
					fix_cost="low",
					title=f"Complex function needs explanation: {name}",
					description=f"Function '{name}' has high complexity ({score}) but no explanatory comments",
					recommendation="Explain the algorithm and its edge cases in a docstring or comments",
					line=line,
				)
			)
		return findings

	def find_readme(self, files: Sequence[str]) -> Optional[str]:
		for path in files:
			if os.path.basename(path).lower() == "readme.md":
				return path
		return None

	def check_readme(self, files: Sequence[str]) -> List[Finding]:
		readme = self.find_readme(files)
		if readme is None:
			return [
				self.finding(
					self.project_root,
					subcategory="Missing README",
					severity="high",
					impact="widespread",
					frequency="always",
					fix_cost="medium",
					title="Project is missing README.md",
					description="No README.md found. A README is essential for onboarding and documentation",
					recommendation="Create README.md with description, installation, usage, API docs, examples and contribution guidelines",
				)
			]

		text = self.read_text(readme)
		if text is None:
			return []
		findings: List[Finding] = []
		for section, pattern in README_SECTIONS:
			if pattern.search(text):
				continue
			findings.append(
				self.finding(
					readme,
					subcategory="Incomplete README",
					severity="low",
					impact="moderate",
					frequency="always",
					fix_cost="low",
					title=f"README missing {section} section",
					description=f"README.md should include a {section} section",
					recommendation=f"Add a '## {section.capitalize()}' section to the README",
				)
			)
		return findings
