from __future__ import annotations

import json
import logging
import os
import re
from typing import Dict, List, Sequence, Tuple

from ..model import Finding
from . import pyast
from .base import BaseAnalyzer, brace_block, is_code_file

logger = logging.getLogger(__name__)


TODO_PATTERN = re.compile(r"(?:#|//)\s*(TODO|FIXME|HACK|XXX|BUG)\b(\([^)]*\))?:?\s*(.*)", re.IGNORECASE)

LONG_FUNCTION_LINES = 50
VERY_LONG_FUNCTION_LINES = 100
DUPLICATE_BLOCK_LINES = 5
DUPLICATE_MIN_CHARS = 50
GOD_CLASS_LINES = 200
GOD_CLASS_METHODS = 15
COMMENTED_CODE_LINES = 5

JS_CLASS_PATTERN = re.compile(r"\bclass\s+(\w+)")
JS_METHOD_PATTERN = re.compile(r"^\s*(?:async\s+)?(?!if\b|for\b|while\b|switch\b|catch\b)(\w+)\s*\([^)]*\)\s*\{", re.MULTILINE)
JS_EXIT_PATTERN = re.compile(r"^(return\b.*|throw\s.*)$")
COMMENTED_CODE_PATTERN = re.compile(r"^(?:#|//)\s*.*[a-z]+\s*[=({]")
MAGIC_NUMBER_PATTERN = re.compile(r"\b(\d{3,})\b")
COMMENT_START = re.compile(r"#|//")
# Numbers that explain themselves: HTTP statuses and one second in ms.
COMMON_NUMBERS = {"200", "404", "1000"}

LOCKFILES = ("package-lock.json", "yarn.lock", "pnpm-lock.yaml")


class DebtAnalyzer(BaseAnalyzer):
	"""Deferred work markers, oversized code, dead code and dependency hygiene."""

	category = "debt"

	def analyze(self, files: Sequence[str]) -> List[Finding]:
		findings: List[Finding] = []
		for path in files:
			if not is_code_file(path):
				continue
			text = self.read_text(path)
			if text is None:
				continue
			lines = text.splitlines()
			findings.extend(self.find_todos(path, lines))
			if path.endswith(".py"):
				findings.extend(self.find_long_functions(path, text))
			findings.extend(self.find_duplicates(path, lines))
			findings.extend(self.find_god_objects(path, text))
			findings.extend(self.find_dead_code(path, text, lines))
			findings.extend(self.find_commented_code(path, lines))
			findings.extend(self.find_magic_numbers(path, lines))
		findings.extend(self.check_dependencies(files))
		return findings

	def find_todos(self, path: str, lines: List[str]) -> List[Finding]:
		findings: List[Finding] = []
		for lineno, line in enumerate(lines, start=1):
			match = TODO_PATTERN.search(line)
			if not match:
				continue
			kind = match.group(1).upper()
			note = match.group(3).strip()
			findings.append(
				self.finding(
					path,
					subcategory="TODO Comment",
					severity="medium" if kind in ("BUG", "FIXME") else "low",
					impact="localized",
					frequency="always",
					fix_cost="medium",
					title=f"{kind} comment requires attention",
					description=f'{kind} comment found: "{note}"',
					recommendation=f"Address the {kind} item or move it to a tracked issue",
					line=lineno,
					snippet=line.strip(),
				)
			)
		return findings

	def find_long_functions(self, path: str, text: str) -> List[Finding]:
		defs = pyast.parse_definitions(path, text) or []
		findings: List[Finding] = []
		for d in defs:
			if d.kind == "class" or d.length <= LONG_FUNCTION_LINES:
				continue
			findings.append(
				self.finding(
					path,
					subcategory="Long Function",
					severity="medium" if d.length > VERY_LONG_FUNCTION_LINES else "low",
					impact="localized",
					frequency="always",
					fix_cost="high",
					title=f"Function '{d.name}' is too long ({d.length} lines)",
					description=f"Long functions are harder to understand, test and maintain. '{d.name}' spans {d.length} lines.",
					recommendation="Split into smaller functions with a single responsibility each",
					line=d.line,
				)
			)
		return findings

	def find_duplicates(self, path: str, lines: List[str]) -> List[Finding]:
		"""Report the first block of lines repeated within the same file."""
		seen: Dict[str, List[int]] = {}
		for start in range(len(lines) - DUPLICATE_BLOCK_LINES + 1):
			block = "\n".join(
				l.strip()
				for l in lines[start:start + DUPLICATE_BLOCK_LINES]
				if l.strip() and not l.strip().startswith(("#", "//"))
			)
			if len(block) < DUPLICATE_MIN_CHARS:
				continue
			seen.setdefault(block, []).append(start)

		for occurrences in seen.values():
			if len(occurrences) < 2:
				continue
			at = ", ".join(str(i + 1) for i in occurrences)
			return [
				self.finding(
					path,
					subcategory="Duplicate Code",
					severity="medium",
					impact="moderate",
					frequency="often",
					fix_cost="medium",
					title=f"Duplicate code block found ({len(occurrences)} times)",
					description=f"Code block repeated {len(occurrences)} times starting at lines: {at}",
					recommendation="Extract the duplicated code into a reusable function",
					line=occurrences[0] + 1,
				)
			]
		return []

	def find_god_objects(self, path: str, text: str) -> List[Finding]:
		"""Classes over GOD_CLASS_LINES lines or GOD_CLASS_METHODS methods."""
		if path.endswith(".py"):
			shapes = [(s.name, s.line, s.length, s.methods) for s in pyast.class_shapes(path, text)]
		else:
			shapes = []
			for match in JS_CLASS_PATTERN.finditer(text):
				body = brace_block(text, match.start())
				shapes.append((
					match.group(1),
					text.count("\n", 0, match.start()) + 1,
					body.count("\n") + 1,
					len(JS_METHOD_PATTERN.findall(body)),
				))

		findings: List[Finding] = []
		for name, line, length, methods in shapes:
			if length <= GOD_CLASS_LINES and methods <= GOD_CLASS_METHODS:
				continue
			findings.append(
				self.finding(
					path,
					subcategory="God Object",
					severity="medium",
					impact="moderate",
					frequency="always",
					fix_cost="high",
					title=f"Class '{name}' is too large",
					description=f"Class spans {length} lines with {methods} methods and likely has too many responsibilities",
					recommendation="Split it into smaller classes that each own one responsibility",
					line=line,
				)
			)
		return findings

	def find_dead_code(self, path: str, text: str, lines: List[str]) -> List[Finding]:
		if path.endswith(".py"):
			unreachable = pyast.unreachable_statements(path, text)
		else:
			unreachable = self._js_unreachable(lines)

		findings: List[Finding] = []
		for line, keyword in unreachable:
			findings.append(
				self.finding(
					path,
					subcategory="Dead Code",
					severity="low",
					impact="localized",
					frequency="always",
					fix_cost="low",
					title="Unreachable code detected",
					description=f"Code after a {keyword} statement can never run",
					recommendation="Remove the unreachable code or restructure the branch",
					line=line,
					snippet=lines[line - 1].strip() if line <= len(lines) else None,
				)
			)
		return findings

	def _js_unreachable(self, lines: List[str]) -> List[Tuple[int, str]]:
		found: List[Tuple[int, str]] = []
		for i, raw in enumerate(lines):
			line = raw.strip()
			if "//" in line or not JS_EXIT_PATTERN.match(line) or not line.endswith(";"):
				continue
			for j in range(i + 1, min(len(lines), i + 5)):
				following = lines[j].strip()
				if not following or following.startswith("//"):
					continue
				if not following.startswith(("}", "case ", "default:")):
					found.append((j + 1, line.split()[0].rstrip(";")))
				break
		return found

	def find_commented_code(self, path: str, lines: List[str]) -> List[Finding]:
		"""Runs of more than COMMENTED_CODE_LINES commented-out code lines."""
		findings: List[Finding] = []
		start = None
		for i, raw in enumerate(lines + [""]):
			line = raw.strip()
			if COMMENTED_CODE_PATTERN.match(line) and not TODO_PATTERN.match(line):
				if start is None:
					start = i
				continue
			if start is not None and i - start > COMMENTED_CODE_LINES:
				findings.append(
					self.finding(
						path,
						subcategory="Commented Code",
						severity="low",
						impact="localized",
						frequency="always",
						fix_cost="low",
						title="Large block of commented-out code",
						description=f"{i - start} lines of commented code found (lines {start + 1}-{i})",
						recommendation="Delete it; version control keeps the history",
						line=start + 1,
					)
				)
			start = None
		return findings

	def find_magic_numbers(self, path: str, lines: List[str]) -> List[Finding]:
		findings: List[Finding] = []
		for lineno, line in enumerate(lines, start=1):
			stripped = line.strip()
			if stripped.startswith(("#", "//")) or "=" in line or "const" in line:
				continue
			cut = COMMENT_START.search(line)
			code, comment = (line[:cut.start()], line[cut.start():]) if cut else (line, "")
			match = MAGIC_NUMBER_PATTERN.search(code)
			if not match:
				continue
			number = match.group(1)
			# A comment that mentions the number counts as its explanation.
			if number in COMMON_NUMBERS or number in comment:
				continue
			findings.append(
				self.finding(
					path,
					subcategory="Magic Number",
					severity="low",
					impact="localized",
					frequency="often",
					fix_cost="low",
					title="Magic number should be a named constant",
					description=f"Numeric literal {number} has no name explaining what it means",
					recommendation=f"Extract it to a named constant, e.g. MEANINGFUL_NAME = {number}",
					line=lineno,
					snippet=stripped,
				)
			)
		return findings

	def check_dependencies(self, files: Sequence[str]) -> List[Finding]:
		"""Wildcard versions and missing lockfiles for each package.json."""
		findings: List[Finding] = []
		for path in files:
			if os.path.basename(path) != "package.json":
				continue
			text = self.read_text(path)
			if text is None:
				continue
			try:
				pkg = json.loads(text)
			except ValueError as exc:
				logger.debug("Skipping invalid %s: %s", path, exc)
				continue
			deps: Dict[str, str] = {}
			deps.update(pkg.get("dependencies") or {})
			deps.update(pkg.get("devDependencies") or {})

			for name, version in deps.items():
				if version not in ("*", "latest"):
					continue
				findings.append(
					self.finding(
						path,
						subcategory="Dependency Management",
						severity="medium",
						impact="moderate",
						frequency="always",
						fix_cost="low",
						title=f"Unpinned dependency: {name}",
						description=f"'{name}' uses the wildcard version '{version}', so builds are not reproducible",
						recommendation="Pin a version or use a caret/tilde range",
					)
				)

			folder = os.path.dirname(path)
			if deps and not any(os.path.exists(os.path.join(folder, lock)) for lock in LOCKFILES):
				findings.append(
					self.finding(
						path,
						subcategory="Missing Lockfile",
						severity="high",
						impact="widespread",
						frequency="always",
						fix_cost="low",
						title="Missing dependency lockfile",
						description="No package-lock.json, yarn.lock or pnpm-lock.yaml next to package.json",
						recommendation="Run the package manager's install and commit the generated lockfile",
					)
				)
		return findings
