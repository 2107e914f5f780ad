from __future__ import annotations

import logging
import os
from typing import Dict, List, Sequence

from ..model import Finding
from . import pyast
from .base import BaseAnalyzer, compile_rules, is_code_file

logger = logging.getLogger(__name__)


LARGE_FILE_KB = 500
HUGE_FILE_KB = 1000

RULES = {
	"n_plus_one": [
		(r"\.forEach\([^)]+\.(query|find|findOne)\(", "high"),
		(r"\.map\([^)]+\.(query|find|findOne)\(", "high"),
		(r"for\s*\([^)]+\)\s*\{[^}]*\.(query|find|findOne)\(", "high"),
	],
	"blocking_ops": [
		(r"fs\.(readFileSync|writeFileSync)\(", "high"),
		(r"\bexecSync\(", "medium"),
	],
	"memory_leaks": [
		(r"addEventListener\([^)]+\)(?!.*removeEventListener)", "medium"),
		(r"setInterval\((?!.*clearInterval)", "medium"),
		(r"setTimeout\([^,]+,\s*\d{4,}\)", "low"),
	],
	"inefficient_loops": [
		(r"while\s*\(\s*true\s*\)(?!.*break)", "critical"),
		(r"\.forEach\(.*\.forEach\(.*\.forEach\(", "high"),
	],
	"inefficient_data_structures": [
		(r"\.push\([^)]+\).*\.indexOf\(", "medium"),
		(r"\.concat\([^)]+\)", "low"),
	],
	"missing_optimizations": [
		(r"React\.createElement\(.*map\(", "medium"),
		(r"useEffect\(\(\)\s*=>\s*\{(?!.*\[)", "low"),
	],
}

FIX_COST: Dict[str, str] = {
	"n_plus_one": "high",
	"blocking_ops": "low",
	"memory_leaks": "medium",
	"inefficient_loops": "medium",
	"inefficient_data_structures": "low",
	"missing_optimizations": "low",
}

SUBCATEGORIES: Dict[str, str] = {
	"n_plus_one": "N+1 Query",
	"blocking_ops": "Blocking Operation",
	"memory_leaks": "Memory Leak Risk",
	"inefficient_loops": "Inefficient Loop",
	"inefficient_data_structures": "Inefficient Data Structure",
	"missing_optimizations": "Missing Optimization",
}

TITLES: Dict[str, str] = {
	"n_plus_one": "Potential N+1 query detected",
	"blocking_ops": "Blocking operation in code path",
	"memory_leaks": "Potential memory leak",
	"inefficient_loops": "Inefficient loop detected",
	"inefficient_data_structures": "Inefficient data structure usage",
	"missing_optimizations": "Missing optimization opportunity",
}

RECOMMENDATIONS: Dict[str, str] = {
	"n_plus_one": "Fetch the data in one batched query or eager-load it before the loop",
	"blocking_ops": "Use the asynchronous variant so the event loop is not blocked",
	"memory_leaks": "Keep a handle to the timer or listener and release it on teardown",
	"inefficient_loops": "Flatten nested iteration with lookups (dict/set) or precomputed indexes",
	"inefficient_data_structures": "Use a Set for membership checks; build arrays with push or spread instead of repeated concat",
	"missing_optimizations": "Give list items a key and pass a dependency array to useEffect",
}


class PerformanceAnalyzer(BaseAnalyzer):
	"""N+1 queries, blocking calls, leaks, runaway loops and oversized files."""

	category = "performance"

	def __init__(self, project_root: str):
		super().__init__(project_root)
		self.patterns = compile_rules(RULES)

	def analyze(self, files: Sequence[str]) -> List[Finding]:
		findings: List[Finding] = []
		code_files = [f for f in files if is_code_file(f)]
		for path in code_files:
			text = self.read_text(path)
			if text is None:
				continue
			if path.endswith(".py"):
				findings.extend(self.analyze_python(path, text))
				continue
			for pattern in self.patterns:
				findings.extend(
					self.scan_lines(path, text, [pattern], frequency="often", fix_cost=FIX_COST[pattern.rule])
				)
		findings.extend(self.check_file_sizes(code_files))
		return findings

	def analyze_python(self, path: str, text: str) -> List[Finding]:
		findings: List[Finding] = []
		for d in pyast.deeply_nested_functions(path, text):
			findings.append(
				self.finding(
					path,
					subcategory="Inefficient Loop",
					severity="high",
					impact="moderate",
					frequency="often",
					fix_cost="medium",
					title=f"Deeply nested loops in '{d.name}'",
					description=f"Function '{d.name}' nests three or more loops, which grows cubically with input size",
					recommendation=RECOMMENDATIONS["inefficient_loops"],
					line=d.line,
				)
			)
		for line in pyast.blocking_calls_in_async(path, text):
			findings.append(
				self.finding(
					path,
					subcategory="Blocking Operation",
					severity="high",
					impact="moderate",
					frequency="often",
					fix_cost="low",
					title="time.sleep() inside async function",
					description="time.sleep blocks the whole event loop when called from a coroutine",
					recommendation="Use 'await asyncio.sleep(...)' instead",
					line=line,
				)
			)
		for line in pyast.sleeps_in_loops(path, text):
			findings.append(
				self.finding(
					path,
					subcategory="Blocking Operation",
					severity="medium",
					impact="localized",
					frequency="often",
					fix_cost="low",
					title="sleep() inside loop",
					description="Each iteration waits on a fixed sleep, so total runtime grows with the number of items",
					recommendation="Wait on the real condition (event, queue, backoff helper) or batch the work",
					line=line,
				)
			)
		for line in pyast.string_concat_in_loops(path, text):
			findings.append(
				self.finding(
					path,
					subcategory="Inefficient Data Structure",
					severity="low",
					impact="localized",
					frequency="often",
					fix_cost="low",
					title="String concatenation in loop",
					description="Building a string with += copies it on every iteration",
					recommendation="Collect the parts in a list and ''.join() them after the loop",
					line=line,
				)
			)
		for line in pyast.queries_in_loops(path, text):
			findings.append(
				self.finding(
					path,
					subcategory=SUBCATEGORIES["n_plus_one"],
					severity="high",
					impact="moderate",
					frequency="often",
					fix_cost=FIX_COST["n_plus_one"],
					title=TITLES["n_plus_one"],
					description="Loop issues a database query per iteration",
					recommendation=RECOMMENDATIONS["n_plus_one"],
					line=line,
				)
			)
		return findings

	def check_file_sizes(self, files: Sequence[str]) -> List[Finding]:
		findings: List[Finding] = []
		for path in files:
			try:
				size_kb = os.path.getsize(path) / 1024
			except OSError as exc:
				logger.debug("Cannot stat %s: %s", path, exc)
				continue
			if size_kb <= LARGE_FILE_KB:
				continue
			findings.append(
				self.finding(
					path,
					subcategory="Large File",
					severity="high" if size_kb > HUGE_FILE_KB else "medium",
					impact="moderate",
					frequency="always",
					fix_cost="medium",
					title="Large file detected",
					description=f"File is {round(size_kb)}KB, which may impact bundle size and load time",
					recommendation="Consider code splitting, lazy loading, or refactoring into smaller modules",
				)
			)
		return findings

	def subcategory(self, rule: str) -> str:
		return SUBCATEGORIES.get(rule, super().subcategory(rule))

	def title(self, rule: str) -> str:
		return TITLES.get(rule, "Performance issue detected")

	def description(self, rule: str, match: str) -> str:
		return f"{TITLES.get(rule, 'Performance issue')}: `{match[:50]}`"

	def recommendation(self, rule: str) -> str:
		return RECOMMENDATIONS.get(rule, "Review and optimize this code path")
