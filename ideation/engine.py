"""IdeationEngine: discovery, analyzer dispatch, prioritization, reporting."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional, Sequence

from .analyzers import AnalyzerPort, default_analyzers
from .config import IdeationConfig
from .errors import AnalyzerError, ReportWriteError
from .fs_scan import discover
from .model import CATEGORIES, Finding, FindingStore, IdeationResult, Suggestion, Summary
from .report import InsightsReporter, ReportRenderer
from .suggestions import build_suggestions
from .summarize import summarize_findings

logger = logging.getLogger(__name__)


def run_category(
	store: FindingStore,
	category: str,
	analyzer: AnalyzerPort,
	files: Sequence[str],
) -> FindingStore:
	"""Run one analyzer and return ``store`` with that category's bucket replaced.

	Analyzer exceptions propagate unchanged.
	"""
	findings = collect(category, analyzer, files)
	return store.replace(category, findings)


def collect(category: str, analyzer: AnalyzerPort, files: Sequence[str]) -> List[Finding]:
	try:
		findings = list(analyzer.analyze(list(files)))
	except Exception:
		logger.error("Analyzer failed: operation=analyze category=%s", category)
		raise
	for finding in findings:
		if finding.category != category:
			raise AnalyzerError(
				f"analyzer returned a {finding.category!r} finding: {finding.title}",
				operation="analyze",
				category=category,
			)
	return findings


class IdeationEngine:
	def __init__(
		self,
		project_root: str,
		config: Optional[IdeationConfig] = None,
		analyzers: Optional[Mapping[str, AnalyzerPort]] = None,
		renderer: Optional[ReportRenderer] = None,
	):
		self.project_root = os.path.abspath(project_root)
		self.config = config or IdeationConfig()
		self.analyzers: Dict[str, AnalyzerPort] = dict(analyzers) if analyzers is not None else default_analyzers(self.project_root)
		self.renderer: ReportRenderer = renderer or InsightsReporter(self.project_root)
		self._store = FindingStore()

	@property
	def findings(self) -> FindingStore:
		return self._store

	def discover_files(self) -> List[str]:
		files = discover(self.project_root, self.config)
		logger.info("Discovered %d files under %s", len(files), self.project_root)
		return files

	def analyze_codebase(self) -> IdeationResult:
		logger.info("Analyzing codebase at %s (focus=%s)", self.project_root, self.config.focus or "all")
		files = self.discover_files()
		selected = [c for c in CATEGORIES if self.config.selects(c)]

		if self.config.workers > 1 and len(selected) > 1:
			self._analyze_parallel(selected, files)
		else:
			for category in selected:
				self._analyze(category, files)

		return IdeationResult(
			file_count=len(files),
			findings=self._store,
			suggestions=self.generate_suggestions(),
		)

	def _analyze(self, category: str, files: Optional[Sequence[str]]) -> FindingStore:
		if files is None:
			files = self.discover_files()
		analyzer = self.analyzers.get(category)
		if analyzer is None:
			raise AnalyzerError("no analyzer registered", operation="analyze", category=category)
		logger.info("Analyzing %s...", category)
		self._store = run_category(self._store, category, analyzer, files)
		logger.info("Found %d %s issues", len(self._store.bucket(category)), category)
		return self._store

	def _analyze_parallel(self, categories: Sequence[str], files: Sequence[str]) -> None:
		missing = [c for c in categories if c not in self.analyzers]
		if missing:
			raise AnalyzerError("no analyzer registered", operation="analyze", category=missing[0])
		with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
			futures = [
				(category, pool.submit(collect, category, self.analyzers[category], files))
				for category in categories
			]
			# Join in fixed order; a failure leaves earlier buckets in place.
			for category, future in futures:
				self._store = self._store.replace(category, future.result())
				logger.info("Found %d %s issues", len(self._store.bucket(category)), category)

	def find_vulnerabilities(self, files: Optional[Sequence[str]] = None) -> FindingStore:
		return self._analyze("security", files)

	def find_performance_issues(self, files: Optional[Sequence[str]] = None) -> FindingStore:
		return self._analyze("performance", files)

	def find_doc_gaps(self, files: Optional[Sequence[str]] = None) -> FindingStore:
		return self._analyze("docs", files)

	def track_tech_debt(self, files: Optional[Sequence[str]] = None) -> FindingStore:
		return self._analyze("debt", files)

	def generate_suggestions(self) -> List[Suggestion]:
		suggestions = build_suggestions(self._store.flatten())
		logger.info("Generated %d suggestions", len(suggestions))
		return suggestions

	def get_summary(self) -> Summary:
		return summarize_findings(self._store)

	def generate_report(self, output_path: Optional[str] = None, fmt: str = "markdown") -> str:
		report = self.renderer.render(self._store, self.generate_suggestions(), fmt)
		if output_path:
			try:
				with open(output_path, "w", encoding="utf-8") as fh:
					fh.write(report)
			except OSError as exc:
				raise ReportWriteError(f"cannot write report: {exc}", path=output_path) from exc
			logger.info("Report written to %s", output_path)
		return report
