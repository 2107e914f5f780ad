"""Ideation package: ranks improvement suggestions for a codebase.

Modules:
- fs_scan.py: File discovery under include/ignore rules.
- analyzers/: Security, performance, docs and debt analyzers.
- engine.py: Orchestrates discovery, analyzers and suggestion building.
- priority.py: Priority scoring and stable ordering of findings.
- effort.py: Effort buckets from fix cost and files affected.
- suggestions.py: Builds suggestion records from scored findings.
- summarize.py: Finding counts by category and severity.
- report.py: Markdown and JSON insights reports.
- model.py: Data structures for findings, suggestions and results.
- config.py: Engine configuration and environment loading.
"""

from .config import IdeationConfig, load_config
from .engine import IdeationEngine
from .errors import AnalyzerError, DiscoveryError, IdeationError, ReportWriteError

__all__ = [
	"AnalyzerError",
	"DiscoveryError",
	"IdeationConfig",
	"IdeationEngine",
	"IdeationError",
	"ReportWriteError",
	"load_config",
]
