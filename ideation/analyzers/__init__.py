"""Category analyzers that turn files into findings.

Each analyzer satisfies ``AnalyzerPort``: ``analyze(files) -> list[Finding]``.
The engine looks analyzers up by category name, never by type.

- security.py: secrets, injection sinks, dynamic execution, deprecated deps.
- performance.py: blocking calls, nested loops, oversized files.
- docs.py: undocumented public APIs, README gaps.
- debt.py: TODO markers, long functions, duplicated blocks.
- pyast.py: Python ``ast`` helpers shared by the above.
"""

from __future__ import annotations

from typing import Dict

from .base import AnalyzerPort
from .debt import DebtAnalyzer
from .docs import DocsAnalyzer
from .performance import PerformanceAnalyzer
from .security import SecurityAnalyzer


ANALYZER_TYPES = {
	"security": SecurityAnalyzer,
	"performance": PerformanceAnalyzer,
	"docs": DocsAnalyzer,
	"debt": DebtAnalyzer,
}


def default_analyzers(project_root: str) -> Dict[str, AnalyzerPort]:
	return {category: cls(project_root) for category, cls in ANALYZER_TYPES.items()}


__all__ = [
	"AnalyzerPort",
	"DebtAnalyzer",
	"DocsAnalyzer",
	"PerformanceAnalyzer",
	"SecurityAnalyzer",
	"default_analyzers",
]
