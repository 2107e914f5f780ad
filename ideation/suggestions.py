from __future__ import annotations

from typing import List, Sequence

from .effort import estimate_effort
from .model import Finding, Suggestion
from .priority import prioritize


def build_suggestion(finding: Finding, priority: float) -> Suggestion:
	files = finding.affected_files()
	return Suggestion(
		title=finding.title,
		category=finding.category,
		severity=finding.severity,
		impact=finding.impact,
		priority=priority,
		description=finding.description,
		recommendation=finding.recommendation,
		files=files,
		effort=estimate_effort(finding.fix_cost, len(files)),
	)


def build_suggestions(findings: Sequence[Finding]) -> List[Suggestion]:
	"""One suggestion per finding, in priority order."""
	return [build_suggestion(finding, priority) for finding, priority in prioritize(findings)]
