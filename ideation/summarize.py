from __future__ import annotations

from typing import Dict, List

from .model import SEVERITIES, FindingStore, Summary, Suggestion


def summarize_findings(store: FindingStore) -> Summary:
	by_category = store.counts()
	by_severity: Dict[str, int] = {severity: 0 for severity in SEVERITIES}
	for finding in store.flatten():
		# Unrated findings weigh like "low" when scored, so count them there.
		by_severity[finding.severity or "low"] += 1
	return Summary(
		total=sum(by_category.values()),
		by_category=by_category,
		by_severity=by_severity,
	)


def summarize_suggestion(s: Suggestion) -> str:
	parts: List[str] = []
	parts.append(f"{s.title} [{s.category}/{s.severity or 'unrated'}]")
	parts.append(f"  Priority: {round(s.priority, 1)} | Effort: {s.effort}")
	if s.recommendation:
		parts.append(f"  -> {s.recommendation}")
	return "\n".join(parts)
