from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .model import Finding


SEVERITY_WEIGHT: Dict[str, int] = {"critical": 4, "high": 3, "medium": 2, "low": 1}
IMPACT_WEIGHT: Dict[str, int] = {"widespread": 3, "moderate": 2, "localized": 1}
FREQUENCY_WEIGHT: Dict[str, int] = {"always": 3, "often": 2, "rare": 1}
COST_WEIGHT: Dict[str, int] = {"high": 3, "medium": 2, "low": 1}

# Missing fields: severity/impact/frequency weigh 1, fix cost counts as medium.
DEFAULT_WEIGHT = 1
DEFAULT_COST_WEIGHT = 2


def score(finding: Finding) -> float:
	"""Priority of a finding: severity * impact * frequency / fix cost."""
	severity = SEVERITY_WEIGHT.get(finding.severity or "", DEFAULT_WEIGHT)
	impact = IMPACT_WEIGHT.get(finding.impact or "", DEFAULT_WEIGHT)
	frequency = FREQUENCY_WEIGHT.get(finding.frequency or "", DEFAULT_WEIGHT)
	cost = COST_WEIGHT.get(finding.fix_cost or "", DEFAULT_COST_WEIGHT)
	return (severity * impact * frequency) / cost


def prioritize(findings: Sequence[Finding]) -> List[Tuple[Finding, float]]:
	"""Pair findings with their score, highest first.

	``sorted`` is stable, so equal scores keep their input order.
	"""
	scored = [(finding, score(finding)) for finding in findings]
	return sorted(scored, key=lambda pair: pair[1], reverse=True)
