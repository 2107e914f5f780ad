from __future__ import annotations

from typing import Optional


QUICK = "Quick (< 1 hour)"
SHORT = "Short (1-2 hours)"
MEDIUM = "Medium (2-4 hours)"
LONG = "Long (4-8 hours)"
EXTENDED = "Extended (> 8 hours)"


def estimate_effort(fix_cost: Optional[str], files_affected: int) -> str:
	# First matching row wins; every "high" cost falls through to EXTENDED.
	fix_cost = fix_cost or "medium"
	if fix_cost == "low" and files_affected == 1:
		return QUICK
	if fix_cost == "low" and files_affected <= 3:
		return SHORT
	if fix_cost == "medium" and files_affected <= 5:
		return MEDIUM
	if fix_cost == "medium":
		return LONG
	return EXTENDED
