from __future__ import annotations

from typing import Dict, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, model_validator


Category = Literal["security", "performance", "docs", "debt"]
Severity = Literal["critical", "high", "medium", "low"]
Impact = Literal["widespread", "moderate", "localized"]
Frequency = Literal["always", "often", "rare"]
FixCost = Literal["low", "medium", "high"]

# Fixed processing order; also the tie-break basis for prioritization.
CATEGORIES: List[str] = ["security", "performance", "docs", "debt"]
SEVERITIES: List[str] = ["critical", "high", "medium", "low"]


class Finding(BaseModel):
	model_config = ConfigDict(frozen=True)

	category: Category
	title: str
	description: str = ""
	recommendation: str = ""
	severity: Optional[Severity] = None
	impact: Optional[Impact] = None
	frequency: Optional[Frequency] = None
	fix_cost: Optional[FixCost] = None
	files: Tuple[str, ...] = ()
	file: Optional[str] = None
	subcategory: Optional[str] = None
	line: Optional[int] = None
	snippet: Optional[str] = None

	@model_validator(mode="after")
	def _require_location(self) -> "Finding":
		if not self.files and not self.file:
			raise ValueError("finding must reference at least one file")
		return self

	def affected_files(self) -> List[str]:
		if self.files:
			return list(self.files)
		return [self.file]  # type: ignore[list-item]


class FindingStore(BaseModel):
	"""Per-category findings of one engine instance.

	Stores are values: ``replace`` hands back a new store with one bucket
	swapped out, leaving the original untouched.
	"""

	model_config = ConfigDict(frozen=True)

	security: Tuple[Finding, ...] = ()
	performance: Tuple[Finding, ...] = ()
	docs: Tuple[Finding, ...] = ()
	debt: Tuple[Finding, ...] = ()

	def bucket(self, category: str) -> List[Finding]:
		if category not in CATEGORIES:
			raise KeyError(category)
		return list(getattr(self, category))

	def replace(self, category: str, findings: Sequence[Finding]) -> "FindingStore":
		if category not in CATEGORIES:
			raise KeyError(category)
		return self.model_copy(update={category: tuple(findings)})

	def flatten(self) -> List[Finding]:
		flat: List[Finding] = []
		for category in CATEGORIES:
			flat.extend(getattr(self, category))
		return flat

	def counts(self) -> Dict[str, int]:
		return {category: len(getattr(self, category)) for category in CATEGORIES}


class Suggestion(BaseModel):
	title: str
	category: Category
	severity: Optional[Severity] = None
	impact: Optional[Impact] = None
	priority: float
	description: str = ""
	recommendation: str = ""
	files: List[str]
	effort: str


class Summary(BaseModel):
	total: int
	by_category: Dict[str, int]
	by_severity: Dict[str, int]


class IdeationResult(BaseModel):
	file_count: int
	findings: FindingStore
	suggestions: List[Suggestion]


class Report(BaseModel):
	generated_at: str
	project_root: str
	summary: Summary
	findings: FindingStore
	suggestions: List[Suggestion]
