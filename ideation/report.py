"""Markdown and JSON insights reports."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Dict, List, Protocol, Sequence

from jinja2 import Environment, StrictUndefined

from .model import SEVERITIES, FindingStore, Report, Suggestion
from .summarize import summarize_findings


FORMATS = ("markdown", "json")

SECTION_TITLES = [
	("security", "Security Vulnerabilities"),
	("performance", "Performance Bottlenecks"),
	("docs", "Documentation Gaps"),
	("debt", "Technical Debt"),
]

SEVERITY_ICONS: Dict[str, str] = {"critical": "🔴", "high": "🟠", "medium": "🟡", "low": "🟢"}

TOP_ISSUES = 10
PER_SEVERITY = 5

MARKDOWN_TEMPLATE = """\
# Project Insights Report: {{ project_name }}

**Generated:** {{ generated_at }}
**Project:** {{ project_root }}

---

## Executive Summary

**Total Issues Found:** {{ summary.total }}

**By Severity:**
{% for severity in severities %}
- {{ icons[severity] }} {{ severity | capitalize }}: {{ summary.by_severity[severity] }}
{% endfor %}

**By Category:**
- 🔒 Security: {{ summary.by_category.security }}
- ⚡ Performance: {{ summary.by_category.performance }}
- 📚 Documentation: {{ summary.by_category.docs }}
- 🔧 Technical Debt: {{ summary.by_category.debt }}

---

## Critical Issues

{% if critical %}
{% for item in critical %}
### {{ loop.index }}. {{ icons[item.severity] }} {{ item.title }}

**Category:** {{ item.category | capitalize }} - {{ item.severity }}
**Impact:** {{ item.impact or "unknown" }} | **Effort:** {{ item.effort }}

**Description:**
{{ item.description }}

**Recommendation:**
{{ item.recommendation }}

**Affected Files:**
{% for f in item.files %}
- `{{ f | rel }}`
{% endfor %}

{% endfor %}
{% else %}
✅ **No critical issues found!**

{% endif %}
---
{% for section in sections %}

## {{ section.title }}

{% if section.total %}
**Total:** {{ section.total }} issue{{ "" if section.total == 1 else "s" }}
{% for group in section.groups %}

### {{ icons[group.severity] }} {{ group.severity | capitalize }} ({{ group.count }})
{% for item in group.shown %}

**{{ item.title }}**
`{{ item | location }}`

{{ item.description }}

*Recommendation:* {{ item.recommendation }}
{% endfor %}
{% if group.count > group.shown | length %}

*...and {{ group.count - group.shown | length }} more {{ group.severity }} issues*
{% endif %}
{% endfor %}
{% else %}
✅ No issues found in this category.
{% endif %}

---
{% endfor %}

## Top Recommendations

{% for item in top %}
{{ loop.index }}. **{{ item.title }}** (Priority: {{ item.priority | round(1) }})
   - Category: {{ item.category }}
   - Severity: {{ item.severity or "unrated" }}
   - Effort: {{ item.effort }}
   - {{ item.recommendation }}

{% endfor %}
---

## Next Steps

1. **Address Critical Issues First:** Focus on security and high-impact performance issues
2. **Plan Technical Debt Cleanup:** Schedule time for refactoring and documentation
3. **Run Regularly:** Use `ideate analyze` periodically to track progress
4. **Track Metrics:** Monitor issue count over time to measure improvement
"""


class ReportRenderer(Protocol):
	def render(self, findings: FindingStore, suggestions: Sequence[Suggestion], fmt: str = "markdown") -> str:
		...


class InsightsReporter:
	def __init__(self, project_root: str):
		self.project_root = os.path.abspath(project_root)
		self.env = Environment(trim_blocks=True, lstrip_blocks=True, undefined=StrictUndefined)
		self.env.filters["rel"] = self._relative
		self.env.filters["location"] = self._location
		self.template = self.env.from_string(MARKDOWN_TEMPLATE)

	def render(self, findings: FindingStore, suggestions: Sequence[Suggestion], fmt: str = "markdown") -> str:
		if fmt == "json":
			return self.to_json(findings, suggestions)
		if fmt == "markdown":
			return self.to_markdown(findings, suggestions)
		raise ValueError(f"Unsupported report format: {fmt!r} (expected one of {', '.join(FORMATS)})")

	def build(self, findings: FindingStore, suggestions: Sequence[Suggestion]) -> Report:
		return Report(
			generated_at=datetime.now(timezone.utc).isoformat(),
			project_root=self.project_root,
			summary=summarize_findings(findings),
			findings=findings,
			suggestions=list(suggestions),
		)

	def to_json(self, findings: FindingStore, suggestions: Sequence[Suggestion]) -> str:
		return self.build(findings, suggestions).model_dump_json(indent=2)

	def to_markdown(self, findings: FindingStore, suggestions: Sequence[Suggestion]) -> str:
		report = self.build(findings, suggestions)
		critical = [s for s in suggestions if s.severity in ("critical", "high")][:TOP_ISSUES]
		return self.template.render(
			project_name=os.path.basename(self.project_root) or self.project_root,
			project_root=self.project_root,
			generated_at=report.generated_at,
			summary=report.summary,
			severities=SEVERITIES,
			icons=SEVERITY_ICONS,
			critical=critical,
			sections=self._sections(findings),
			top=list(suggestions)[:TOP_ISSUES],
		)

	def _sections(self, findings: FindingStore) -> List[dict]:
		sections = []
		for category, title in SECTION_TITLES:
			bucket = findings.bucket(category)
			groups = []
			for severity in SEVERITIES:
				items = [f for f in bucket if (f.severity or "low") == severity]
				if items:
					groups.append({"severity": severity, "count": len(items), "shown": items[:PER_SEVERITY]})
			sections.append({"title": title, "total": len(bucket), "groups": groups})
		return sections

	def _relative(self, path: str) -> str:
		return os.path.relpath(path, self.project_root)

	def _location(self, finding) -> str:
		location = self._relative(finding.affected_files()[0])
		if finding.line:
			location = f"{location}:{finding.line}"
		return location
