from __future__ import annotations

import json
import os
from typing import Dict, List, Sequence

from ..model import Finding
from .base import BaseAnalyzer, compile_rules, is_code_file, is_test_file


RULES = {
	"hardcoded_secrets": [
		(r"(password|passwd|pwd)\s*=\s*['\"][^'\"]+['\"]", "critical"),
		(r"(api[_-]?key|apikey)\s*=\s*['\"][^'\"]+['\"]", "critical"),
		(r"(secret|token)\s*=\s*['\"][^'\"]+['\"]", "critical"),
		(r"-----BEGIN (RSA |DSA |EC )?PRIVATE KEY-----", "critical"),
	],
	"sql_injection": [
		(r"(query|execute)\([^)]*\+[^)]*\)", "high"),
		(r"execute\(\s*f['\"]", "high"),
		(r"sql\s*=\s*['\"`][^'\"`]*\$\{[^}]+\}", "high"),
	],
	"xss": [
		(r"innerHTML\s*=", "high"),
		(r"dangerouslySetInnerHTML", "medium"),
		(r"document\.write\(", "medium"),
		(r"\bmark_safe\(", "medium"),
	],
	"unsafe_eval": [
		(r"\beval\(", "high"),
		(r"(?<![.\w])exec\(", "high"),
		(r"new Function\(", "medium"),
	],
	"shell_injection": [
		(r"shell\s*=\s*True", "high"),
		(r"\bos\.system\(", "medium"),
	],
	"unsafe_deserialization": [
		(r"\bpickle\.loads?\(", "high"),
		(r"\byaml\.load\((?!.*Loader)", "medium"),
	],
	"insecure_random": [
		(r"Math\.random\(\)", "medium"),
	],
}

TITLES: Dict[str, str] = {
	"hardcoded_secrets": "Hardcoded secret detected",
	"sql_injection": "Potential SQL injection vulnerability",
	"xss": "Potential XSS vulnerability",
	"unsafe_eval": "Unsafe code execution detected",
	"shell_injection": "Shell command built from a string",
	"unsafe_deserialization": "Unsafe deserialization",
	"insecure_random": "Insecure random number generation",
}

RECOMMENDATIONS: Dict[str, str] = {
	"hardcoded_secrets": "Move secrets to environment variables or a secrets manager and rotate the exposed value",
	"sql_injection": "Use parameterized queries or an ORM instead of building SQL from strings",
	"xss": "Escape user input and prefer safe APIs such as textContent over raw HTML sinks",
	"unsafe_eval": "Remove dynamic code execution; parse data with a real parser instead",
	"shell_injection": "Pass an argument list to subprocess without shell=True",
	"unsafe_deserialization": "Only deserialize trusted data; use json or yaml.safe_load",
	"insecure_random": "Use a cryptographically secure generator (crypto.getRandomValues, secrets)",
}

DEPRECATED_PACKAGES: Dict[str, str] = {
	"request": "Deprecated and unmaintained",
	"node-uuid": "Deprecated, use uuid instead",
}


class SecurityAnalyzer(BaseAnalyzer):
	"""Secrets, injection sinks, dynamic execution and deprecated dependencies."""

	category = "security"

	def __init__(self, project_root: str):
		super().__init__(project_root)
		self.patterns = compile_rules(RULES)

	def analyze(self, files: Sequence[str]) -> List[Finding]:
		findings: List[Finding] = []
		for path in files:
			if not is_code_file(path) or is_test_file(path):
				continue
			text = self.read_text(path)
			if text is None:
				continue
			findings.extend(self.scan_lines(path, text, self.patterns, frequency="often", fix_cost="low"))
		findings.extend(self.check_dependencies(files))
		return findings

	def check_dependencies(self, files: Sequence[str]) -> List[Finding]:
		findings: List[Finding] = []
		for path in files:
			if os.path.basename(path) != "package.json":
				continue
			text = self.read_text(path)
			if text is None:
				continue
			try:
				pkg = json.loads(text)
			except ValueError:
				continue
			if not isinstance(pkg, dict):
				continue
			deps: Dict[str, str] = {}
			deps.update(pkg.get("dependencies") or {})
			deps.update(pkg.get("devDependencies") or {})
			for name in deps:
				reason = DEPRECATED_PACKAGES.get(name)
				if reason is None:
					continue
				findings.append(
					self.finding(
						path,
						subcategory="Vulnerable Dependencies",
						severity="medium",
						impact="moderate",
						frequency="often",
						fix_cost="low",
						title=f"Vulnerable dependency: {name}",
						description=f"Package '{name}' is known to be vulnerable or deprecated: {reason}",
						recommendation="Update to a secure alternative or latest version",
					)
				)
		return findings

	def title(self, rule: str) -> str:
		return TITLES.get(rule, "Security issue detected")

	def description(self, rule: str, match: str) -> str:
		if rule == "hardcoded_secrets":
			return f'Hardcoded credential detected: "{match}". Secrets should never be committed to source code.'
		return f"{TITLES.get(rule, 'Security issue')}: `{match}`"

	def recommendation(self, rule: str) -> str:
		return RECOMMENDATIONS.get(rule, "Review and fix security issue")
