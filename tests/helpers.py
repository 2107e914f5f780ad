from typing import List, Sequence

from ideation.model import Finding


def make_finding(category: str = "security", title: str = "issue", **fields) -> Finding:
	if "files" not in fields and "file" not in fields:
		fields["files"] = ["a.py"]
	return Finding(category=category, title=title, **fields)


class StubAnalyzer:
	"""Returns queued outputs, one per call, and records the files it saw."""

	def __init__(self, *outputs: List[Finding]):
		self.outputs = list(outputs) or [[]]
		self.calls: List[List[str]] = []

	def analyze(self, files: Sequence[str]) -> List[Finding]:
		self.calls.append(list(files))
		if len(self.outputs) > 1:
			return self.outputs.pop(0)
		return self.outputs[0]


class FailingAnalyzer:
	def analyze(self, files: Sequence[str]) -> List[Finding]:
		raise RuntimeError("analyzer exploded")
