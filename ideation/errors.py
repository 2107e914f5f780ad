"""Error taxonomy for the ideation engine."""

from __future__ import annotations

from typing import Optional


class IdeationError(Exception):
	"""Base error; carries the failing operation and category, if any."""

	def __init__(self, message: str, operation: str, category: Optional[str] = None):
		super().__init__(message)
		self.operation = operation
		self.category = category

	def __str__(self) -> str:
		context = self.operation
		if self.category:
			context = f"{context}[{self.category}]"
		return f"{context}: {self.args[0]}"


class DiscoveryError(IdeationError):
	"""Project root is missing, not a directory, or unreadable."""

	def __init__(self, message: str):
		super().__init__(message, operation="discover")


class AnalyzerError(IdeationError):
	"""An analyzer returned findings that break its contract."""


class ReportWriteError(IdeationError):
	"""Rendered report could not be persisted."""

	def __init__(self, message: str, path: str):
		super().__init__(message, operation="generate_report")
		self.path = path


class ConfigError(IdeationError):
	def __init__(self, message: str):
		super().__init__(message, operation="load_config")
