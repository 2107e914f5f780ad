"""Configuration: focus filter, discovery limits, ignore globs."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError
from .model import CATEGORIES

logger = logging.getLogger(__name__)


DEFAULT_MAX_FILES = 1000

DEFAULT_IGNORE_PATTERNS: Tuple[str, ...] = (
	"**/node_modules/**",
	"**/.git/**",
	"**/dist/**",
	"**/build/**",
	"**/coverage/**",
	"**/.worktrees/**",
	"**/.next/**",
	"**/vendor/**",
	"**/__pycache__/**",
	"**/.venv/**",
	"**/venv/**",
)


class IdeationConfig(BaseModel):
	model_config = ConfigDict(frozen=True)

	focus: Optional[str] = None
	max_files: int = Field(default=DEFAULT_MAX_FILES, gt=0)
	ignore_patterns: Tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
	workers: int = Field(default=1, gt=0)

	@field_validator("focus", mode="before")
	@classmethod
	def _normalize_focus(cls, value: Any) -> Optional[str]:
		# Anything that is not a known category means "all categories".
		if value is None:
			return None
		focus = str(value).strip().lower()
		if focus in CATEGORIES:
			return focus
		if focus and focus != "all":
			logger.warning("Unrecognized focus %r, analyzing all categories", value)
		return None

	def selects(self, category: str) -> bool:
		return self.focus is None or self.focus == category


def _env_int(name: str) -> Optional[int]:
	raw = os.environ.get(name, "").strip()
	if not raw:
		return None
	try:
		return int(raw)
	except ValueError:
		raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def load_config(extra_ignore: Optional[Sequence[str]] = None, **overrides: Any) -> IdeationConfig:
	"""Build a config from IDEATION_* environment variables.

	IDEATION_FOCUS, IDEATION_MAX_FILES and IDEATION_WORKERS map directly to
	fields. Globs from IDEATION_IGNORE (semicolon-separated) and from
	``extra_ignore`` are appended to the ignore patterns; only an explicit
	``ignore_patterns`` override replaces the defaults. Keyword overrides
	that are not None win over the environment.
	"""
	values: dict = {}

	focus = os.environ.get("IDEATION_FOCUS", "").strip()
	if focus:
		values["focus"] = focus

	max_files = _env_int("IDEATION_MAX_FILES")
	if max_files is not None:
		values["max_files"] = max_files

	workers = _env_int("IDEATION_WORKERS")
	if workers is not None:
		values["workers"] = workers

	values.update({key: value for key, value in overrides.items() if value is not None})

	appended = [p.strip() for p in os.environ.get("IDEATION_IGNORE", "").split(";") if p.strip()]
	appended.extend(extra_ignore or [])
	if appended:
		base = values.get("ignore_patterns", DEFAULT_IGNORE_PATTERNS)
		values["ignore_patterns"] = tuple(base) + tuple(appended)

	try:
		return IdeationConfig(**values)
	except ValueError as exc:
		raise ConfigError(str(exc)) from exc
