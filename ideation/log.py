from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
	"""Attach a single stderr handler to the package logger."""
	logger = logging.getLogger("ideation")
	logger.setLevel(level)
	# Avoid stacking handlers when called more than once.
	if not logger.handlers:
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
		logger.addHandler(handler)
	for handler in logger.handlers:
		handler.setLevel(level)
	return logger
