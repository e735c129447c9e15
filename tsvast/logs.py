from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO


LOGGER_NAME = "tsvast"
CONSOLE_FORMAT = "%(levelname)s | %(name)s | %(message)s"

_HANDLER_TAG = "_tsvast_handler"


def configure_logging(debug: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
	"""Attach a single stderr handler to the package logger.

	Calling this again replaces the previous handler instead of stacking a
	new one, so tests and repeated CLI runs in one process stay quiet.
	"""
	logger = logging.getLogger(LOGGER_NAME)
	for handler in list(logger.handlers):
		if getattr(handler, _HANDLER_TAG, False):
			logger.removeHandler(handler)

	handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
	handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
	setattr(handler, _HANDLER_TAG, True)
	logger.addHandler(handler)
	logger.setLevel(logging.DEBUG if debug else logging.WARNING)
	logger.propagate = False
	return logger
