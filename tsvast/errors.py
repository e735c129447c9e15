from __future__ import annotations


class TsVastError(Exception):
	"""Base class for errors raised by the summarizer."""


class ConfigError(TsVastError):
	"""A tsconfig file exists but cannot be read or understood."""

	def __init__(self, path: str, reason: str):
		super().__init__(f"{path}: {reason}")
		self.path = path
		self.reason = reason
