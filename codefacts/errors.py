from __future__ import annotations

from typing import Optional


class AnalysisError(Exception):
	"""Base class for failures raised by the analyzers."""

	def __init__(self, message: str, path: Optional[str] = None):
		super().__init__(message)
		self.path = path

	def __str__(self) -> str:
		message = super().__str__()
		if self.path:
			return f"{self.path}: {message}"
		return message


class ParseFailure(AnalysisError):
	pass


class HeuristicBoundExceeded(AnalysisError):
	def __init__(self, bound: str, limit: int):
		super().__init__(f"{bound} limit of {limit} reached")
		self.bound = bound
		self.limit = limit


class InterpreterNotFound(AnalysisError):
	def __init__(self, candidates):
		joined = ", ".join(candidates) or "<none>"
		super().__init__(
			f"Unable to locate a Python interpreter ({joined}). "
			"Python support is required to analyze .py files."
		)
		self.candidates = list(candidates)


class SubprocessFailure(AnalysisError):
	pass


class FileUnreadable(AnalysisError):
	pass
