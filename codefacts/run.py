from __future__ import annotations

import logging
import subprocess
import threading
from typing import Any, Callable, Dict, Optional

from .config import Settings, get_settings
from .errors import InterpreterNotFound
from .model import SourceFacts

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 10.0


def probe_interpreter(command: str, timeout: Optional[float] = PROBE_TIMEOUT) -> bool:
	"""Return True when ``command -c "import sys"`` exits cleanly."""
	try:
		completed = subprocess.run(
			[command, "-c", "import sys"],
			stdin=subprocess.DEVNULL,
			stdout=subprocess.DEVNULL,
			stderr=subprocess.DEVNULL,
			timeout=timeout,
		)
	except (OSError, subprocess.SubprocessError) as exc:
		logger.debug("Interpreter candidate %s unusable: %s", command, exc)
		return False
	return completed.returncode == 0


class AnalysisRun:
	"""State shared by every file analyzed in one batch.

	Holds the resolved interpreter, the per-path Python results and the front
	end instances. Use it as a context manager; the caches are dropped on
	exit.
	"""

	def __init__(self, settings: Optional[Settings] = None, probe: Callable[..., bool] = probe_interpreter):
		self.settings = settings or get_settings()
		self.probe = probe
		self.results: Dict[str, SourceFacts] = {}
		self.front_ends: Dict[str, Any] = {}
		self._lock = threading.Lock()
		self._interpreter: Optional[str] = None
		self._interpreter_error: Optional[InterpreterNotFound] = None

	def __enter__(self) -> AnalysisRun:
		return self

	def __exit__(self, exc_type, exc, tb) -> None:
		self.clear()

	def clear(self) -> None:
		with self._lock:
			self.results.clear()
			self.front_ends.clear()
			self._interpreter = None
			self._interpreter_error = None

	def interpreter(self) -> str:
		"""Resolve the Python interpreter once per run.

		A failed search is remembered too, so later files fail fast with the
		same error instead of probing again.
		"""
		with self._lock:
			if self._interpreter is not None:
				return self._interpreter
			if self._interpreter_error is not None:
				raise self._interpreter_error
			candidates = list(self.settings.python_candidates)
			for candidate in candidates:
				if self.probe(candidate, PROBE_TIMEOUT):
					logger.info("Using Python interpreter %s", candidate)
					self._interpreter = candidate
					return candidate
			self._interpreter_error = InterpreterNotFound(candidates)
			raise self._interpreter_error

	def front_end(self, language: str, factory: Callable[[AnalysisRun], Any]) -> Any:
		with self._lock:
			analyzer = self.front_ends.get(language)
			if analyzer is None:
				analyzer = factory(self)
				self.front_ends[language] = analyzer
			return analyzer
