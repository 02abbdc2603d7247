from __future__ import annotations

import json
import logging
import os
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from . import pyvisitor
from .errors import ParseFailure, SubprocessFailure
from .model import DataFlowFacts, SourceFacts
from .run import AnalysisRun

logger = logging.getLogger(__name__)

VISITOR_PATH = Path(__file__).with_name("pyvisitor.py")


@lru_cache(maxsize=1)
def visitor_source() -> str:
	return VISITOR_PATH.read_text(encoding="utf-8")


class VisitorService:
	"""Runs the Python fact visitor and returns its JSON payload."""

	def visit(self, path: str, text: str) -> Dict[str, Any]:
		raise NotImplementedError


class SubprocessVisitor(VisitorService):
	"""Runs the visitor in a child interpreter, one process per file."""

	def __init__(self, run: AnalysisRun, program: Optional[str] = None):
		self.run = run
		self.program = program

	def visit(self, path: str, text: str) -> Dict[str, Any]:
		argv = [self.run.interpreter(), "-c", self.program or visitor_source(), path]
		timeout = self.run.settings.subprocess_timeout
		try:
			completed = subprocess.run(
				argv,
				input=text,
				capture_output=True,
				text=True,
				encoding="utf-8",
				errors="replace",
				timeout=timeout,
			)
		except subprocess.TimeoutExpired:
			raise SubprocessFailure(f"Python analyzer timed out after {timeout}s", path)
		except OSError as exc:
			raise SubprocessFailure(f"Unable to start Python analyzer: {exc}", path)

		if completed.returncode != 0:
			raise SubprocessFailure(
				f"Python analyzer failed with exit code {completed.returncode}: {completed.stderr.strip()}",
				path,
			)
		try:
			payload = json.loads(completed.stdout or "{}")
		except json.JSONDecodeError as exc:
			raise SubprocessFailure(f"Unable to parse Python analyzer output: {exc}", path)
		if not isinstance(payload, dict):
			raise SubprocessFailure("Python analyzer output is not a JSON object", path)
		return payload


class InProcessVisitor(VisitorService):
	"""Runs the visitor inside the current interpreter."""

	def visit(self, path: str, text: str) -> Dict[str, Any]:
		return pyvisitor.visit_source(text, path)


def _strings(values: Any) -> Iterable[str]:
	if not isinstance(values, list):
		return []
	return [value for value in values if isinstance(value, str)]


def facts_from_payload(payload: Dict[str, Any]) -> SourceFacts:
	facts = SourceFacts(side_effects=set())
	facts.functions.update(_strings(payload.get("functions")))
	facts.call_order.extend(_strings(payload.get("call_order")))
	facts.dependencies.update(_strings(payload.get("dependencies")))

	known = set(DataFlowFacts.field_names())
	data_flow = payload.get("data_flow")
	if isinstance(data_flow, dict):
		for name, values in data_flow.items():
			if name in known:
				getattr(facts.data_flow, name).update(_strings(values))
			else:
				logger.debug("Ignoring unknown data flow field %s", name)

	io_summary = payload.get("io_summary")
	if isinstance(io_summary, dict):
		facts.inputs.update(_strings(io_summary.get("inputs")))
		facts.outputs.update(_strings(io_summary.get("outputs")))
	facts.side_effects.update(_strings(payload.get("side_effects")))
	return facts


class PythonAnalyzer:
	"""Python front end backed by the fact visitor.

	Successful results are cached on the run by absolute path. Failures are
	not cached and are raised per file.
	"""

	language = "python"

	def __init__(self, run: AnalysisRun, visitor: Optional[VisitorService] = None):
		self.run = run
		self.visitor = visitor or SubprocessVisitor(run)

	def collect(self, path: str, text: str) -> SourceFacts:
		key = os.path.abspath(path)
		cached = self.run.results.get(key)
		if cached is not None:
			logger.debug("Reusing Python analysis of %s", key)
			return cached
		payload = self.visitor.visit(key, text)
		error = payload.get("error")
		if error:
			raise ParseFailure(str(error), path)
		facts = facts_from_payload(payload)
		self.run.results[key] = facts
		return facts

	analyze = collect
