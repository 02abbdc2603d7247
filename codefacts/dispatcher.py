from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Optional

from .csharp import CSharpAnalyzer
from .errors import AnalysisError, FileUnreadable
from .fs_scan import normalize_language, scan_repository
from .javascript import JavaScriptAnalyzer
from .markup import CssAnalyzer, HtmlAnalyzer, JsonAnalyzer
from .model import AnalysisResult, SourceFacts, SourceUnit, TreeAnalysis
from .outofprocess import PythonAnalyzer
from .run import AnalysisRun
from .serializer import to_result

logger = logging.getLogger(__name__)

FRONT_ENDS: Dict[str, Callable[[AnalysisRun], Any]] = {
	"javascript": lambda run: JavaScriptAnalyzer(),
	"csharp": lambda run: CSharpAnalyzer(),
	"python": PythonAnalyzer,
	"css": lambda run: CssAnalyzer(),
	"json": lambda run: JsonAnalyzer(),
	"html": lambda run: HtmlAnalyzer(),
}


def supported_languages():
	return sorted(FRONT_ENDS)


def dispatch(path: str, text: str, language: Optional[str], run: AnalysisRun) -> AnalysisResult:
	"""Analyze one source unit.

	Per-file problems never raise: the result comes back with empty facets
	and the problem in ``diagnostic``.
	"""
	unit = SourceUnit(path=path, language=normalize_language(language, path), text=text)
	factory = FRONT_ENDS.get(unit.language)
	if factory is None:
		logger.debug("No front end for %s (%s)", unit.path, unit.language)
		return to_result(unit.path, unit.language, SourceFacts.empty(), f"unsupported language: {unit.language}")

	analyzer = run.front_end(unit.language, factory)
	try:
		facts = analyzer.collect(unit.path, unit.text)
	except AnalysisError as exc:
		logger.warning("Analysis of %s failed: %s", unit.path, exc)
		return to_result(unit.path, unit.language, SourceFacts.empty(), str(exc))
	return to_result(unit.path, unit.language, facts)


def read_source(path: str) -> str:
	try:
		with open(path, "r", encoding="utf-8", errors="replace") as fh:
			text = fh.read()
	except OSError as exc:
		raise FileUnreadable(exc.strerror or str(exc), path)
	return text.lstrip("\ufeff")


def analyze_path(path: str, run: AnalysisRun, language: Optional[str] = None) -> AnalysisResult:
	tag = normalize_language(language, path)
	try:
		text = read_source(path)
	except FileUnreadable as exc:
		logger.warning("Skipping %s", exc)
		return to_result(path, tag, SourceFacts.empty(), str(exc))
	return dispatch(path, text, tag, run)


def analyze_tree(root: str, run: AnalysisRun) -> TreeAnalysis:
	root = os.path.abspath(root)
	files = scan_repository(root, run.settings.ignore_dirs)
	logger.info("Analyzing %d files under %s", len(files), root)
	results = [analyze_path(f.path, run, f.language) for f in files]
	return TreeAnalysis(root=root, files=files, results=results)
