"""Reference extraction for stylesheets, JSON documents and HTML pages.

These formats carry no functions or calls; only dependencies, a data-flow
section of their own and a few I/O touchpoints are reported.
"""

from __future__ import annotations

import json
import re
from typing import Any, List, Set

from .errors import ParseFailure
from .model import SourceFacts
from .serializer import labeled

MAX_JSON_REFERENCE_DEPTH = 5
MAX_JSON_KEY_DEPTH = 2
JSON_KEY_PREVIEW = 6

CSS_IMPORT_RE = re.compile(r"""@import\s+(?:url\()?['"]([^'"]+)['"]\)?""", re.IGNORECASE)
CSS_URL_RE = re.compile(r"""url\(\s*['"]?([^)'"]+)['"]?\s*\)""", re.IGNORECASE)
CSS_CUSTOM_PROPERTY_RE = re.compile(r"--([a-z0-9-_]+)", re.IGNORECASE)

HTML_SCRIPT_RE = re.compile(r"""<script\b[^>]*src\s*=\s*["']([^"']+)["'][^>]*>""", re.IGNORECASE)
HTML_LINK_RE = re.compile(r"""<link\b[^>]*href\s*=\s*["']([^"']+)["'][^>]*>""", re.IGNORECASE)
HTML_IMG_RE = re.compile(r"""<img\b[^>]*src\s*=\s*["']([^"']+)["'][^>]*>""", re.IGNORECASE)
HTML_DATA_IMPORT_RE = re.compile(r"""data-(?:module|import)=\s*["']([^"']+)["']""", re.IGNORECASE)
HTML_ID_RE = re.compile(r"""\bid\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
HTML_CLASS_RE = re.compile(r"""\bclass\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
HTML_EVENT_ATTR_RE = re.compile(r"""\son([a-zA-Z]+)\s*=\s*["'][^"']*["']""", re.IGNORECASE)
HTML_FORM_RE = re.compile(r"""<form\b[^>]*?\b(?:id|name)=["']([^"']+)["']""", re.IGNORECASE)
HTML_INPUT_TAG_RE = re.compile(r"<input\b[^>]*>", re.IGNORECASE)
HTML_TYPE_ATTR_RE = re.compile(r"""\btype=["']([^"']+)["']""", re.IGNORECASE)
HTML_BUTTON_RE = re.compile(r"""<button\b[^>]*?\b(?:id|class)=["']([^"']+)["']""", re.IGNORECASE)
HTML_SELECT_RE = re.compile(r"""<select\b[^>]*?\b(?:id|name)=["']([^"']+)["']""", re.IGNORECASE)
HTML_UI_RE = re.compile(r"<(canvas|svg|video|sp-[a-z0-9-]+)\b", re.IGNORECASE)
HTML_HANDLER_RE = re.compile(r"\bon(?:load|error|submit|click|change|keydown|keyup)\s*=", re.IGNORECASE)
HTML_SCRIPT_TAG_RE = re.compile(r"<script\b", re.IGNORECASE)

REFERENCE_PREFIX_RE = re.compile(r"^(?:\./|\.\./|/)")
REFERENCE_EXTENSION_RE = re.compile(r"\.(?:js|jsx|mjs|cjs|json|css|html)$", re.IGNORECASE)


def _matches(pattern: re.Pattern, text: str) -> List[str]:
	return [match.group(1) for match in pattern.finditer(text)]


def is_likely_reference(value: str, anchors: bool = False) -> bool:
	"""Relative/absolute paths and known file extensions; ``#``/``@`` too with ``anchors``."""
	if REFERENCE_PREFIX_RE.match(value) or REFERENCE_EXTENSION_RE.search(value):
		return True
	return anchors and value.startswith(("#", "@"))


def json_references(value: Any, anchors: bool = False, depth: int = 0) -> Set[str]:
	found: Set[str] = set()
	if depth > MAX_JSON_REFERENCE_DEPTH:
		return found
	if isinstance(value, list):
		for item in value:
			found |= json_references(item, anchors, depth + 1)
	elif isinstance(value, dict):
		for item in value.values():
			found |= json_references(item, anchors, depth + 1)
	elif isinstance(value, str) and is_likely_reference(value, anchors):
		found.add(value)
	return found


def json_config_keys(value: Any, depth: int = 0) -> Set[str]:
	keys: Set[str] = set()
	if depth > MAX_JSON_KEY_DEPTH:
		return keys
	if isinstance(value, list):
		keys.add(f"CONFIG:Array(length={len(value)})")
		for item in value:
			keys |= json_config_keys(item, depth + 1)
	elif isinstance(value, dict):
		for key, item in value.items():
			keys.add(f"CONFIG:{key}")
			keys |= json_config_keys(item, depth + 1)
	return keys


def json_root_type(value: Any) -> str:
	if isinstance(value, list):
		return "array"
	if isinstance(value, bool):
		return "boolean"
	if isinstance(value, (int, float)):
		return "number"
	if isinstance(value, str):
		return "string"
	return "object"


class CssAnalyzer:
	language = "css"

	def collect(self, path: str, text: str) -> SourceFacts:
		facts = SourceFacts()
		imports = _matches(CSS_IMPORT_RE, text)
		assets = [url for url in _matches(CSS_URL_RE, text) if not url.startswith("data:")]
		properties = _matches(CSS_CUSTOM_PROPERTY_RE, text)

		facts.dependencies.update(imports)
		facts.dependencies.update(assets)
		facts.inputs.update(f"FILE:@import({name})" for name in imports)
		facts.inputs.update(f"FILE:url({name})" for name in assets)

		section = facts.data_flow.css
		if imports:
			section.add(labeled("imports", imports))
		if assets:
			section.add(labeled("assets", assets))
		if properties:
			section.add(labeled("customProps", properties))
		section.add(f"rules={text.count('{')}")
		return facts


class JsonAnalyzer:
	language = "json"

	def collect(self, path: str, text: str) -> SourceFacts:
		try:
			data = json.loads(text)
		except ValueError as exc:
			raise ParseFailure(f"invalid JSON: {exc}", path)
		facts = SourceFacts()
		facts.dependencies.update(json_references(data))
		facts.inputs.update(json_config_keys(data))

		section = facts.data_flow.json
		section.add(f"root={json_root_type(data)}")
		if isinstance(data, dict) and data:
			section.add(labeled("keys", list(data)[:JSON_KEY_PREVIEW]))
		refs = json_references(data, anchors=True)
		if refs:
			section.add(labeled("refs", refs))
		return facts


class HtmlAnalyzer:
	language = "html"

	def collect(self, path: str, text: str) -> SourceFacts:
		facts = SourceFacts()
		scripts = _matches(HTML_SCRIPT_RE, text)
		links = _matches(HTML_LINK_RE, text)
		facts.dependencies.update(scripts)
		facts.dependencies.update(links)
		facts.dependencies.update(_matches(HTML_IMG_RE, text))
		facts.dependencies.update(_matches(HTML_DATA_IMPORT_RE, text))

		ids = _matches(HTML_ID_RE, text)
		classes = [token for value in _matches(HTML_CLASS_RE, text) for token in value.split()]
		events = [name.lower() for name in _matches(HTML_EVENT_ATTR_RE, text)]
		section = facts.data_flow.html
		for label, values in (("ids", ids), ("classes", classes), ("scripts", scripts), ("assets", links), ("events", events)):
			if values:
				section.add(labeled(label, values))

		facts.inputs.update(f"USER:form#{name}" for name in _matches(HTML_FORM_RE, text))
		for tag in HTML_INPUT_TAG_RE.finditer(text):
			kind = HTML_TYPE_ATTR_RE.search(tag.group(0))
			facts.inputs.add(f"USER:input[type={kind.group(1) if kind else 'text'}]")
		facts.inputs.update(f"USER:button({name})" for name in _matches(HTML_BUTTON_RE, text))
		facts.inputs.update(f"USER:select({name})" for name in _matches(HTML_SELECT_RE, text))
		facts.outputs.update(f"UI:<{name}>" for name in _matches(HTML_UI_RE, text))

		effects: Set[str] = set()
		if HTML_HANDLER_RE.search(text):
			effects.add("DOM:event-handlers")
		if HTML_SCRIPT_TAG_RE.search(text):
			effects.add("DOM:script")
		# pages without handlers or scripts are reported as not analyzed
		facts.side_effects = effects or None
		return facts
