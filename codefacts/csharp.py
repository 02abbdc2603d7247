"""Regex and state-machine heuristics for C# sources.

Nothing here builds a syntax tree. Every scan is bounded by one of the
fixed caps below so pathological input cannot make a pass run away; a cap
reached while examining one match abandons that match only.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Pattern, Sequence, Set, Tuple

from .errors import HeuristicBoundExceeded
from .model import SourceFacts
from .sanitize import strip_comments

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 500
MAX_DECLARATION_DEPTH = 5
DECLARATION_WINDOW = 200
MAX_CALL_MATCHES = 10_000
MAX_PAREN_SCAN = 50_000
MAX_DIRECTIVE_MATCHES = 5_000

SKIP_CALL_NAMES = frozenset({
	"if", "else", "for", "foreach", "while", "switch", "case", "default", "do",
	"try", "catch", "finally", "using", "lock", "checked", "unchecked", "fixed",
	"typeof", "nameof", "sizeof", "new",
})

FILE_READ_CALLS = (
	"File.ReadAllText", "File.ReadAllLines", "File.ReadAllBytes", "File.OpenRead",
	"File.OpenText", "File.Exists", "FileInfo.OpenRead", "FileStream.Read",
	"Directory.GetFiles", "Directory.GetDirectories", "Directory.EnumerateFiles",
	"Directory.EnumerateDirectories", "Directory.Exists",
)
FILE_WRITE_CALLS = (
	"File.WriteAllText", "File.WriteAllLines", "File.WriteAllBytes",
	"File.AppendAllText", "File.AppendAllLines", "File.AppendText",
	"File.OpenWrite", "File.Create", "File.CreateText", "File.Copy", "File.Move",
	"File.Delete", "FileStream.Write", "Directory.CreateDirectory",
	"Directory.Delete", "Directory.Move",
)
CONSOLE_INPUT_CALLS = ("Console.ReadLine", "Console.ReadKey", "Console.Read")
LOG_CALLS = (
	"Console.WriteLine", "Console.Write", "Console.Error.WriteLine",
	"Console.Error.Write", "Debug.WriteLine", "Debug.Write", "Trace.WriteLine",
	"Trace.Write",
)
WEBCLIENT_READ_CALLS = ("WebClient.DownloadString", "WebClient.DownloadData", "WebClient.OpenRead")
WEBCLIENT_WRITE_CALLS = ("WebClient.UploadString", "WebClient.UploadData", "WebClient.UploadValues")
HTTP_WEB_REQUEST_CALLS = ("HttpWebRequest.Create", "HttpWebRequest.GetResponse")

LOG_LEVELS = "(?:Trace|Debug|Information|Warning|Error|Critical)"
LOGGER_PATTERNS: Sequence[Tuple[Pattern[str], str]] = (
	(re.compile(rf"\bILogger\w*\s*\.\s*Log{LOG_LEVELS}?\s*\("), "ILogger.Log"),
	(re.compile(rf"\blogger\s*\.\s*Log{LOG_LEVELS}\s*\(", re.IGNORECASE), "ILogger.Log"),
)
CONFIG_PATTERNS: Sequence[Tuple[Pattern[str], str]] = (
	(re.compile(r"\bEnvironment\.GetEnvironmentVariable\s*\("), "Environment.GetEnvironmentVariable"),
	(re.compile(r"\bConfigurationManager\.[A-Za-z_]\w*"), "ConfigurationManager"),
	(re.compile(r"\bIConfiguration\s*\["), "IConfiguration[indexer]"),
	(re.compile(r"\bIOptions(?:Monitor|Snapshot)?<[A-Za-z_][A-Za-z0-9_<>,\s]*>\s*\."), "IOptions"),
)
HTTP_CLIENT_RE = re.compile(r"\b(?:HttpClient|IHttpClientFactory)\b")
HTTP_CLIENT_READS: Sequence[Tuple[Pattern[str], str]] = (
	(re.compile(r"\.\s*(?:GetAsync|GetStringAsync)\s*\("), "HttpClient.GetAsync"),
)
HTTP_CLIENT_WRITES: Sequence[Tuple[Pattern[str], str]] = tuple(
	(re.compile(rf"\.\s*{verb}\s*\("), f"HttpClient.{verb}")
	for verb in ("PostAsync", "PutAsync", "DeleteAsync", "SendAsync")
)
WEB_REQUEST_RE = re.compile(r"\b(?:WebRequest|HttpWebRequest)\b")

CLASS_RE = re.compile(r"\b(?:class|struct|record)\s+([A-Za-z_][A-Za-z0-9_]*)")
METHOD_RE = re.compile(
	r"\b(?:public|protected|internal|private|static|virtual|override|sealed|async|partial|extern|unsafe|new)\b"
	r"[\s\w<>,\[\]]*\s+([A-Za-z_][A-Za-z0-9_]*)\s*(?:<[^>]{0,100}>)?\s*\("
)
CONSTRUCTOR_RE = re.compile(r"\b(?:public|protected|internal|private)\s+([A-Za-z_][A-Za-z0-9_]*)\s*\(")
CALL_RE = re.compile(r"([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*){0,5})(?:<[^>]{0,100}>)?\s*\(")
USING_RE = re.compile(
	r"^\s*(?:global\s+)?using\s+(?:static\s+)?(?:([A-Za-z_][A-Za-z0-9_]*)\s*=\s*)?([A-Za-z_][A-Za-z0-9_.]*)\s*;",
	re.MULTILINE,
)
STATIC_FIELD_RE = re.compile(
	r"\bstatic\s+(?:readonly\s+)?[A-Za-z_][A-Za-z0-9_<>,\[\]\s?]*\s+([A-Za-z_][A-Za-z0-9_]*)\s*(?:=|;)"
)
EVENT_SUBSCRIPTION_RE = re.compile(r"([A-Za-z_][A-Za-z0-9_]*\.[A-Za-z_][A-Za-z0-9_]*)\s*\+=")


def _call_re(name: str) -> Pattern[str]:
	return re.compile(rf"\b{re.escape(name)}\s*\(")


def _bounded(matches: Iterable[re.Match], limit: int) -> Iterable[re.Match]:
	for count, match in enumerate(matches):
		if count >= limit:
			logger.debug("Stopped scanning after %d matches", limit)
			return
		yield match


def find_declaration_paren(text: str) -> int:
	"""Index of the ``)`` closing a parameter list that starts before ``text``.

	Returns -1 when the line ends first; raises when the nesting or the
	search window cap is hit.
	"""
	depth = 1
	for index, char in enumerate(text):
		if index >= DECLARATION_WINDOW:
			raise HeuristicBoundExceeded("declaration window", DECLARATION_WINDOW)
		if char == "(":
			depth += 1
			if depth > MAX_DECLARATION_DEPTH:
				raise HeuristicBoundExceeded("declaration depth", MAX_DECLARATION_DEPTH)
		elif char == ")":
			depth -= 1
			if depth == 0:
				return index
	return -1


def closing_parens(text: str) -> Dict[int, int]:
	"""Map the index of every matched ``(`` to the index of its ``)``.

	One pass with a stack. Pairs further apart than ``MAX_PAREN_SCAN``
	characters are left out, as are parens that never close.
	"""
	pairs: Dict[int, int] = {}
	stack: List[int] = []
	for index, char in enumerate(text):
		if char == "(":
			stack.append(index)
		elif char == ")" and stack:
			open_index = stack.pop()
			if index - open_index < MAX_PAREN_SCAN:
				pairs[open_index] = index
	return pairs


def _next_non_space(text: str, index: int) -> int:
	while index < len(text) and text[index].isspace():
		index += 1
	return index if index < len(text) else -1


def _previous_non_space(text: str, index: int) -> int:
	while index >= 0 and text[index].isspace():
		index -= 1
	return index


def extract_method_names(code: str) -> Set[str]:
	sanitized = strip_comments(code)
	names: Set[str] = set()
	classes = {match.group(1) for match in CLASS_RE.finditer(sanitized)}
	lines = sanitized.splitlines()
	for number, line in enumerate(lines):
		if len(line) > MAX_LINE_LENGTH:
			continue
		for match in METHOD_RE.finditer(line):
			name = match.group(1)
			if name in SKIP_CALL_NAMES:
				continue
			after = line[match.end():]
			try:
				close = find_declaration_paren(after)
			except HeuristicBoundExceeded as exc:
				logger.debug("Skipping declaration candidate %s: %s", name, exc)
				continue
			if close == -1:
				continue
			rest = after[close + 1:].strip()
			if not rest:
				# Allman braces: the body opens on the next non-blank line
				rest = next((other.strip() for other in lines[number + 1:number + 3] if other.strip()), "")
			if rest.startswith(("{", "=>")):
				names.add(name)
	for match in CONSTRUCTOR_RE.finditer(sanitized):
		if match.group(1) in classes:
			names.add(match.group(1))
	return names


def extract_call_order(code: str) -> List[str]:
	sanitized = strip_comments(code, remove_strings=True)
	pairs = closing_parens(sanitized)
	calls: List[str] = []
	for match in _bounded(CALL_RE.finditer(sanitized), MAX_CALL_MATCHES):
		name = match.group(1)
		if name.rsplit(".", 1)[-1] in SKIP_CALL_NAMES:
			continue
		close = pairs.get(match.end() - 1, -1)
		if close == -1:
			continue
		after = _next_non_space(sanitized, close + 1)
		if after != -1:
			rest = sanitized[after:after + 5]
			if rest.startswith(("{", "=>")) or rest.lower().startswith("where"):
				continue
		before = _previous_non_space(sanitized, match.start() - 1)
		if before >= 0 and sanitized[before] == "[":
			continue
		calls.append(name)
	return calls


def extract_dependencies(code: str) -> Set[str]:
	sanitized = strip_comments(code)
	dependencies: Set[str] = set()
	for match in _bounded(USING_RE.finditer(sanitized), MAX_DIRECTIVE_MATCHES):
		alias, target = match.group(1), match.group(2)
		dependencies.add(f"{alias}={target}" if alias else target)
	return dependencies


def static_fields(sanitized: str) -> Set[str]:
	return {match.group(1) for match in _bounded(STATIC_FIELD_RE.finditer(sanitized), MAX_DIRECTIVE_MATCHES)}


def event_subscriptions(sanitized: str) -> Set[str]:
	events: Set[str] = set()
	for match in _bounded(EVENT_SUBSCRIPTION_RE.finditer(sanitized), MAX_DIRECTIVE_MATCHES):
		name = match.group(1).rsplit(".", 1)[-1]
		if name:
			events.add(name)
	return events


@dataclass
class IoCategories:
	file_read: Set[str] = field(default_factory=set)
	file_write: Set[str] = field(default_factory=set)
	network_read: Set[str] = field(default_factory=set)
	network_write: Set[str] = field(default_factory=set)
	logs: Set[str] = field(default_factory=set)
	config_read: Set[str] = field(default_factory=set)
	console_read: Set[str] = field(default_factory=set)


def _collect_calls(text: str, names: Sequence[str], target: Set[str]) -> None:
	for name in names:
		if _call_re(name).search(text):
			target.add(name)


def _collect_labels(text: str, patterns: Sequence[Tuple[Pattern[str], str]], target: Set[str]) -> None:
	for pattern, label in patterns:
		if pattern.search(text):
			target.add(label)


def collect_io_categories(sanitized: str) -> IoCategories:
	categories = IoCategories()
	_collect_calls(sanitized, FILE_READ_CALLS, categories.file_read)
	_collect_calls(sanitized, FILE_WRITE_CALLS, categories.file_write)
	_collect_calls(sanitized, CONSOLE_INPUT_CALLS, categories.console_read)
	_collect_calls(sanitized, LOG_CALLS, categories.logs)
	_collect_calls(sanitized, WEBCLIENT_READ_CALLS, categories.network_read)
	_collect_calls(sanitized, WEBCLIENT_WRITE_CALLS, categories.network_write)
	_collect_calls(sanitized, HTTP_WEB_REQUEST_CALLS, categories.network_read)
	_collect_labels(sanitized, LOGGER_PATTERNS, categories.logs)
	_collect_labels(sanitized, CONFIG_PATTERNS, categories.config_read)
	if HTTP_CLIENT_RE.search(sanitized):
		_collect_labels(sanitized, HTTP_CLIENT_READS, categories.network_read)
		_collect_labels(sanitized, HTTP_CLIENT_WRITES, categories.network_write)
	if WEB_REQUEST_RE.search(sanitized):
		categories.network_read.add("HttpWebRequest.Create")
	return categories


class CSharpAnalyzer:
	"""Heuristic front end for C#; never raises on malformed input."""

	language = "csharp"

	def analyze(self, path: str, text: str) -> SourceFacts:
		sanitized = strip_comments(text, remove_strings=True)
		facts = SourceFacts(side_effects=set())
		facts.functions = extract_method_names(text)
		facts.call_order = extract_call_order(text)
		facts.dependencies = extract_dependencies(text)

		categories = collect_io_categories(sanitized)
		events = event_subscriptions(sanitized)
		globals_written = static_fields(sanitized)

		flow = facts.data_flow
		flow.globals_written.update(globals_written)
		flow.event_subscriptions.update(events)
		flow.console_input.update(categories.console_read)
		flow.storage_read.update(categories.file_read)
		flow.storage_write.update(categories.file_write)
		flow.network_read.update(categories.network_read)
		flow.network_write.update(categories.network_write)
		flow.logs.update(categories.logs)
		flow.config_read.update(categories.config_read)
		flow.shared_state.update(f"using:{dep}" for dep in facts.dependencies)

		facts.inputs.update(f"FILE:{name}()" for name in categories.file_read)
		facts.inputs.update(f"USER:{name}" for name in categories.console_read)
		facts.inputs.update(f"USER:{name}" for name in events)
		facts.inputs.update(f"NETWORK:{name}" for name in categories.network_read)
		facts.inputs.update(f"CONFIG:{name}" for name in categories.config_read)
		facts.outputs.update(f"FILE:{name}()" for name in categories.file_write)
		facts.outputs.update(f"LOG:{name}" for name in categories.logs)
		facts.outputs.update(f"NETWORK:{name}" for name in categories.network_write)

		effects = facts.side_effects
		if categories.file_read:
			effects.add("FILE:read")
		if categories.file_write:
			effects.add("FILE:write")
		if categories.network_read or categories.network_write:
			effects.add("NETWORK")
		if categories.logs:
			effects.add("LOG")
		if categories.config_read:
			effects.add("CONFIG")
		if categories.console_read or events:
			effects.add("EVENT:user")
		if globals_written:
			effects.add("STATE:global")
		return facts

	collect = analyze
