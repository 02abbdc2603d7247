from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Set

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from .errors import ParseFailure
from .model import SourceFacts
from .sanitize import strip_pragmas
from .scope import FREE, MODULE, ScopeFacts, ScopeResolver

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())

# host-provided names that never count as free globals
BUILTIN_GLOBALS = frozenset({
	"console", "document", "window", "globalThis", "Math", "JSON", "Array",
	"Object", "String", "Number", "Boolean", "Promise", "Set", "Map",
	"WeakMap", "WeakSet", "Date", "RegExp", "Intl", "Symbol", "Reflect",
	"localStorage", "sessionStorage", "fetch", "require", "module", "exports",
	"__dirname", "__filename", "process", "setTimeout", "setInterval",
	"clearTimeout", "clearInterval", "undefined", "NaN", "Infinity",
	"arguments", "Error",
})

FUNCTION_TYPES = frozenset({
	"function_declaration",
	"generator_function_declaration",
	"function_expression",
	"function",
	"generator_function",
	"arrow_function",
})
FUNCTION_DECLARATION_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
PATTERN_TYPES = frozenset({"object_pattern", "array_pattern"})

DOM_MUTATE_METHODS = frozenset({
	"createElement", "createTextNode", "createDocumentFragment", "appendChild",
	"append", "prepend", "insertBefore", "replaceChild", "replaceChildren",
	"removeChild", "innerHTML", "innerText", "textContent", "write", "writeln",
})
DOM_READ_METHODS = frozenset({
	"querySelector", "querySelectorAll", "getElementById",
	"getElementsByClassName", "getElementsByTagName", "closest",
})
UI_INPUT_MEMBERS = DOM_READ_METHODS | {"value"}
UI_OUTPUT_METHODS = DOM_MUTATE_METHODS - {"write", "writeln"}
CLASS_LIST_METHODS = ("add", "remove", "toggle", "replace")
LOG_METHODS = ("log", "info", "warn", "error", "debug", "trace")
WINDOW_UI_METHODS = ("alert", "confirm", "prompt", "open", "close")
STORAGE_OBJECTS = ("localStorage", "sessionStorage")
GLOBAL_OBJECTS = ("window", "global", "globalThis")

TIMER_FUNCTIONS = frozenset({
	"setTimeout", "setInterval", "setImmediate", "clearTimeout",
	"clearInterval", "requestAnimationFrame", "cancelAnimationFrame",
})
NON_DETERMINISTIC_FUNCTIONS = frozenset({
	"Math.random", "crypto.getRandomValues", "crypto.randomUUID",
	"Date.now", "performance.now", "process.hrtime", "process.hrtime.bigint",
})

# scripting hosts whose object model is both read and driven by scripts
HOST_IDENTIFIERS = frozenset({"app", "photoshop", "core"})
HOST_INPUT_PROPERTIES = frozenset({
	"activeDocument", "documents", "layers", "selection", "foregroundColor",
	"backgroundColor", "preferences",
})

FS_READ_RE = re.compile(
	r"^(?:fs|fsExtra|fs\.promises)\.(?:read|createReadStream)"
	r"|\.(?:readFile|readFileSync|createReadStream)$"
)
FS_WRITE_RE = re.compile(
	r"^(?:fs|fsExtra|fs\.promises)\.(?:write|append|createWriteStream)"
	r"|\.(?:writeFile|writeFileSync|appendFile|appendFileSync|createWriteStream)$"
)


def _text(node: Optional[Node]) -> str:
	if node is None or node.text is None:
		return ""
	return node.text.decode("utf-8", "replace")


def _unwrap(node: Optional[Node]) -> Optional[Node]:
	while node is not None and node.type == "parenthesized_expression" and node.named_children:
		node = node.named_children[0]
	return node


def _string_value(node: Optional[Node], templates: bool = False) -> Optional[str]:
	if node is None:
		return None
	if node.type == "string":
		return _text(node)[1:-1]
	if templates and node.type == "template_string":
		if any(child.type == "template_substitution" for child in node.named_children):
			return None
		return _text(node)[1:-1]
	return None


def _is_function_like(node: Optional[Node]) -> bool:
	node = _unwrap(node)
	return node is not None and node.type in FUNCTION_TYPES


def _arguments(call: Node) -> List[Node]:
	args = call.child_by_field_name("arguments")
	if args is None or args.type != "arguments":
		return []
	return [child for child in args.named_children if child.type != "comment"]


def _property_name(node: Node) -> Optional[str]:
	"""Name of a member access step; computed steps only when literal."""
	if node.type == "member_expression":
		prop = node.child_by_field_name("property")
		if prop is not None and prop.type in ("property_identifier", "private_property_identifier"):
			return _text(prop)
		return None
	if node.type == "subscript_expression":
		index = _unwrap(node.child_by_field_name("index"))
		if index is None:
			return None
		if index.type == "number":
			return _text(index)
		return _string_value(index)
	return None


def _key_name(key: Optional[Node]) -> Optional[str]:
	if key is None:
		return None
	if key.type in ("property_identifier", "private_property_identifier", "identifier", "number"):
		return _text(key)
	if key.type == "string":
		return _string_value(key)
	if key.type == "computed_property_name" and key.named_children:
		return _string_value(key.named_children[0])
	return None


def callee_chain(node: Optional[Node], through_calls: bool = True) -> List[str]:
	"""Flatten ``a.b['c'].d`` into ``['a', 'b', 'c', 'd']``."""
	node = _unwrap(node)
	if node is None:
		return []
	if node.type == "identifier":
		return [_text(node)]
	if node.type == "this":
		return ["this"]
	if node.type in ("member_expression", "subscript_expression"):
		chain = callee_chain(node.child_by_field_name("object"), through_calls)
		name = _property_name(node)
		if name:
			return chain + [name]
		return chain
	if through_calls and node.type == "call_expression":
		return callee_chain(node.child_by_field_name("function"), through_calls)
	return []


def member_chain(node: Optional[Node]) -> List[str]:
	return callee_chain(node, through_calls=False)


def callee_name(node: Optional[Node]) -> Optional[str]:
	"""Dot-joined callee for the call order; unresolvable steps are dropped."""
	node = _unwrap(node)
	if node is None:
		return None
	if node.type == "identifier":
		return _text(node)
	if node.type == "this":
		return "this"
	if node.type in ("member_expression", "subscript_expression"):
		owner = callee_name(node.child_by_field_name("object"))
		name = _property_name(node)
		if owner and name:
			return f"{owner}.{name}"
		return owner or name
	if node.type in FUNCTION_TYPES:
		return "(anonymous)"
	return None


def expression_name(node: Optional[Node]) -> str:
	node = _unwrap(node)
	if node is None:
		return "<unknown>"
	if node.type == "identifier":
		return _text(node)
	if node.type == "this":
		return "this"
	if node.type == "member_expression":
		prop = node.child_by_field_name("property")
		return f"{expression_name(node.child_by_field_name('object'))}.{_text(prop)}"
	if node.type == "subscript_expression":
		index = node.child_by_field_name("index")
		return f"{expression_name(node.child_by_field_name('object'))}.[{expression_name(index)}]"
	if node.type == "call_expression":
		return expression_name(node.child_by_field_name("function"))
	return "<expression>"


def pattern_names(node: Optional[Node]) -> List[str]:
	"""Names bound by an identifier or destructuring pattern."""
	if node is None:
		return []
	kind = node.type
	if kind in ("identifier", "shorthand_property_identifier_pattern"):
		return [_text(node)]
	if kind == "object_pattern":
		names: List[str] = []
		for child in node.named_children:
			if child.type == "pair_pattern":
				names.extend(pattern_names(child.child_by_field_name("value")))
			elif child.type == "object_assignment_pattern":
				names.extend(pattern_names(child.child_by_field_name("left")))
			else:
				names.extend(pattern_names(child))
		return names
	if kind == "array_pattern":
		names = []
		for child in node.named_children:
			names.extend(pattern_names(child))
		return names
	if kind == "assignment_pattern":
		return pattern_names(node.child_by_field_name("left"))
	if kind == "rest_pattern" and node.named_children:
		return pattern_names(node.named_children[0])
	return []


def _parameters(function: Node) -> List[str]:
	single = function.child_by_field_name("parameter")
	if single is not None:
		return pattern_names(single)
	params = function.child_by_field_name("parameters")
	names: List[str] = []
	if params is not None:
		for child in params.named_children:
			names.extend(pattern_names(child))
	return names


def _is_require(node: Optional[Node]) -> bool:
	node = _unwrap(node)
	if node is None or node.type != "call_expression":
		return False
	callee = node.child_by_field_name("function")
	return callee is not None and callee.type == "identifier" and _text(callee) == "require"


def _first_error(root: Node) -> Optional[Node]:
	stack = [root]
	while stack:
		current = stack.pop()
		if current.type == "ERROR" or current.is_missing:
			return current
		stack.extend(reversed(current.children))
	return None


class _JsWalk:
	"""One traversal of one syntax tree; every facet is filled in a single pass."""

	def __init__(self):
		self.facts = SourceFacts(side_effects=set())
		flow = self.facts.data_flow
		self.scopes = ScopeResolver(
			BUILTIN_GLOBALS,
			ScopeFacts(globals_written=flow.globals_written, globals_read=flow.globals_read),
		)
		self.imported: Set[str] = set()
		self.called: Set[str] = set()
		self.handlers: Dict[str, Callable[[Node], None]] = {
			"program": self.visit_program,
			"statement_block": self.visit_block,
			"lexical_declaration": self.visit_declaration,
			"variable_declaration": self.visit_declaration,
			"function_declaration": self.visit_function,
			"generator_function_declaration": self.visit_function,
			"function_expression": self.visit_function,
			"function": self.visit_function,
			"generator_function": self.visit_function,
			"arrow_function": self.visit_function,
			"class_declaration": self.visit_class,
			"class": self.visit_class,
			"method_definition": self.visit_method,
			"field_definition": self.visit_field,
			"pair": self.visit_pair,
			"shorthand_property_identifier": self.visit_identifier,
			"identifier": self.visit_identifier,
			"import_statement": self.visit_import,
			"export_statement": self.visit_export,
			"call_expression": self.visit_call,
			"new_expression": self.visit_new,
			"assignment_expression": self.visit_assignment,
			"augmented_assignment_expression": self.visit_assignment,
			"update_expression": self.visit_update,
			"member_expression": self.visit_member,
			"subscript_expression": self.visit_subscript,
			"return_statement": self.visit_return,
			"catch_clause": self.visit_catch,
			"for_in_statement": self.visit_for_in,
			"for_statement": self.visit_for,
			"jsx_opening_element": self.visit_jsx_element,
			"jsx_self_closing_element": self.visit_jsx_element,
			"jsx_closing_element": self.skip,
			"comment": self.skip,
		}

	def run(self, root: Node) -> SourceFacts:
		self.visit(root)
		# imported bindings only count once they are invoked
		self.facts.functions.update(self.imported & self.called)
		return self.facts

	# traversal

	def visit(self, node: Optional[Node]) -> None:
		if node is None:
			return
		handler = self.handlers.get(node.type)
		if handler is None:
			self.visit_children(node)
		else:
			handler(node)

	def visit_children(self, node: Node) -> None:
		for child in node.named_children:
			self.visit(child)

	def skip(self, node: Node) -> None:
		pass

	def hoist(self, statements: Node) -> None:
		for child in statements.named_children:
			if child.type == "export_statement":
				child = child.child_by_field_name("declaration") or child
			if child.type in FUNCTION_DECLARATION_TYPES:
				self.scopes.declare(_text(child.child_by_field_name("name")))

	def visit_program(self, node: Node) -> None:
		self.hoist(node)
		self.visit_children(node)

	def visit_block(self, node: Node) -> None:
		with self.scopes.nested("block"):
			self.hoist(node)
			self.visit_children(node)

	# declarations

	def visit_declaration(self, node: Node) -> None:
		hoisted = node.type == "variable_declaration"
		for declarator in node.named_children:
			if declarator.type != "variable_declarator":
				continue
			target = declarator.child_by_field_name("name")
			value = declarator.child_by_field_name("value")
			for name in pattern_names(target):
				self.scopes.declare(name, hoist=hoisted, record=True)
			if target is not None and target.type == "identifier" and _is_function_like(value):
				self.facts.functions.add(_text(target))
			elif target is not None and target.type == "object_pattern" and _is_require(value):
				self.note_required_bindings(target)
			self.visit(value)

	def note_required_bindings(self, pattern: Node) -> None:
		for prop in pattern.named_children:
			if prop.type == "rest_pattern":
				self.facts.functions.update(pattern_names(prop))
			elif prop.type == "shorthand_property_identifier_pattern":
				self.imported.add(_text(prop))
			elif prop.type == "pair_pattern":
				value = prop.child_by_field_name("value")
				if value is not None and value.type == "identifier":
					self.imported.add(_text(value))
				elif value is not None and value.type == "assignment_pattern":
					self.imported.update(pattern_names(value))
			elif prop.type == "object_assignment_pattern":
				self.imported.update(pattern_names(prop.child_by_field_name("left")))

	def visit_function(self, node: Node) -> None:
		name_node = node.child_by_field_name("name")
		name = _text(name_node) if name_node is not None else ""
		if name:
			self.facts.functions.add(name)
		if name and node.type in FUNCTION_DECLARATION_TYPES:
			self.scopes.declare(name)
		with self.scopes.nested("function"):
			if name and node.type not in FUNCTION_DECLARATION_TYPES:
				self.scopes.declare(name)
			for param in _parameters(node):
				self.scopes.declare(param)
			self.visit(node.child_by_field_name("body"))

	def visit_class(self, node: Node) -> None:
		name_node = node.child_by_field_name("name")
		if node.type == "class_declaration" and name_node is not None:
			self.scopes.declare(_text(name_node), record=True)
		for child in node.named_children:
			if child.type == "class_heritage":
				self.visit_children(child)
		with self.scopes.nested("class"):
			if node.type == "class" and name_node is not None:
				self.scopes.declare(_text(name_node))
			self.visit_children(node.child_by_field_name("body") or node)

	def visit_method(self, node: Node) -> None:
		name = _key_name(node.child_by_field_name("name"))
		in_class = node.parent is not None and node.parent.type == "class_body"
		if name and not (in_class and name == "constructor"):
			self.facts.functions.add(name)
		with self.scopes.nested("function"):
			for param in _parameters(node):
				self.scopes.declare(param)
			self.visit(node.child_by_field_name("body"))

	def visit_field(self, node: Node) -> None:
		value = node.child_by_field_name("value")
		if _is_function_like(value):
			name = _key_name(node.child_by_field_name("property"))
			if name:
				self.facts.functions.add(name)
		self.visit(value)

	def visit_pair(self, node: Node) -> None:
		key = node.child_by_field_name("key")
		value = node.child_by_field_name("value")
		if _is_function_like(value):
			name = _key_name(key)
			if name:
				self.facts.functions.add(name)
		# a bare identifier key is never a reference, even when computed
		if key is not None and key.type == "computed_property_name":
			inner = key.named_children
			if inner and inner[0].type != "identifier":
				self.visit_children(key)
		self.visit(value)

	def visit_catch(self, node: Node) -> None:
		with self.scopes.nested("block"):
			for name in pattern_names(node.child_by_field_name("parameter")):
				self.scopes.declare(name)
			self.visit(node.child_by_field_name("body"))

	def visit_for(self, node: Node) -> None:
		with self.scopes.nested("block"):
			self.visit_children(node)

	def visit_for_in(self, node: Node) -> None:
		with self.scopes.nested("block"):
			left = node.child_by_field_name("left")
			kind = node.child_by_field_name("kind")
			if kind is not None:
				for name in pattern_names(left):
					self.scopes.declare(name, hoist=_text(kind) == "var", record=_text(kind) == "var")
			else:
				self.write_target(left)
				if left is not None and left.type not in PATTERN_TYPES and left.type != "identifier":
					self.visit(left)
			self.visit(node.child_by_field_name("right"))
			self.visit(node.child_by_field_name("body"))

	# modules

	def visit_import(self, node: Node) -> None:
		source = _string_value(node.child_by_field_name("source"))
		if source:
			self.facts.dependencies.add(source)
			self.facts.data_flow.shared_state.add(f"import:{source}")
		for clause in node.named_children:
			if clause.type != "import_clause":
				continue
			for binding in clause.named_children:
				for name in self.import_bindings(binding):
					self.scopes.declare(name)
					self.imported.add(name)

	def import_bindings(self, binding: Node) -> List[str]:
		if binding.type == "identifier":
			return [_text(binding)]
		if binding.type == "namespace_import":
			return [_text(child) for child in binding.named_children if child.type == "identifier"]
		if binding.type == "named_imports":
			names = []
			for spec in binding.named_children:
				if spec.type != "import_specifier":
					continue
				local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
				names.append(_text(local))
			return names
		return []

	def visit_export(self, node: Node) -> None:
		flow = self.facts.data_flow
		self.facts.outputs.add("COMPONENT:export")
		source = _string_value(node.child_by_field_name("source"))
		if source:
			self.facts.dependencies.add(source)
			flow.shared_state.add(f"export-from:{source}")
		if any(child.type == "default" for child in node.children):
			flow.shared_state.add("export:default")
		for clause in node.named_children:
			if clause.type != "export_clause":
				continue
			for spec in clause.named_children:
				if spec.type != "export_specifier":
					continue
				exported = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
				name = _key_name(exported)
				if name:
					flow.shared_state.add(f"export:{name}")
		self.visit(node.child_by_field_name("declaration"))
		self.visit(node.child_by_field_name("value"))

	# references

	def visit_identifier(self, node: Node) -> None:
		self.scopes.read(_text(node))

	def visit_member(self, node: Node) -> None:
		self.note_member_io(node)
		self.visit(node.child_by_field_name("object"))

	def visit_subscript(self, node: Node) -> None:
		self.visit(node.child_by_field_name("object"))
		index = node.child_by_field_name("index")
		# a bare identifier index is treated like a property name
		if index is not None and index.type != "identifier":
			self.visit(index)

	def visit_jsx_element(self, node: Node) -> None:
		name = node.child_by_field_name("name")
		for child in node.named_children:
			if name is not None and child == name:
				if child.type == "identifier" and _text(child)[:1].islower():
					continue
			self.visit(child)

	def visit_return(self, node: Node) -> None:
		if any(child.type != "comment" for child in node.named_children):
			self.facts.outputs.add("COMPONENT:return")
		self.visit_children(node)

	# writes

	def write_target(self, target: Optional[Node]) -> None:
		target = _unwrap(target)
		if target is None:
			return
		if target.type == "identifier":
			kind = self.scopes.write(_text(target))
			if kind in (MODULE, FREE):
				self.facts.side_effects.add("STATE:module")
		elif target.type in PATTERN_TYPES:
			for name in pattern_names(target):
				self.scopes.write(name)

	def visit_assignment(self, node: Node) -> None:
		left = _unwrap(node.child_by_field_name("left"))
		right = node.child_by_field_name("right")
		self.write_target(left)
		if left is not None and left.type in ("member_expression", "subscript_expression"):
			self.note_member_write(left)
		if node.type == "assignment_expression" and _is_function_like(right) and left is not None:
			if left.type == "identifier":
				self.facts.functions.add(_text(left))
			else:
				name = _property_name(left)
				if name:
					self.facts.functions.add(name)
		if left is not None and left.type not in PATTERN_TYPES and left.type != "identifier":
			self.visit(left)
		self.visit(right)

	def note_member_write(self, left: Node) -> None:
		chain = member_chain(left)
		if not chain:
			return
		name = ".".join(chain)
		first = chain[0]
		effects = self.facts.side_effects
		outputs = self.facts.outputs
		if first in STORAGE_OBJECTS:
			effects.add("STORAGE:write")
			outputs.add(f"STORAGE:{name}")
		elif first == "document":
			effects.add("DOM:mutate")
			outputs.add(f"UI:{name}")
		elif first in GLOBAL_OBJECTS:
			effects.add("STATE:global")
		elif first == "module" and chain[1:2] == ["exports"]:
			effects.add("MODULE:export")
			outputs.add("COMPONENT:module.exports")
		elif first == "exports":
			effects.add("MODULE:export")
			outputs.add(f"COMPONENT:{name}")
		elif chain[:2] == ["process", "env"]:
			effects.add("CONFIG:process.env")
		elif first == "this":
			effects.add("STATE:instance")

	def visit_update(self, node: Node) -> None:
		argument = _unwrap(node.child_by_field_name("argument"))
		if argument is None:
			return
		if argument.type == "identifier":
			self.write_target(argument)
			return
		chain = member_chain(argument)
		if chain[:1] == ["this"]:
			self.facts.side_effects.add("STATE:instance")
		elif chain[:1] and chain[0] in GLOBAL_OBJECTS:
			self.facts.side_effects.add("STATE:global")
		self.visit(argument)

	# calls

	def visit_call(self, node: Node) -> None:
		callee = node.child_by_field_name("function")
		args = _arguments(node)
		name = callee_name(callee)
		if name:
			self.facts.call_order.append(name)
		if callee is not None and callee.type == "identifier":
			self.called.add(_text(callee))
		self.note_dependency(callee, args)
		self.note_data_flow(callee, args)
		chain = callee_chain(callee)
		if chain:
			self.note_call_effects(chain, args)
		self.visit_children(node)

	def visit_new(self, node: Node) -> None:
		constructor = node.child_by_field_name("constructor")
		name = callee_name(constructor)
		if name:
			self.facts.call_order.append(f"new {name}")
		if constructor is not None and constructor.type == "identifier" and _text(constructor) == "Date":
			self.facts.side_effects.add("NON_DETERMINISTIC")
		self.visit_children(node)

	def note_dependency(self, callee: Optional[Node], args: List[Node]) -> None:
		if callee is None:
			return
		if callee.type == "import" and args:
			source = _string_value(args[0])
			if source:
				self.facts.dependencies.add(source)
		elif callee.type == "identifier" and _text(callee) == "require" and len(args) == 1:
			source = _string_value(args[0])
			if source:
				self.facts.dependencies.add(source)

	def note_data_flow(self, callee: Optional[Node], args: List[Node]) -> None:
		callee = _unwrap(callee)
		if callee is None or callee.type != "member_expression":
			return
		method = _property_name(callee)
		if not method:
			return
		flow = self.facts.data_flow
		owner = _unwrap(callee.child_by_field_name("object"))
		literal = _string_value(args[0]) if args else None
		if owner is not None and owner.type == "identifier" and _text(owner) == "document" and literal is not None:
			if method == "createElement":
				flow.dom_created.add(f"<{literal}>")
			elif method == "getElementById":
				flow.dom_queried.add(f"#{literal}")
			elif method == "getElementsByClassName":
				flow.dom_queried.add(f".{literal}")
			elif method in ("querySelector", "querySelectorAll"):
				flow.dom_queried.add(literal)
		if (
			method in CLASS_LIST_METHODS
			and owner is not None
			and owner.type == "member_expression"
			and _property_name(owner) == "classList"
		):
			flow.dom_modified.add(f"{method}:{literal if literal is not None else '<dynamic>'}")
		if method == "addEventListener" and args:
			event = literal if literal is not None else "<dynamic>"
			flow.event_listeners.add(f"{event}@{expression_name(owner)}")
		owner_name = expression_name(owner)
		if owner_name in STORAGE_OBJECTS:
			flow.storage_ops.add(f"{owner_name}.{method}")

	def note_call_effects(self, chain: List[str], args: List[Node]) -> None:
		name = ".".join(chain)
		first = chain[0]
		last = chain[-1]
		effects = self.facts.side_effects
		inputs = self.facts.inputs
		outputs = self.facts.outputs

		if FS_READ_RE.search(name):
			effects.add("FILE:read")
			inputs.add(f"FILE:{name}()")
		if FS_WRITE_RE.search(name):
			effects.add("FILE:write")
			outputs.add(f"FILE:{name}()")
		if (
			name in ("fetch", "axios")
			or name.startswith(("axios.", "http.", "https.", "XMLHttpRequest", "navigator.sendBeacon"))
		):
			effects.add("NETWORK")
			inputs.add(f"NETWORK:{name}")
		if first in STORAGE_OBJECTS:
			if last in ("getItem", "get"):
				effects.add("STORAGE:read")
				if last == "getItem":
					inputs.add(f"STORAGE:{first}.getItem")
			elif last in ("setItem", "set", "removeItem"):
				effects.add("STORAGE:write")
				if last == "setItem":
					outputs.add(f"STORAGE:{first}.setItem")
		if chain[:2] == ["process", "env"]:
			effects.add("CONFIG:process.env")
			inputs.add("CONFIG:process.env")
		if first == "console" and last in LOG_METHODS:
			effects.add("LOG:console")
			outputs.add(f"LOG:console.{last}")
		if first == "document":
			if last in DOM_MUTATE_METHODS:
				effects.add("DOM:mutate")
			elif last in DOM_READ_METHODS:
				effects.add("DOM:read")
			if last in UI_INPUT_MEMBERS and not name.endswith(".value"):
				inputs.add(f"UI:{name}")
			if last in UI_OUTPUT_METHODS:
				outputs.add(f"UI:{name}")
		if first == "window" and last in WINDOW_UI_METHODS:
			effects.add("UI:window")
		if "emit" in chain or last == "dispatchEvent":
			effects.add("EVENT:emit")
		if "setState" in chain or "forceUpdate" in chain:
			effects.add("STATE:component")
		if name in TIMER_FUNCTIONS:
			effects.add("TIMER")
		if name in NON_DETERMINISTIC_FUNCTIONS:
			effects.add("NON_DETERMINISTIC")
		if last == "addEventListener" and args:
			event = _string_value(args[0], templates=True) or "event"
			inputs.add(f"USER:addEventListener({event})")
		if first in HOST_IDENTIFIERS:
			outputs.add(f"ADOBE:{name}")

	def note_member_io(self, node: Node) -> None:
		chain = member_chain(node)
		if not chain:
			return
		name = ".".join(chain)
		first = chain[0]
		last = chain[-1]
		if first == "document" and last in UI_INPUT_MEMBERS:
			self.facts.inputs.add(f"UI:{name}")
		if first in HOST_IDENTIFIERS:
			parent = node.parent
			if parent is not None and parent.type == "call_expression" and parent.child_by_field_name("function") == node:
				self.facts.outputs.add(f"ADOBE:{name}()")
			elif last in HOST_INPUT_PROPERTIES or parent is None or parent.type != "assignment_expression":
				self.facts.inputs.add(f"ADOBE:{name}")


class JavaScriptAnalyzer:
	"""ECMAScript-family front end over a tree-sitter syntax tree."""

	language = "javascript"

	def __init__(self):
		self.parser = Parser(JS_LANGUAGE)

	def parse(self, path: str, text: str) -> Node:
		tree = self.parser.parse(text.encode("utf-8"))
		root = tree.root_node
		if root.has_error:
			error = _first_error(root)
			where = ""
			if error is not None:
				row, column = error.start_point[0], error.start_point[1]
				where = f" at line {row + 1}, column {column + 1}"
			raise ParseFailure(f"syntax error{where}", path)
		return root

	def collect(self, path: str, text: str) -> SourceFacts:
		"""Analyze one unit, raising ParseFailure for input that does not parse."""
		root = self.parse(path, strip_pragmas(text))
		try:
			return _JsWalk().run(root)
		except RecursionError:
			raise ParseFailure("syntax tree too deep to walk", path)

	def analyze(self, path: str, text: str) -> SourceFacts:
		try:
			return self.collect(path, text)
		except ParseFailure as exc:
			logger.warning("Unable to parse %s", exc)
			return SourceFacts.empty()
