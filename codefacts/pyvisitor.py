"""Fact visitor for Python sources.

This module is run by a separate interpreter (``python -c <this source>
<path>``), so it must stay importable with nothing but the standard library
and must not use relative imports. It reads the source on stdin and prints
a single JSON object on stdout. ``visit_source`` is the same logic for
callers that want to stay in-process.
"""

from __future__ import annotations

import ast
import json
import sys

FILE_READ_PREFIXES = (
	"os.path.exists",
	"os.path.isfile",
	"os.listdir",
	"pathlib.Path.read_text",
	"pathlib.Path.read_bytes",
	"json.load",
	"json.loads",
)
FILE_WRITE_PREFIXES = (
	"os.remove",
	"os.unlink",
	"os.rename",
	"os.replace",
	"os.rmdir",
	"os.makedirs",
	"os.mkdir",
	"shutil.copy",
	"shutil.copyfile",
	"shutil.move",
	"pathlib.Path.write_text",
	"pathlib.Path.write_bytes",
)
RANDOM_PREFIXES = ("random.", "secrets.", "uuid.")
NETWORK_PREFIXES = ("requests.", "urllib.", "http.client.", "aiohttp.")
WRITE_MODE_FLAGS = ("w", "a", "x", "+")
DATA_FLOW_FIELDS = ("globals_written", "storage_read", "storage_write", "shared_globals", "shared_nonlocals")


def call_name(node):
	if isinstance(node, ast.Name):
		return node.id
	if isinstance(node, ast.Attribute):
		base = call_name(node.value)
		if base:
			return f"{base}.{node.attr}"
		return node.attr
	return None


def target_names(target):
	if isinstance(target, ast.Name):
		return [target.id]
	if isinstance(target, (ast.Tuple, ast.List)):
		names = []
		for item in target.elts:
			names.extend(target_names(item))
		return names
	if isinstance(target, ast.Starred):
		return target_names(target.value)
	return []


def open_mode(call):
	if len(call.args) >= 2:
		arg = call.args[1]
		if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
			return arg.value
	for keyword in call.keywords:
		if keyword.arg == "mode" and isinstance(keyword.value, ast.Constant) and isinstance(keyword.value.value, str):
			return keyword.value.value
	return "r"


class FactVisitor(ast.NodeVisitor):
	def __init__(self):
		self.functions = []
		self.call_order = []
		self.dependencies = set()
		self.data_flow = {name: set() for name in DATA_FLOW_FIELDS}
		self.inputs = set()
		self.outputs = set()
		self.side_effects = set()
		self.class_stack = []
		# one entry per enclosing def/class; function entries hold `global` names
		self.scopes = []

	@property
	def at_module(self):
		return not self.scopes

	def write_global(self, name):
		self.data_flow["globals_written"].add(name)
		self.side_effects.add("STATE:global")

	def visit_ClassDef(self, node):
		self.class_stack.append(node.name)
		self.scopes.append(set())
		self.generic_visit(node)
		self.scopes.pop()
		self.class_stack.pop()

	def visit_FunctionDef(self, node):
		qualified = ".".join(self.class_stack + [node.name])
		if qualified not in self.functions:
			self.functions.append(qualified)
		self.scopes.append(set())
		self.generic_visit(node)
		self.scopes.pop()

	visit_AsyncFunctionDef = visit_FunctionDef

	def visit_Assign(self, node):
		if self.at_module:
			for target in node.targets:
				for name in target_names(target):
					self.write_global(name)
		self.generic_visit(node)

	def visit_AugAssign(self, node):
		if self.at_module and isinstance(node.target, ast.Name):
			self.write_global(node.target.id)
		self.generic_visit(node)

	def visit_AnnAssign(self, node):
		if self.at_module and node.value is not None and isinstance(node.target, ast.Name):
			self.write_global(node.target.id)
		self.generic_visit(node)

	def visit_Name(self, node):
		if isinstance(node.ctx, ast.Store) and self.scopes and node.id in self.scopes[-1]:
			self.write_global(node.id)

	def visit_Global(self, node):
		for name in node.names:
			self.data_flow["shared_globals"].add(name)
			self.side_effects.add("STATE:global")
			if self.scopes:
				self.scopes[-1].add(name)

	def visit_Nonlocal(self, node):
		for name in node.names:
			self.data_flow["shared_nonlocals"].add(name)
			self.side_effects.add("STATE:nonlocal")

	def visit_Import(self, node):
		for alias in node.names:
			self.dependencies.add(alias.name)

	def visit_ImportFrom(self, node):
		module = node.module or ""
		for alias in node.names:
			self.dependencies.add(f"{module}.{alias.name}" if module else alias.name)

	def visit_Attribute(self, node):
		if call_name(node) == "os.environ":
			self.note_config("os.environ")
		self.generic_visit(node)

	def note_config(self, name):
		self.inputs.add(f"CONFIG:{name}")
		self.side_effects.add(f"CONFIG:{name}")

	def note_file(self, name, call):
		if name == "open" or name.lower().endswith(".open"):
			if any(flag in open_mode(call) for flag in WRITE_MODE_FLAGS):
				self.data_flow["storage_write"].add("open")
				self.outputs.add("FILE:open")
				self.side_effects.add("FILE:write")
			else:
				self.data_flow["storage_read"].add("open")
				self.inputs.add("FILE:open")
				self.side_effects.add("FILE:read")
			return
		for prefix in FILE_READ_PREFIXES:
			if name.startswith(prefix):
				self.data_flow["storage_read"].add(prefix.split(".")[-1])
				self.inputs.add(f"FILE:{prefix}")
				self.side_effects.add("FILE:read")
				return
		for prefix in FILE_WRITE_PREFIXES:
			if name.startswith(prefix):
				self.data_flow["storage_write"].add(prefix.split(".")[-1])
				self.outputs.add(f"FILE:{prefix}")
				self.side_effects.add("FILE:write")
				return

	def visit_Call(self, node):
		name = call_name(node.func)
		if name:
			self.call_order.append(name)
			self.note_file(name, node)
			lowered = name.lower()
			if name.startswith(NETWORK_PREFIXES):
				self.inputs.add(f"NETWORK:{name}")
				self.side_effects.add("NETWORK")
			if lowered.startswith(RANDOM_PREFIXES):
				self.side_effects.add("NON_DETERMINISTIC")
			if name == "os.getenv":
				self.note_config("os.environ")
			if name == "print" or lowered.endswith(".print"):
				self.outputs.add("LOG:print")
				self.side_effects.add("LOG:print")
			if name.startswith("logging."):
				self.outputs.add("LOG:logging")
				self.side_effects.add("LOG:logging")
			if name == "input" or lowered.endswith(".input"):
				self.inputs.add("USER:input")
		self.generic_visit(node)

	def payload(self):
		return {
			"functions": list(self.functions),
			"call_order": list(self.call_order),
			"dependencies": sorted(self.dependencies),
			"data_flow": {name: sorted(values) for name, values in self.data_flow.items()},
			"io_summary": {"inputs": sorted(self.inputs), "outputs": sorted(self.outputs)},
			"side_effects": sorted(self.side_effects),
		}


def empty_payload():
	return {
		"functions": [],
		"call_order": [],
		"dependencies": [],
		"data_flow": {},
		"io_summary": {"inputs": [], "outputs": []},
		"side_effects": [],
	}


def visit_source(source, filepath="<stdin>"):
	try:
		tree = ast.parse(source, filename=filepath)
	except (SyntaxError, ValueError, RecursionError) as exc:
		payload = empty_payload()
		payload["error"] = f"Python parse error: {exc}"
		return payload
	visitor = FactVisitor()
	visitor.visit(tree)
	return visitor.payload()


def main(argv=None):
	argv = sys.argv if argv is None else argv
	filepath = argv[1] if len(argv) > 1 else "<stdin>"
	# the host always writes utf-8, whatever the child locale is
	source = sys.stdin.buffer.read().decode("utf-8", errors="replace")
	print(json.dumps(visit_source(source, filepath)))
	return 0


if __name__ == "__main__":
	sys.exit(main())
