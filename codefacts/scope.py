from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, Optional, Set

LOCAL = "local"
MODULE = "module"
BUILTIN = "builtin"
FREE = "free"

FUNCTION_KINDS = ("function", "module")


class Scope:
	"""One lexical scope in the chain."""

	def __init__(self, parent: Optional[Scope] = None, kind: str = "block"):
		self.parent = parent
		self.kind = kind
		self.declared: Set[str] = set()

	@property
	def is_module(self) -> bool:
		return self.parent is None

	def declare(self, name: Optional[str]) -> None:
		if name:
			self.declared.add(name)

	def lookup(self, name: str) -> Optional[Scope]:
		current: Optional[Scope] = self
		while current is not None:
			if name in current.declared:
				return current
			current = current.parent
		return None

	def function_scope(self) -> Scope:
		current = self
		while current.kind not in FUNCTION_KINDS and current.parent is not None:
			current = current.parent
		return current


@dataclass
class ScopeFacts:
	# append-only for a pass
	globals_written: Set[str] = field(default_factory=set)
	globals_read: Set[str] = field(default_factory=set)


class ScopeResolver:
	"""Tracks the scope chain during a traversal and records free references.

	Names are classified at the moment they are used. Recorded facts are
	never withdrawn, so a later declaration does not reclassify an earlier
	use.
	"""

	def __init__(self, builtins: FrozenSet[str], facts: Optional[ScopeFacts] = None):
		self.builtins = builtins
		self.module = Scope(None, "module")
		self.current = self.module
		self.facts = facts if facts is not None else ScopeFacts()

	@contextmanager
	def nested(self, kind: str = "block") -> Iterator[Scope]:
		scope = Scope(self.current, kind)
		self.current = scope
		try:
			yield scope
		finally:
			self.current = scope.parent  # type: ignore[assignment]

	def declare(self, name: Optional[str], hoist: bool = False, record: bool = False) -> Scope:
		"""Declare ``name`` in the current scope.

		``hoist`` binds it in the nearest function scope instead; ``record``
		counts a module-level binding as a global write.
		"""
		scope = self.current.function_scope() if hoist else self.current
		scope.declare(name)
		if record and name and scope.is_module:
			self.facts.globals_written.add(name)
		return scope

	def classify(self, name: str) -> str:
		scope = self.current.lookup(name)
		if scope is not None:
			return MODULE if scope.is_module else LOCAL
		if name in self.builtins:
			return BUILTIN
		return FREE

	def read(self, name: str) -> str:
		kind = self.classify(name)
		if kind == FREE:
			self.facts.globals_read.add(name)
		return kind

	def write(self, name: str) -> str:
		kind = self.classify(name)
		if kind == FREE:
			self.facts.globals_written.add(name)
		return kind
