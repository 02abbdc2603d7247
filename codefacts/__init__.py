"""Multi-language static analysis producing normalized per-file facts.

Modules:
- dispatcher.py: Language routing, file reading and repository walks.
- javascript.py: tree-sitter based analysis of JavaScript sources.
- scope.py: Lexical scope chain used to find free globals.
- csharp.py: Bounded regex heuristics for C# sources.
- outofprocess.py: Python analysis through a child interpreter.
- pyvisitor.py: The stdlib-only visitor that child interpreter runs.
- markup.py: Reference extraction for CSS, JSON and HTML.
- sanitize.py: Comment, string and pragma stripping.
- serializer.py: Canonical rendering of collected facts.
- run.py: Per-batch caches and interpreter discovery.
- fs_scan.py: Filesystem scanning and language detection.
- model.py: Data structures for source units, facts and results.
- config.py: Environment-driven settings.
- errors.py: Analysis error types.
"""

__all__ = [
	"config",
	"csharp",
	"dispatcher",
	"errors",
	"fs_scan",
	"javascript",
	"markup",
	"model",
	"outofprocess",
	"pyvisitor",
	"run",
	"sanitize",
	"scope",
	"serializer",
]
