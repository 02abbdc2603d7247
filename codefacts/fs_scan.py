from __future__ import annotations

import os
from typing import Dict, Iterable, List, Optional

from .model import FileInfo


EXTENSION_LANGUAGE: Dict[str, str] = {
	".js": "javascript",
	".jsx": "javascript",
	".mjs": "javascript",
	".cjs": "javascript",
	".cs": "csharp",
	".py": "python",
	".css": "css",
	".json": "json",
	".html": "html",
	".htm": "html",
}

DEFAULT_IGNORE_DIRS = (".git", "node_modules", "dist", "build", "__pycache__", ".venv", "venv")


def detect_language(filename: str) -> str:
	_, ext = os.path.splitext(filename)
	return EXTENSION_LANGUAGE.get(ext.lower(), "unknown")


def normalize_language(tag: Optional[str], filename: str = "") -> str:
	"""Map a language name or an extension (with or without the dot) to a tag."""
	if not tag:
		return detect_language(filename)
	tag = tag.strip().lower()
	if tag in EXTENSION_LANGUAGE.values():
		return tag
	ext = tag if tag.startswith(".") else f".{tag}"
	return EXTENSION_LANGUAGE.get(ext, tag)


def scan_repository(root: str, ignore_dirs: Optional[Iterable[str]] = None) -> List[FileInfo]:
	"""Every supported source file under ``root``, in a stable walk order."""
	skipped = set(DEFAULT_IGNORE_DIRS if ignore_dirs is None else ignore_dirs)
	files: List[FileInfo] = []
	for dirpath, dirnames, filenames in os.walk(root):
		dirnames[:] = sorted(d for d in dirnames if d not in skipped)
		for filename in sorted(filenames):
			language = detect_language(filename)
			if language == "unknown":
				continue
			path = os.path.join(dirpath, filename)
			files.append(
				FileInfo(
					path=path,
					rel_path=os.path.relpath(path, root),
					language=language,
				)
			)
	return files
