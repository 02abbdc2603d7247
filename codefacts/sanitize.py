from __future__ import annotations

import re

# ExtendScript directives that standard ECMAScript parsers reject
PRAGMA_RE = re.compile(r"^[ \t]*#(?:target|include|includepath)\b.*$", re.IGNORECASE | re.MULTILINE)

LINE_BREAKS = ("\n", "\r")


def strip_pragmas(text: str) -> str:
	"""Blank out directive pragma lines, keeping the line breaks in place."""
	return PRAGMA_RE.sub("", text)


def _mask(char: str, remove_strings: bool) -> str:
	if not remove_strings or char in LINE_BREAKS:
		return char
	return " "


def strip_comments(code: str, remove_strings: bool = False) -> str:
	"""Remove C-family comments and optionally blank string contents.

	Block comments keep their line breaks. With ``remove_strings`` each string
	character, delimiters included, is replaced by one space so columns and
	line numbers stay aligned with the original text.
	"""
	if not code:
		return ""
	out = []
	length = len(code)
	i = 0
	in_string = False
	in_verbatim = False
	quote = ""
	while i < length:
		char = code[i]
		nxt = code[i + 1] if i + 1 < length else ""
		if not in_string:
			if char == "/" and nxt == "/":
				i += 2
				while i < length and code[i] not in LINE_BREAKS:
					i += 1
				continue
			if char == "/" and nxt == "*":
				i += 2
				while i < length and not (code[i] == "*" and i + 1 < length and code[i + 1] == "/"):
					if code[i] in LINE_BREAKS:
						out.append(code[i])
					i += 1
				i += 2
				continue
			if char in ('"', "'"):
				in_string = True
				quote = char
				prev1 = code[i - 1] if i >= 1 else ""
				prev2 = code[i - 2] if i >= 2 else ""
				# @"..", $@"..", @$".."
				in_verbatim = char == '"' and (
					prev1 == "@" or (prev1 == "$" and prev2 == "@")
				)
				out.append(_mask(char, remove_strings))
				i += 1
				continue
			out.append(char)
			i += 1
			continue

		out.append(_mask(char, remove_strings))
		if in_verbatim:
			if char == '"' and nxt == '"':
				out.append(_mask('"', remove_strings))
				i += 2
				continue
			if char == '"':
				in_string = False
				in_verbatim = False
			i += 1
			continue
		if char == "\\" and i + 1 < length:
			out.append(_mask(nxt, remove_strings))
			i += 2
			continue
		if char == quote:
			in_string = False
		i += 1
	return "".join(out)
