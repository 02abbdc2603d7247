"""Canonical string rendering of collected facts.

Every facet renders as ``Category{item; item}`` sections joined by `` | ``.
Items are deduplicated and sorted, except that labeled data-flow groups keep
the order of ``DATA_FLOW_LAYOUT``. Empty sections are dropped, and the
section order is fixed by the layout tables below.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .model import AnalysisResult, DataFlowFacts, SourceFacts

PURE = "PURE"
SECTION_SEPARATOR = " | "
ITEM_SEPARATOR = "; "
VALUE_SEPARATOR = ", "

# (category, [(label or None for plain items, DataFlowFacts field)])
DATA_FLOW_LAYOUT: Sequence[Tuple[str, Sequence[Tuple[Optional[str], str]]]] = (
	("Globals", (("write", "globals_written"), ("read", "globals_read"))),
	("DOM", (("create", "dom_created"), ("query", "dom_queried"), ("modify", "dom_modified"))),
	("Events", ((None, "event_listeners"), ("subscribe", "event_subscriptions"))),
	("Input", (("console", "console_input"),)),
	("Storage", ((None, "storage_ops"), ("read", "storage_read"), ("write", "storage_write"))),
	("Network", (("read", "network_read"), ("write", "network_write"))),
	("Logs", (("emit", "logs"),)),
	("Config", (("read", "config_read"),)),
	("SharedState", ((None, "shared_state"), ("globals", "shared_globals"), ("nonlocal", "shared_nonlocals"))),
	("CSS", ((None, "css"),)),
	("HTML", ((None, "html"),)),
	("JSON", ((None, "json"),)),
)


def labeled(label: str, values: Iterable[str]) -> str:
	return f"{label}=[{VALUE_SEPARATOR.join(sorted(set(values)))}]"


def render_section(category: str, items: Iterable[str], ordered: bool = False) -> str:
	"""Render ``Category{a; b}``; ``ordered`` keeps the given item order."""
	if ordered:
		unique = list(dict.fromkeys(item for item in items if item))
	else:
		unique = sorted({item for item in items if item})
	if not unique:
		return ""
	return f"{category}{{{ITEM_SEPARATOR.join(unique)}}}"


def join_sections(sections: Iterable[str]) -> str:
	return SECTION_SEPARATOR.join(section for section in sections if section)


def render_data_flow(facts: DataFlowFacts) -> str:
	sections: List[str] = []
	for category, slots in DATA_FLOW_LAYOUT:
		items: List[str] = []
		# labeled groups follow the layout; plain items are sorted in place
		for label, attr in slots:
			values: Set[str] = getattr(facts, attr)
			if not values:
				continue
			if label is None:
				items.extend(sorted(values))
			else:
				items.append(labeled(label, values))
		sections.append(render_section(category, items, ordered=True))
	return join_sections(sections)


def render_io(inputs: Iterable[str], outputs: Iterable[str]) -> str:
	return join_sections([render_section("Inputs", inputs), render_section("Outputs", outputs)])


def render_side_effects(tags: Optional[Iterable[str]]) -> str:
	if tags is None:
		return ""
	rendered = render_section("SideEffects", tags)
	return rendered or PURE


def render_list(values: Iterable[str]) -> List[str]:
	return sorted(set(values))


def to_result(path: str, language: str, facts: SourceFacts, diagnostic: Optional[str] = None) -> AnalysisResult:
	return AnalysisResult(
		path=path,
		language=language,
		functions=render_list(facts.functions),
		call_order=list(facts.call_order),
		dependencies=render_list(facts.dependencies),
		data_flow_summary=render_data_flow(facts.data_flow),
		io_summary=render_io(facts.inputs, facts.outputs),
		side_effects_summary=render_side_effects(facts.side_effects),
		diagnostic=diagnostic,
	)
