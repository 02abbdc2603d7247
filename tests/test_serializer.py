from codefacts.model import DataFlowFacts, SourceFacts
from codefacts.serializer import (
	PURE,
	render_data_flow,
	render_io,
	render_section,
	render_side_effects,
	to_result,
)


def test_side_effects_rendering():
	assert render_side_effects(set()) == PURE
	assert render_side_effects({"FILE:write"}) == "SideEffects{FILE:write}"
	assert render_side_effects({"LOG:print", "FILE:write"}) == "SideEffects{FILE:write; LOG:print}"
	assert render_side_effects(None) == ""


def test_data_flow_layout_and_sorting():
	facts = DataFlowFacts()
	facts.globals_written.update({"y", "x"})
	facts.storage_read.add("open")
	assert render_data_flow(facts) == "Globals{write=[x, y]} | Storage{read=[open]}"


def test_empty_sections_are_omitted():
	assert render_data_flow(DataFlowFacts()) == ""
	assert render_io([], []) == ""
	assert render_section("Inputs", ["", ""]) == ""


def test_io_rendering_dedupes_and_sorts():
	rendered = render_io(["USER:input", "FILE:open", "USER:input"], ["LOG:print"])
	assert rendered == "Inputs{FILE:open; USER:input} | Outputs{LOG:print}"


def test_plain_and_labeled_items_share_a_section():
	facts = DataFlowFacts()
	facts.storage_ops.add("localStorage.getItem")
	facts.storage_write.add("open")
	assert render_data_flow(facts) == "Storage{localStorage.getItem; write=[open]}"


def test_to_result_keeps_call_order():
	facts = SourceFacts(side_effects=set())
	facts.functions.update({"b", "a"})
	facts.call_order.extend(["b", "a", "b"])
	facts.dependencies.update({"z", "y", "z"})
	result = to_result("m.js", "javascript", facts)
	assert result.functions == ["a", "b"]
	assert result.call_order == ["b", "a", "b"]
	assert result.dependencies == ["y", "z"]
	assert result.side_effects_summary == PURE
	assert result.diagnostic is None


def test_labeled_groups_follow_layout_order():
	facts = DataFlowFacts()
	facts.globals_read.add("b")
	facts.globals_written.add("a")
	facts.dom_modified.add("add:c")
	facts.dom_queried.add("#m")
	facts.dom_created.add("<a>")
	assert render_data_flow(facts) == (
		"Globals{write=[a]; read=[b]} | DOM{create=[<a>]; query=[#m]; modify=[add:c]}"
	)
