from textwrap import dedent

import pytest

from codefacts.errors import ParseFailure
from codefacts.javascript import JavaScriptAnalyzer
from codefacts.serializer import render_side_effects


def analyze(code):
	return JavaScriptAnalyzer().analyze("sample.js", dedent(code))


def test_module_counter_is_global_but_shadowed_local_is_not():
	facts = analyze(
		"""
		let counter = 0;
		function inc(){ counter += 1; }
		function local(){ const counter = 5; return counter; }
		"""
	)
	assert facts.data_flow.globals_written == {"counter"}
	assert facts.data_flow.globals_read == set()
	assert facts.functions == {"inc", "local"}
	assert "STATE:module" in facts.side_effects


def test_call_order_is_pre_order_and_keeps_duplicates():
	facts = analyze(
		"""
		a();
		b.c();
		outer(inner());
		a();
		new Foo();
		(function () {})();
		"""
	)
	assert facts.call_order == ["a", "b.c", "outer", "inner", "a", "new Foo", "(anonymous)"]


def test_dom_and_storage_data_flow():
	facts = analyze(
		"""
		const el = document.createElement('div');
		document.getElementById('main').appendChild(el);
		el.classList.add('active');
		el.classList.toggle(name);
		button.addEventListener('click', onClick);
		localStorage.setItem('k', 'v');
		"""
	)
	flow = facts.data_flow
	assert flow.dom_created == {"<div>"}
	assert flow.dom_queried == {"#main"}
	assert flow.dom_modified == {"add:active", "toggle:<dynamic>"}
	assert flow.event_listeners == {"click@button"}
	assert flow.storage_ops == {"localStorage.setItem"}
	assert flow.globals_written == {"el"}
	assert flow.globals_read == {"name", "button", "onClick"}

	assert {"DOM:mutate", "DOM:read", "STORAGE:write"} <= facts.side_effects
	assert "USER:addEventListener(click)" in facts.inputs
	assert "UI:document.getElementById" in facts.inputs
	assert "UI:document.createElement" in facts.outputs
	assert "STORAGE:localStorage.setItem" in facts.outputs


def test_imports_exports_and_dependencies():
	facts = analyze(
		"""
		import React, { useState as useLocal } from 'react';
		import * as utils from './utils.js';
		const { readFile, writeFile } = require('fs');
		export { helper as publicHelper };
		export * from './shared';
		export default function main() {
			useLocal(0);
			readFile('a');
			return utils;
		}
		const lazy = import('./lazy.js');
		"""
	)
	assert facts.dependencies == {"react", "./utils.js", "fs", "./shared", "./lazy.js"}
	assert facts.data_flow.shared_state == {
		"import:react",
		"import:./utils.js",
		"export:publicHelper",
		"export-from:./shared",
		"export:default",
	}
	# imported bindings are only listed once they are called
	assert facts.functions == {"main", "useLocal", "readFile"}
	assert {"COMPONENT:export", "COMPONENT:return"} <= facts.outputs


def test_function_catalog_covers_methods_fields_and_assignments():
	facts = analyze(
		"""
		const arrow = () => 1;
		let assigned;
		assigned = function () {};
		obj.handler = () => {};
		const api = { load() {}, save: function () {}, 'quoted': () => {} };
		class Widget {
			constructor() {}
			render() {}
			#secret() {}
			onClick = () => {};
			static create() {}
		}
		"""
	)
	assert facts.functions == {
		"arrow", "assigned", "handler", "load", "save", "quoted",
		"render", "#secret", "onClick", "create",
	}
	assert "obj" in facts.data_flow.globals_read


def test_computed_identifier_keys_are_not_references():
	facts = analyze(
		"""
		function pick(o) { return o[index]; }
		const table = { [dyn]: 1 };
		function prefixed(o) { return o[prefix + 'x']; }
		"""
	)
	read = facts.data_flow.globals_read
	assert "index" not in read
	assert "dyn" not in read
	assert "prefix" in read


def test_var_hoisting_and_block_scoping():
	facts = analyze(
		"""
		function f() { if (x) { var y = 1; } return y; }
		{ var z = 1; }
		{ let w = 1; }
		w;
		try { run(); } catch (err) { log(err); }
		"""
	)
	flow = facts.data_flow
	assert flow.globals_written == {"z"}
	assert flow.globals_read == {"x", "w", "run", "log"}


def test_side_effect_tables():
	facts = analyze(
		"""
		fs.writeFileSync('out.txt', data);
		console.log('done');
		setTimeout(tick, 10);
		const r = Math.random();
		fetch('/api');
		process.env.DEBUG;
		this.count++;
		"""
	)
	assert {
		"FILE:write", "LOG:console", "TIMER", "NON_DETERMINISTIC", "NETWORK", "STATE:instance",
	} <= facts.side_effects
	assert "FILE:fs.writeFileSync()" in facts.outputs
	assert "LOG:console.log" in facts.outputs
	assert "NETWORK:fetch" in facts.inputs


def test_module_exports_assignment():
	facts = analyze(
		"""
		module.exports = { run };
		exports.helper = function helper() {};
		"""
	)
	assert "MODULE:export" in facts.side_effects
	assert {"COMPONENT:module.exports", "COMPONENT:exports.helper"} <= facts.outputs
	assert "helper" in facts.functions


def test_pure_function_renders_pure():
	facts = analyze(
		"""
		function add(a, b) { return a + b; }
		"""
	)
	assert facts.side_effects == set()
	assert render_side_effects(facts.side_effects) == "PURE"


def test_pragmas_are_stripped_before_parsing():
	facts = analyze(
		"""
		#target photoshop
		var doc = app.activeDocument;
		"""
	)
	assert facts.data_flow.globals_written == {"doc"}
	assert facts.data_flow.globals_read == {"app"}
	assert "ADOBE:app.activeDocument" in facts.inputs


def test_jsx_intrinsic_elements_are_not_references():
	facts = JavaScriptAnalyzer().analyze(
		"view.jsx",
		"const view = <div className={style}><Panel /></div>;\n",
	)
	read = facts.data_flow.globals_read
	assert "div" not in read
	assert {"style", "Panel"} <= read


def test_parse_failure_degrades_to_empty_facts():
	analyzer = JavaScriptAnalyzer()
	facts = analyzer.analyze("broken.js", "function (")
	assert facts.functions == set()
	assert facts.call_order == []
	assert facts.side_effects is None
	with pytest.raises(ParseFailure):
		analyzer.collect("broken.js", "function (")
