from textwrap import dedent

import pytest

from codefacts.errors import ParseFailure
from codefacts.markup import CssAnalyzer, HtmlAnalyzer, JsonAnalyzer
from codefacts.serializer import to_result


def test_css_imports_assets_and_custom_properties():
	css = dedent(
		"""
		@import url("base.css");
		:root { --main-color: red; }
		.logo { background: url(img/logo.png); }
		.inline { background: url(data:image/png;base64,AAA); }
		"""
	)
	result = to_result("site.css", "css", CssAnalyzer().collect("site.css", css))
	assert result.dependencies == ["base.css", "img/logo.png"]
	assert result.data_flow_summary == (
		"CSS{assets=[base.css, img/logo.png]; customProps=[main-color]; imports=[base.css]; rules=3}"
	)
	assert result.io_summary == "Inputs{FILE:@import(base.css); FILE:url(base.css); FILE:url(img/logo.png)}"
	assert result.side_effects_summary == ""
	assert result.functions == []


def test_json_references_and_keys():
	text = '{"main": "./index.js", "name": "pkg", "files": ["dist/app.css", "#anchor"], "version": 1}'
	result = to_result("package.json", "json", JsonAnalyzer().collect("package.json", text))
	assert result.dependencies == ["./index.js", "dist/app.css"]
	assert result.data_flow_summary == (
		"JSON{keys=[files, main, name, version]; refs=[#anchor, ./index.js, dist/app.css]; root=object}"
	)
	assert result.io_summary == (
		"Inputs{CONFIG:Array(length=2); CONFIG:files; CONFIG:main; CONFIG:name; CONFIG:version}"
	)


def test_json_root_array():
	facts = JsonAnalyzer().collect("list.json", "[1, 2, 3]")
	assert facts.data_flow.json == {"root=array"}
	assert facts.inputs == {"CONFIG:Array(length=3)"}


def test_invalid_json_raises_parse_failure():
	with pytest.raises(ParseFailure):
		JsonAnalyzer().collect("bad.json", "{not json")


HTML = dedent(
	"""
	<html>
	<head>
		<link rel="stylesheet" href="style.css">
		<script src="app.js"></script>
	</head>
	<body onload="init()">
		<form id="login">
			<input type="password" name="pw">
			<input name="user">
			<button id="go">Go</button>
		</form>
		<canvas id="view"></canvas>
	</body>
	</html>
	"""
)


def test_html_references_and_touchpoints():
	facts = HtmlAnalyzer().collect("index.html", HTML)
	assert facts.dependencies == {"style.css", "app.js"}
	assert facts.data_flow.html == {
		"ids=[go, login, view]",
		"scripts=[app.js]",
		"assets=[style.css]",
		"events=[load]",
	}
	assert facts.inputs == {
		"USER:form#login",
		"USER:input[type=password]",
		"USER:input[type=text]",
		"USER:button(go)",
	}
	assert facts.outputs == {"UI:<canvas>"}
	assert facts.side_effects == {"DOM:event-handlers", "DOM:script"}


def test_static_html_side_effects_are_not_analyzed():
	facts = HtmlAnalyzer().collect("plain.html", "<p class='lead note'>Hi</p>")
	assert facts.side_effects is None
	assert facts.data_flow.html == {"classes=[lead, note]"}
