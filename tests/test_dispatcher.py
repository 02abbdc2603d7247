import os
from textwrap import dedent

from codefacts.config import Settings
from codefacts.dispatcher import analyze_path, analyze_tree, dispatch
from codefacts.fs_scan import detect_language, normalize_language
from codefacts.outofprocess import InProcessVisitor, PythonAnalyzer
from codefacts.run import AnalysisRun


def test_language_tags_accept_names_and_extensions():
	assert normalize_language("javascript") == "javascript"
	assert normalize_language(".cjs") == "javascript"
	assert normalize_language("CS") == "csharp"
	assert normalize_language(None, "page.htm") == "html"
	assert detect_language("README.md") == "unknown"


def test_dispatch_routes_by_extension_tag():
	with AnalysisRun(Settings()) as run:
		result = dispatch("widget", "var a = b();\n", ".js", run)
	assert result.language == "javascript"
	assert result.call_order == ["b"]
	assert result.data_flow_summary == "Globals{write=[a]; read=[b]}"
	assert result.side_effects_summary == "PURE"


def test_unsupported_language_returns_empty_result_with_diagnostic():
	with AnalysisRun(Settings()) as run:
		result = dispatch("script.rb", "puts 1", "ruby", run)
	assert result.functions == []
	assert result.data_flow_summary == ""
	assert result.diagnostic == "unsupported language: ruby"


def test_parse_failure_is_reported_not_raised():
	with AnalysisRun(Settings()) as run:
		result = dispatch("broken.js", "function (", None, run)
	assert result.language == "javascript"
	assert result.functions == []
	assert result.side_effects_summary == ""
	assert "syntax error" in result.diagnostic


def test_unreadable_file_is_skipped_with_diagnostic(tmp_path):
	missing = str(tmp_path / "gone.cs")
	with AnalysisRun(Settings()) as run:
		result = analyze_path(missing, run)
	assert result.language == "csharp"
	assert result.diagnostic.startswith(missing)
	assert result.call_order == []


def test_analyze_path_reads_file(tmp_path):
	source = tmp_path / "Program.cs"
	source.write_text(
		dedent(
			"""
			using System.IO;

			public class Program
			{
				public static void Main() => File.WriteAllText(path, body);
			}
			"""
		)
	)
	with AnalysisRun(Settings()) as run:
		result = analyze_path(str(source), run)
	assert result.dependencies == ["System.IO"]
	assert result.functions == ["Main"]
	assert result.io_summary == "Outputs{FILE:File.WriteAllText()}"
	assert result.side_effects_summary == "SideEffects{FILE:write}"


def test_analyze_tree_walks_supported_files(tmp_path):
	(tmp_path / "src").mkdir()
	(tmp_path / "src" / "app.js").write_text("console.log('hi');\n")
	(tmp_path / "node_modules").mkdir()
	(tmp_path / "node_modules" / "lib.js").write_text("module.exports = 1;\n")
	(tmp_path / "styles.css").write_text("a { color: red; }\n")
	(tmp_path / "README.md").write_text("# readme\n")

	with AnalysisRun(Settings()) as run:
		tree = analyze_tree(str(tmp_path), run)

	assert [f.rel_path for f in tree.files] == ["styles.css", os.path.join("src", "app.js")]
	by_path = {os.path.basename(r.path): r for r in tree.results}
	assert by_path["app.js"].side_effects_summary == "SideEffects{LOG:console}"
	assert by_path["styles.css"].data_flow_summary == "CSS{rules=1}"


def _dependencies_twice(path, text):
	outputs = []
	for _ in range(2):
		with AnalysisRun(Settings()) as run:
			run.front_ends["python"] = PythonAnalyzer(run, InProcessVisitor())
			outputs.append(dispatch(path, text, None, run).dependencies)
	return outputs


def test_dependencies_are_stable_sorted_and_unique():
	cases = {
		"app.js": (
			"import a from './b';\nimport c from './b';\nconst z = require('z');\nimport('./b');\n",
			["./b", "z"],
		),
		"App.cs": ("using System;\nusing System.IO;\nusing System;\n", ["System", "System.IO"]),
		"app.py": ("import os\nimport json\nimport os\nfrom os import path\n", ["json", "os", "os.path"]),
	}
	for path, (text, expected) in cases.items():
		first, second = _dependencies_twice(path, text)
		assert first == second == expected
