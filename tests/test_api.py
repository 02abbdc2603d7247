from fastapi.testclient import TestClient

from api import app


client = TestClient(app)


def test_analyze_source_unit():
	response = client.post("/analyze", json={"path": "a.js", "language": "js", "text": "console.log(1);"})
	assert response.status_code == 200
	body = response.json()
	assert body["language"] == "javascript"
	assert body["call_order"] == ["console.log"]
	assert body["io_summary"] == "Outputs{LOG:console.log}"
	assert body["side_effects_summary"] == "SideEffects{LOG:console}"
	assert body["diagnostic"] is None


def test_analyze_infers_language_from_path():
	response = client.post("/analyze", json={"path": "Main.cs", "text": "using System;\n"})
	assert response.status_code == 200
	assert response.json()["dependencies"] == ["System"]


def test_analyze_tree_rejects_missing_directory(tmp_path):
	response = client.post("/analyze/tree", json={"root_path": str(tmp_path / "missing")})
	assert response.status_code == 400


def test_analyze_tree(tmp_path):
	(tmp_path / "data.json").write_text('{"entry": "./main.js"}')
	response = client.post("/analyze/tree", json={"root_path": str(tmp_path)})
	assert response.status_code == 200
	body = response.json()
	assert [f["language"] for f in body["files"]] == ["json"]
	assert body["results"][0]["dependencies"] == ["./main.js"]


def test_languages():
	response = client.get("/languages")
	assert response.status_code == 200
	assert {"javascript", "csharp", "python"} <= set(response.json())
