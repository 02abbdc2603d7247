from codefacts.config import Settings
from codefacts.fs_scan import DEFAULT_IGNORE_DIRS, scan_repository


def test_defaults():
	settings = Settings()
	assert settings.python_candidates == ["python3", "python"]
	assert settings.subprocess_timeout == 60.0
	assert "node_modules" in settings.ignore_dirs


def test_comma_and_json_lists_from_environment(monkeypatch):
	monkeypatch.setenv("CODEFACTS_PYTHON_CANDIDATES", "py3, python ")
	monkeypatch.setenv("CODEFACTS_IGNORE_DIRS", '[".git", "vendor"]')
	settings = Settings()
	assert settings.python_candidates == ["py3", "python"]
	assert settings.ignore_dirs == [".git", "vendor"]


def test_timeout_can_be_disabled(monkeypatch):
	monkeypatch.setenv("CODEFACTS_SUBPROCESS_TIMEOUT", "off")
	assert Settings().subprocess_timeout is None
	monkeypatch.setenv("CODEFACTS_SUBPROCESS_TIMEOUT", "2.5")
	assert Settings().subprocess_timeout == 2.5


def test_ignore_dirs_default_is_shared_with_the_scanner(tmp_path):
	assert Settings().ignore_dirs == list(DEFAULT_IGNORE_DIRS)
	(tmp_path / ".venv").mkdir()
	(tmp_path / ".venv" / "site.py").write_text("x = 1\n")
	(tmp_path / "main.py").write_text("x = 1\n")
	assert [f.rel_path for f in scan_repository(str(tmp_path))] == ["main.py"]
