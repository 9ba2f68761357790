import sys
from pathlib import Path

import pytest

from phind.config.loader import (
    build_filter_config,
    get_config_dir,
    get_global_ignore_path,
    load_and_merge_configs,
    load_global_ignore_patterns,
    merge_exclude_patterns,
    parse_ignore_lines,
)
from phind.config.settings import DEFAULT_EXCLUDE_PATTERNS, EntryType, FilterConfig, UNLIMITED_DEPTH
from phind.exceptions import ConfigError


def test_global_ignore_path_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    custom = tmp_path / "my_ignores"
    monkeypatch.setenv("PHIND_GLOBAL_IGNORE_PATH", str(custom))
    assert get_global_ignore_path() == custom


def test_global_ignore_path_uses_xdg_config_home(tmp_path: Path):
    # XDG_CONFIG_HOME is pointed at tmp_path by the autouse fixture.
    assert get_global_ignore_path() == tmp_path / "xdg_config" / "phind" / "ignore"


def test_global_ignore_path_falls_back_to_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("XDG_CONFIG_HOME")
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setattr(sys, "platform", "linux")
    assert get_global_ignore_path() == tmp_path / "home" / ".config" / "phind" / "ignore"


def test_config_dir_prefers_appdata_on_windows(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    assert get_config_dir() == tmp_path / "appdata"


def test_parse_ignore_lines_strips_comments_and_blanks():
    lines = ["# a comment", "", "   ", "*.tmp", "build/  # trailing comment", "  dist  "]
    assert parse_ignore_lines(lines) == ["*.tmp", "build/", "dist"]


def test_load_global_ignore_patterns(tmp_path: Path):
    ignore_file = tmp_path / "ignore"
    ignore_file.write_text("# generated files\n*.pyc\n\n__pycache__\n")
    assert load_global_ignore_patterns(ignore_file) == ["*.pyc", "__pycache__"]


def test_missing_global_ignore_file_is_empty(tmp_path: Path):
    assert load_global_ignore_patterns(tmp_path / "does_not_exist") == []
    assert load_global_ignore_patterns() == []


def test_unreadable_global_ignore_file_is_empty(tmp_path: Path):
    # a directory in place of the file cannot be read as text.
    ignore_dir = tmp_path / "ignore_dir"
    ignore_dir.mkdir()
    assert load_global_ignore_patterns(ignore_dir) == []


def test_merge_exclude_patterns_order_and_dedupe():
    merged = merge_exclude_patterns(["*.pyc", ".git"], ["build", "*.pyc"])
    assert merged == ["node_modules", ".git", "*.pyc", "build"]


def test_build_filter_config_marks_default_excludes():
    config = build_filter_config(cli_exclude_patterns=["build"], global_ignore_patterns=["*.pyc"])
    assert config.exclude_patterns == ("node_modules", ".git", "*.pyc", "build")
    assert config.default_exclude_patterns == frozenset(DEFAULT_EXCLUDE_PATTERNS)
    assert config.non_default_exclude_patterns == ("*.pyc", "build")


def test_filter_config_defaults():
    config = FilterConfig()
    assert config.include_patterns == ("*",)
    assert config.exclude_patterns == ()
    assert config.entry_type is EntryType.ANY
    assert config.max_depth == UNLIMITED_DEPTH
    assert not config.case_fold
    assert not config.display_relative


def test_filter_config_normalizes_patterns():
    config = FilterConfig(include_patterns=(), exclude_patterns=("a", "b", "a"))
    assert config.include_patterns == ("*",)
    assert config.exclude_patterns == ("a", "b")


def test_filter_config_rejects_bad_depth():
    with pytest.raises(ConfigError, match="non-negative"):
        FilterConfig(max_depth=-1)
    with pytest.raises(ConfigError, match="integer"):
        FilterConfig(max_depth="3")


def test_entry_type_from_string():
    assert EntryType.from_string("f") is EntryType.FILE
    assert EntryType.from_string("D") is EntryType.DIRECTORY
    assert EntryType.from_string(None) is EntryType.ANY
    assert EntryType.from_string("x") is EntryType.ANY


def test_project_config_file(tmp_path: Path):
    project = tmp_path / "project"
    project.mkdir()
    (project / ".phind.toml").write_text(
        'include_patterns = ["*.py"]\n'
        'exclude_patterns = "build"\n'
        'type = "f"\n'
        "max_depth = 2\n"
        "relative = true\n"
    )
    assert load_and_merge_configs(project) == {
        "include_patterns": ("*.py",),
        "exclude_patterns": ("build",),
        "entry_type": "f",
        "max_depth": 2,
        "relative": True,
    }


def test_pyproject_tool_section(tmp_path: Path):
    project = tmp_path / "project"
    project.mkdir()
    (project / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.phind]\nignore_case = true\n')
    assert load_and_merge_configs(project) == {"ignore_case": True}


def test_pyproject_without_tool_section_is_ignored(tmp_path: Path):
    project = tmp_path / "project"
    project.mkdir()
    (project / "pyproject.toml").write_text('[project]\nname = "x"\n')
    assert load_and_merge_configs(project) == {}


def test_project_config_overrides_user_config(tmp_path: Path):
    user_dir = tmp_path / "xdg_config" / "phind"
    user_dir.mkdir(parents=True)
    (user_dir / "config.toml").write_text('relative = true\nexclude_patterns = ["*.bak"]\n')
    project = tmp_path / "project"
    project.mkdir()
    (project / "phind.toml").write_text("relative = false\n")

    assert load_and_merge_configs(project) == {"relative": False, "exclude_patterns": ("*.bak",)}


def test_unknown_config_keys_are_ignored(tmp_path: Path):
    project = tmp_path / "project"
    project.mkdir()
    (project / ".phind.toml").write_text("colour = true\nrelative = true\n")
    assert load_and_merge_configs(project) == {"relative": True}


@pytest.mark.parametrize(
    "content",
    [
        "max_depth = -1\n",
        'max_depth = "deep"\n',
        'type = "x"\n',
        "relative = 1\n",
        "include_patterns = [1, 2]\n",
        "not valid toml = \n",
    ],
)
def test_invalid_config_values_raise(tmp_path: Path, content: str):
    project = tmp_path / "project"
    project.mkdir()
    (project / ".phind.toml").write_text(content)
    with pytest.raises(ConfigError):
        load_and_merge_configs(project)


def test_repeated_default_exclude_stays_overridable():
    config = build_filter_config(cli_exclude_patterns=["node_modules", "build"])
    assert config.exclude_patterns == ("node_modules", ".git", "build")
    assert config.non_default_exclude_patterns == ("build",)
