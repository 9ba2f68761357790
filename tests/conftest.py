import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# pytest's tmp_path cleanup (shutil.rmtree) recurses per directory level on
# Python < 3.12; the deep-tree walker test needs more than the default limit.
sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))

from phind.config.loader import build_filter_config
from phind.config.settings import EntryType, UNLIMITED_DEPTH
from phind.core.discovery.walker import collect_paths

# nested dicts are directories, strings are file contents.
STANDARD_TREE = {
    "file1.txt": "content1",
    "file2.log": "content2",
    " Capitals.TXT": "case test",
    ".hiddenfile": "hidden content",
    ".hiddenDir": {"insideHidden.txt": "hidden dir content"},
    "dir1": {
        "file3.txt": "content3",
        "subDir1": {
            "file4.js": "content4",
            ".hiddensub": "hidden sub content",
            "another.log": "log content",
        },
        "file6.data": "data content",
        "exclude_me.tmp": "temp content",
    },
    "dir2": {"file5.log": "content5", "image.JPG": "jpeg data"},
    "dir with spaces": {"file inside spaces.txt": "spaces content"},
    ".git": {"config": "git config", "HEAD": "ref: refs/heads/main"},
    "node_modules": {"some_package": {"index.js": "module.exports = {};"}},
}


def create_tree(base_path: Path, structure: dict):
    """
    Creates directories and files under base_path.
    structure = {"dir": {"file.txt": "content"}, "top.txt": "text"}
    """
    base_path.mkdir(parents=True, exist_ok=True)
    for name, content in structure.items():
        target = base_path / name
        if isinstance(content, dict):
            create_tree(target, content)
        else:
            target.write_text(content)


def walk(
    root: Path,
    include: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
    entry_type: EntryType = EntryType.ANY,
    max_depth: int = UNLIMITED_DEPTH,
    case_fold: bool = False,
    relative: bool = True,
    errors: Optional[List[str]] = None,
) -> List[str]:
    # runs a traversal with the built-in default excludes and returns sorted paths.
    config = build_filter_config(
        include_patterns=include or ["*"],
        cli_exclude_patterns=exclude or [],
        entry_type=entry_type,
        max_depth=max_depth,
        case_fold=case_fold,
        display_relative=relative,
    )
    on_error = errors.append if errors is not None else None
    return sorted(collect_paths(root, config, on_error=on_error))


@pytest.fixture(autouse=True)
def isolated_config_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keeps the user's real config dir, ignore file and cwd out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg_config"))
    monkeypatch.delenv("PHIND_GLOBAL_IGNORE_PATH", raising=False)
    monkeypatch.delenv("APPDATA", raising=False)
    workdir = tmp_path / "workdir"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield workdir
    # handlers installed by a cli run point at that run's captured stderr.
    phind_logger = logging.getLogger("phind")
    phind_logger.handlers.clear()
    phind_logger.addHandler(logging.NullHandler())


@pytest.fixture
def standard_tree(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    create_tree(root, STANDARD_TREE)
    return root


@pytest.fixture
def build_tree(tmp_path: Path) -> Path:
    """A small project with build output and an installed dependency."""
    root = tmp_path / "app"
    create_tree(root, {
        "doc.txt": "docs",
        "build": {"output.log": "log", "app.exe": "binary"},
        "node_modules": {"pkg": {"index.js": "code"}},
    })
    return root


@pytest.fixture
def can_chmod_restrict() -> bool:
    # root bypasses directory permissions, so restricted-dir tests are skipped there.
    return hasattr(os, "geteuid") and os.geteuid() != 0
