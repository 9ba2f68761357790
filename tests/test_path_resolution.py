import os
from pathlib import Path

import pytest

from phind.core.discovery import validate_start_path
from phind.exceptions import StartPathError


def test_relative_start_path_is_made_absolute(tmp_path: Path, isolated_config_env: Path):
    (isolated_config_env / "sub").mkdir()
    assert validate_start_path("sub") == isolated_config_env / "sub"
    assert validate_start_path(".") == isolated_config_env


def test_symlinked_start_path_is_not_resolved(tmp_path: Path):
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "link"
    try:
        link.symlink_to(real, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")
    assert validate_start_path(link) == link


def test_missing_start_path(tmp_path: Path):
    missing = tmp_path / "missing"
    with pytest.raises(StartPathError, match="not found"):
        validate_start_path(str(missing))


def test_file_start_path(tmp_path: Path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    with pytest.raises(StartPathError) as exc_info:
        validate_start_path(str(target))
    assert str(exc_info.value) == f'Start path "{target}" (resolved to "{os.path.abspath(target)}") is not a directory.'
