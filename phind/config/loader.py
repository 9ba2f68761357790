# phind/config/loader.py
"""
Loads the global ignore file and TOML option files, and merges them with
command-line values into a FilterConfig.
"""
import os
import sys
import toml
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence
import structlog

from phind.exceptions import ConfigError

from .settings import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_INCLUDE_PATTERNS, EntryType, FilterConfig, UNLIMITED_DEPTH

log = structlog.get_logger(__name__)

APP_DIR_NAME = "phind"
GLOBAL_IGNORE_FILENAME = "ignore"
GLOBAL_IGNORE_ENV_VAR = "PHIND_GLOBAL_IGNORE_PATH"
USER_CONFIG_FILENAME = "config.toml"
PROJECT_CONFIG_FILENAMES = [".phind.toml", "phind.toml", "pyproject.toml"]

# toml key -> cli parameter name.
CONFIG_KEY_TO_CLI_PARAM_MAP: Dict[str, str] = {
    "include_patterns": "include_patterns",
    "exclude_patterns": "exclude_patterns",
    "type": "entry_type",
    "max_depth": "max_depth",
    "ignore_case": "ignore_case",
    "relative": "relative",
    "skip_global_ignore": "skip_global_ignore",
}
_LIST_KEYS = ("include_patterns", "exclude_patterns")
_BOOL_KEYS = ("ignore_case", "relative", "skip_global_ignore")


def get_config_dir() -> Path:
    # APPDATA on windows, then XDG_CONFIG_HOME, then ~/.config.
    if sys.platform == "win32" and os.environ.get("APPDATA"):
        return Path(os.environ["APPDATA"])
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home)
    return Path.home() / ".config"


def get_global_ignore_path() -> Path:
    override = os.environ.get(GLOBAL_IGNORE_ENV_VAR)
    if override:
        return Path(os.path.abspath(override))
    return get_config_dir() / APP_DIR_NAME / GLOBAL_IGNORE_FILENAME


def parse_ignore_lines(lines: Iterable[str]) -> List[str]:
    # everything after '#' is a comment; blank lines are skipped.
    patterns = []
    for line in lines:
        pattern = line.split("#", 1)[0].strip()
        if pattern:
            patterns.append(pattern)
    return patterns


def load_global_ignore_patterns(ignore_file_path: Optional[Path] = None) -> List[str]:
    path = ignore_file_path or get_global_ignore_path()
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.debug("global_ignore_file_not_found", path=str(path))
        return []
    except (OSError, UnicodeDecodeError) as e:
        log.warning("global_ignore_file_unreadable", path=str(path), error=str(e))
        return []

    patterns = parse_ignore_lines(content.splitlines())
    log.info("global_ignore_patterns_loaded", path=str(path), count=len(patterns))
    return patterns


def merge_exclude_patterns(
    global_ignore_patterns: Sequence[str] = (),
    cli_exclude_patterns: Sequence[str] = (),
    default_patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
) -> List[str]:
    # defaults, then global ignores, then command line; first occurrence wins.
    return list(dict.fromkeys([*default_patterns, *global_ignore_patterns, *cli_exclude_patterns]))


def build_filter_config(
    include_patterns: Sequence[str] = DEFAULT_INCLUDE_PATTERNS,
    cli_exclude_patterns: Sequence[str] = (),
    global_ignore_patterns: Sequence[str] = (),
    entry_type: EntryType = EntryType.ANY,
    max_depth: int = UNLIMITED_DEPTH,
    case_fold: bool = False,
    display_relative: bool = False,
    default_patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
) -> FilterConfig:
    excludes = merge_exclude_patterns(global_ignore_patterns, cli_exclude_patterns, default_patterns)
    config = FilterConfig(
        include_patterns=tuple(include_patterns),
        exclude_patterns=tuple(excludes),
        default_exclude_patterns=frozenset(default_patterns),
        entry_type=entry_type,
        max_depth=max_depth,
        case_fold=case_fold,
        display_relative=display_relative,
    )
    log.debug(
        "filter_config_built",
        includes=list(config.include_patterns),
        excludes=list(config.exclude_patterns),
        entry_type=config.entry_type.value,
        max_depth=config.max_depth,
    )
    return config


def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file {file_path}: {e}")
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get(APP_DIR_NAME, {})
    return data


def _coerce_option_values(raw: Dict[str, Any], source: Path) -> Dict[str, Any]:
    # validates known keys and maps them to cli parameter names.
    options: Dict[str, Any] = {}
    for key, value in raw.items():
        param = CONFIG_KEY_TO_CLI_PARAM_MAP.get(key)
        if param is None:
            log.warning("unknown_config_key_ignored", key=key, source=str(source))
            continue
        if key in _LIST_KEYS:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"'{key}' in {source} must be a list of strings")
            value = tuple(value)
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                raise ConfigError(f"'{key}' in {source} must be true or false")
        elif key == "max_depth":
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"'max_depth' in {source} must be a non-negative integer")
        elif key == "type":
            if value not in ("f", "d"):
                raise ConfigError(f"'type' in {source} must be 'f' or 'd'")
        options[param] = value
    return options


def load_and_merge_configs(cwd: Optional[Path] = None) -> Dict[str, Any]:
    """User config file first, then the first project config file found in
    `cwd`; later values replace earlier ones. Keys are cli parameter names."""
    merged: Dict[str, Any] = {}
    user_config_file = get_config_dir() / APP_DIR_NAME / USER_CONFIG_FILENAME
    if user_config_file.is_file():
        log.info("loading_user_config", path=str(user_config_file))
        merged.update(_coerce_option_values(_load_toml_file_data(user_config_file), user_config_file))

    project_dir = cwd or Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = project_dir / filename
        if candidate.is_file():
            project_settings = _load_toml_file_data(candidate)
            if project_settings:
                log.info("loading_project_config", path=str(candidate))
                merged.update(_coerce_option_values(project_settings, candidate))
                break

    if not merged:
        log.debug("no_configuration_files_loaded")
    return merged
