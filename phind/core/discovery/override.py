# phind/core/discovery/override.py
"""
Decides, per visited entry, whether a directory is pruned and whether an entry
is emitted.

Built-in default excludes (version control, dependency directories) can be
overridden by an explicit include, i.e. any include pattern other than the
bare wildcard `*`. Excludes from the global ignore file or the command line
are never overridden for emission.
"""
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import structlog

from phind.config.settings import EntryType, FilterConfig
from phind.core.discovery.pattern_matching import PatternSet, build_candidates

log = structlog.get_logger(__name__)

WILDCARD_INCLUDE = "*"
_DIRECTORY_CONTENT_SUFFIXES = ("/**", "/")


@dataclass(frozen=True)
class VisitedEntry:
    # one directory entry as seen by the walker; lives for one loop iteration.
    name: str
    full_path: str
    relative_path: str
    is_dir: bool
    is_file: bool
    is_root: bool = False


def explicit_include_patterns(include_patterns: Sequence[str]) -> Tuple[str, ...]:
    return tuple(p for p in include_patterns if p != WILDCARD_INCLUDE)


def derive_directory_patterns(
    patterns: Sequence[str],
    suffixes: Sequence[str] = _DIRECTORY_CONTENT_SUFFIXES,
) -> Tuple[str, ...]:
    """For `dir/**` and `dir/` returns `dir`, so a directory counts as
    explicitly included when its contents are."""
    derived: List[str] = []
    for pattern in patterns:
        for suffix in suffixes:
            if pattern.endswith(suffix):
                stripped = pattern[: -len(suffix)]
                if stripped:
                    derived.append(stripped)
                break
    return tuple(derived)


class OverrideResolver:
    """Applies include/exclude precedence for one traversal.

    Pruning consults the explicit includes plus their derived directory
    patterns, so `node_modules/**` keeps `node_modules` from being pruned.
    Emission of an excluded entry consults the explicit includes as written:
    `node_modules/**` lets the contents through but not `node_modules` itself.
    A trailing-slash include such as `node_modules/` names the directory, so it
    matches that directory (and only directories) for emission as well.

    The root is the start the caller chose: the bare `*` include always
    matches it, even when its name starts with a dot or it is `/`.
    """

    def __init__(self, config: FilterConfig):
        self.config = config
        case_fold = config.case_fold
        explicit = explicit_include_patterns(config.include_patterns)

        self.include_set = PatternSet(config.include_patterns, case_fold)
        self.exclude_set = PatternSet(config.exclude_patterns, case_fold)
        self.non_default_exclude_set = PatternSet(config.non_default_exclude_patterns, case_fold)
        self.explicit_include_set = PatternSet(explicit, case_fold)
        self.directory_include_set = PatternSet(derive_directory_patterns(explicit, suffixes=("/",)), case_fold)
        self.prune_override_set = PatternSet(
            tuple(dict.fromkeys(explicit + derive_directory_patterns(explicit))), case_fold
        )
        log.debug(
            "override_resolver_ready",
            explicit_includes=list(self.explicit_include_set.patterns),
            prune_overrides=list(self.prune_override_set.patterns),
        )

    def candidates(self, entry: VisitedEntry) -> Tuple[str, ...]:
        relative = entry.relative_path if self.config.display_relative else None
        return build_candidates(entry.name, entry.full_path, relative)

    def type_matches(self, entry: VisitedEntry) -> bool:
        entry_type = self.config.entry_type
        if entry_type is EntryType.FILE:
            return entry.is_file
        if entry_type is EntryType.DIRECTORY:
            return entry.is_dir
        return True

    def _included(self, entry: VisitedEntry, candidates: Tuple[str, ...], patterns: PatternSet) -> bool:
        if patterns.matches(candidates):
            return True
        return entry.is_dir and self.directory_include_set.matches(candidates)

    def should_prune(self, entry: VisitedEntry) -> bool:
        # directories only; a pruned directory is neither emitted nor read.
        candidates = self.candidates(entry)
        if not self.exclude_set.matches(candidates):
            return False
        if self.prune_override_set.matches(candidates):
            log.debug("prune_overridden_by_explicit_include", path=entry.full_path)
            return False
        return True

    def should_emit(self, entry: VisitedEntry) -> bool:
        if not self.type_matches(entry):
            return False

        candidates = self.candidates(entry)
        root_by_wildcard = entry.is_root and WILDCARD_INCLUDE in self.include_set.patterns
        if not (root_by_wildcard or self._included(entry, candidates, self.include_set)):
            return False
        if not self.exclude_set.matches(candidates):
            return True

        # excluded: only an exclusion coming purely from default patterns can be overridden.
        if self.non_default_exclude_set.matches(candidates):
            return False
        return self._included(entry, candidates, self.explicit_include_set)
