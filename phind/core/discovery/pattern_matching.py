# phind/core/discovery/pattern_matching.py
"""
Glob matching for discovery.

Patterns are compiled once into per-segment regular expressions. Supported
syntax: literal segments, `*` (anything except `/`), `**` as a whole segment
(any number of segments), `?`, character classes (`[abc]`, `[a-z]`, `[!x]`,
`[^x]`), backslash escapes and `{a,b}` brace alternatives.

A leading `.` in a path segment is significant: `*`, `?`, `[...]` and `**`
never match a segment that starts with a dot unless the pattern segment itself
starts with a literal `.`. The special segments `.` and `..` only match
themselves.
"""
import os
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple
import structlog

from phind.exceptions import DiscoveryError

log = structlog.get_logger(__name__)

GLOBSTAR = "**"
_CLASS_SPECIALS = ("\\", "[", "&", "~", "|")


def normalize_path(path_str: str) -> str:
    # collapses redundant separators and converts platform separators to '/'.
    return os.path.normpath(path_str).replace("\\", "/")


def build_candidates(name: str, full_path: str, relative_path: Optional[str] = None) -> Tuple[str, ...]:
    """Returns the strings an entry is matched by: base name, normalized
    absolute path and, when given, the normalized root-relative path."""
    candidates = [name, normalize_path(full_path)]
    if relative_path:
        rel = "." if relative_path == "." else normalize_path(relative_path)
        if rel not in candidates:
            candidates.append(rel)
    return tuple(candidates)


def _split_top_level(body: str) -> List[str]:
    options, depth, current = [], 0, []
    for ch in body:
        if ch == "," and depth == 0:
            options.append("".join(current))
            current = []
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        current.append(ch)
    options.append("".join(current))
    return options


def expand_braces(pattern: str) -> List[str]:
    """Expands `{a,b}` alternatives. Braces without a top-level comma, or
    without a closing brace, stay literal."""
    start = pattern.find("{")
    while start != -1:
        depth = 0
        for end in range(start, len(pattern)):
            ch = pattern[end]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    break
        else:
            return [pattern]

        options = _split_top_level(pattern[start + 1:end])
        if len(options) > 1:
            prefix, suffix = pattern[:start], pattern[end + 1:]
            expanded: List[str] = []
            for option in options:
                expanded.extend(expand_braces(prefix + option + suffix))
            return list(dict.fromkeys(expanded))
        start = pattern.find("{", end + 1)
    return [pattern]


def _translate_class(segment: str, i: int) -> Tuple[Optional[str], int]:
    # i points just past '['. returns (regex, next index) or (None, i) if unterminated.
    j = i
    n = len(segment)
    if j < n and segment[j] in "!^":
        j += 1
    if j < n and segment[j] == "]":
        j += 1
    while j < n and segment[j] != "]":
        j += 1
    if j >= n:
        return None, i

    body = segment[i:j]
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    for special in _CLASS_SPECIALS:
        body = body.replace(special, "\\" + special)
    if body.startswith("^"):
        body = "\\" + body
    return "[" + ("^" if negate else "") + body + "]", j + 1


def _translate_segment(segment: str) -> str:
    parts: List[str] = []
    i, n = 0, len(segment)
    while i < n:
        ch = segment[i]
        i += 1
        if ch == "*":
            while i < n and segment[i] == "*":
                i += 1
            parts.append("[^/]*")
        elif ch == "?":
            parts.append("[^/]")
        elif ch == "[":
            class_regex, i = _translate_class(segment, i)
            parts.append(class_regex if class_regex is not None else re.escape("["))
        elif ch == "\\" and i < n:
            parts.append(re.escape(segment[i]))
            i += 1
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


def _compile_segment(segment: str, case_fold: bool) -> "re.Pattern[str]":
    if segment in (".", ".."):
        body = re.escape(segment)
    elif segment.startswith(".") or segment.startswith("\\."):
        # an explicit leading dot still never matches '.' or '..'.
        body = r"(?!\.\.?\Z)" + _translate_segment(segment)
    else:
        body = r"(?!\.)" + _translate_segment(segment)
    flags = re.IGNORECASE if case_fold else 0
    return re.compile(r"(?s:" + body + r")\Z", flags)


def _is_visible(part: str) -> bool:
    return not part.startswith(".")


def _match_parts(segments: Sequence[Optional["re.Pattern[str]"]], parts: Sequence[str], si: int = 0, pi: int = 0) -> bool:
    # `None` in segments stands for a globstar.
    while si < len(segments):
        seg = segments[si]
        if seg is None:
            if si == len(segments) - 1:
                # a trailing globstar needs at least one segment: 'dir/**' is not 'dir'.
                remaining = parts[pi:]
                return bool(remaining) and all(_is_visible(p) for p in remaining)
            for k in range(pi, len(parts) + 1):
                if _match_parts(segments, parts, si + 1, k):
                    return True
                if k < len(parts) and not _is_visible(parts[k]):
                    return False
            return False
        if pi >= len(parts) or not seg.match(parts[pi]):
            return False
        si += 1
        pi += 1
    return pi == len(parts)


class GlobPattern:
    """A single compiled glob pattern (all brace alternatives)."""

    __slots__ = ("pattern", "case_fold", "_alternatives")

    def __init__(self, pattern: str, case_fold: bool = False):
        self.pattern = pattern
        self.case_fold = case_fold
        try:
            self._alternatives = [
                [None if seg == GLOBSTAR else _compile_segment(seg, case_fold) for seg in alt.split("/")]
                for alt in expand_braces(pattern)
            ]
        except re.error as e:
            raise DiscoveryError(f"invalid glob pattern '{pattern}': {e}")

    def matches(self, candidate: str) -> bool:
        parts = candidate.split("/")
        return any(_match_parts(segments, parts) for segments in self._alternatives)

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r}, case_fold={self.case_fold})"


@lru_cache(maxsize=1024)
def compile_glob(pattern: str, case_fold: bool = False) -> GlobPattern:
    return GlobPattern(pattern, case_fold)


class PatternSet:
    """An ordered group of compiled patterns matched existentially."""

    def __init__(self, patterns: Iterable[str], case_fold: bool = False):
        self.patterns: Tuple[str, ...] = tuple(patterns)
        self.case_fold = case_fold
        self._compiled = [compile_glob(p, case_fold) for p in self.patterns]

    def __bool__(self) -> bool:
        return bool(self._compiled)

    def __len__(self) -> int:
        return len(self._compiled)

    def matches(self, candidates: Sequence[str]) -> bool:
        return any(glob.matches(c) for glob in self._compiled for c in candidates)

    def matching_patterns(self, candidates: Sequence[str]) -> List[str]:
        # names of the patterns that match at least one candidate.
        return [glob.pattern for glob in self._compiled if any(glob.matches(c) for c in candidates)]


def matches_any(candidates: Sequence[str], patterns: Sequence[str], case_fold: bool = False) -> bool:
    # true if any candidate string matches any pattern.
    if not patterns:
        return False
    return PatternSet(patterns, case_fold).matches(candidates)
