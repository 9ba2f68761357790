import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple
import structlog

from phind.exceptions import ConfigError

log = structlog.get_logger(__name__)

# version-control and dependency directories hidden unless explicitly asked for.
DEFAULT_EXCLUDE_PATTERNS: Tuple[str, ...] = ("node_modules", ".git")
DEFAULT_INCLUDE_PATTERNS: Tuple[str, ...] = ("*",)
UNLIMITED_DEPTH = sys.maxsize


class EntryType(Enum):
    # restricts which kinds of entries are emitted.
    ANY = "any"
    FILE = "f"
    DIRECTORY = "d"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "EntryType":
        if not s:
            return cls.ANY
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_entry_type_string", input_string=s)
            return cls.ANY


def _dedupe(patterns: Iterable[str]) -> Tuple[str, ...]:
    # drops repeated patterns, keeping the first occurrence.
    return tuple(dict.fromkeys(patterns))


@dataclass(frozen=True)
class FilterConfig:
    """Immutable filter settings for a single traversal.

    `exclude_patterns` is the merged list (built-in defaults, global ignore
    file, command line). `default_exclude_patterns` records which of those came
    from the built-in defaults; it only decides whether an exclusion may be
    overridden by an explicit include and is never matched on its own.
    Membership is by pattern text, so repeating a built-in default on the
    command line (`-e node_modules`) leaves it a default and still overridable.
    """

    include_patterns: Tuple[str, ...] = DEFAULT_INCLUDE_PATTERNS
    exclude_patterns: Tuple[str, ...] = ()
    default_exclude_patterns: FrozenSet[str] = field(default_factory=frozenset)
    entry_type: EntryType = EntryType.ANY
    max_depth: int = UNLIMITED_DEPTH
    case_fold: bool = False
    display_relative: bool = False

    def __post_init__(self):
        # frozen dataclass, so normalised values go through object.__setattr__.
        includes = _dedupe(self.include_patterns) or DEFAULT_INCLUDE_PATTERNS
        object.__setattr__(self, "include_patterns", includes)
        object.__setattr__(self, "exclude_patterns", _dedupe(self.exclude_patterns))
        object.__setattr__(self, "default_exclude_patterns", frozenset(self.default_exclude_patterns))

        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigError(f"max depth must be an integer, got {self.max_depth!r}")
        if self.max_depth < 0:
            raise ConfigError(f"max depth must be a non-negative number, got {self.max_depth}")

    @property
    def non_default_exclude_patterns(self) -> Tuple[str, ...]:
        return tuple(p for p in self.exclude_patterns if p not in self.default_exclude_patterns)
