# phind/core/discovery/walker.py
import os
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple, Union
import structlog

from phind.config.settings import FilterConfig
from phind.core.discovery.override import OverrideResolver, VisitedEntry
from phind.core.output import CollectingSink, EmitSink, write_to_stderr

log = structlog.get_logger(__name__)

ErrorCallback = Callable[[str], None]
PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class TraversalStats:
    # counters reported after a walk; purely informational.
    emitted: int = 0
    directories_read: int = 0
    pruned: int = 0
    errors: int = 0


def format_read_error(dir_path: str, error: OSError) -> str:
    reason = error.strerror or str(error)
    shown = dir_path.replace("\\", "/")
    if isinstance(error, PermissionError):
        return f"Permission error reading directory {shown}: {reason}"
    return f"Error reading directory {shown}: {reason}"


class DirectoryTraverser:
    """Depth-first walk of a directory tree that emits matching paths.

    The root must already be validated as an existing directory. The walk is
    pre-order: each entry is emitted before the contents of that entry (if it
    is a directory) are visited. Entries within a directory come in whatever
    order the OS lists them; callers that need a stable order sort afterwards.

    An explicit stack of open directory listings replaces call-stack
    recursion, so deep trees cannot exhaust the interpreter's recursion limit.
    Symbolic links are reported but never followed.
    """

    def __init__(self, config: FilterConfig, root: PathLike):
        self.config = config
        self.root = os.path.abspath(os.fspath(root))
        self.resolver = OverrideResolver(config)
        self.log = log.bind(root=self.root)

    def relative_path(self, full_path: str) -> str:
        if full_path == self.root:
            return "."
        rel = os.path.relpath(full_path, self.root)
        return (rel or os.path.basename(full_path)).replace("\\", "/")

    def display_path(self, entry: VisitedEntry) -> str:
        return entry.relative_path if self.config.display_relative else entry.full_path

    def _root_entry(self) -> VisitedEntry:
        name = os.path.basename(self.root) or self.root
        return VisitedEntry(name=name, full_path=self.root, relative_path=".", is_dir=True, is_file=False, is_root=True)

    def _make_entry(self, dirent: "os.DirEntry[str]") -> VisitedEntry:
        try:
            is_dir = dirent.is_dir(follow_symlinks=False)
            is_file = dirent.is_file(follow_symlinks=False)
        except OSError as e:
            self.log.debug("entry_type_unavailable", path=dirent.path, error=str(e))
            is_dir = is_file = False
        return VisitedEntry(
            name=dirent.name,
            full_path=dirent.path,
            relative_path=self.relative_path(dirent.path),
            is_dir=is_dir,
            is_file=is_file,
        )

    def _emit(self, entry: VisitedEntry, sink: EmitSink, stats: TraversalStats) -> None:
        sink.emit(self.display_path(entry))
        stats.emitted += 1

    def _read_directory(
        self,
        dir_path: str,
        depth: int,
        stats: TraversalStats,
        on_error: ErrorCallback,
    ) -> Optional[Tuple[Iterator["os.DirEntry[str]"], int]]:
        # depth is the level of dir_path itself; its entries live one level below.
        if depth >= self.config.max_depth:
            return None
        try:
            with os.scandir(dir_path) as it:
                entries = list(it)
        except OSError as e:
            stats.errors += 1
            self.log.warning("directory_read_failed", path=dir_path, error=str(e))
            on_error(format_read_error(dir_path, e))
            return None
        stats.directories_read += 1
        return iter(entries), depth + 1

    def traverse(self, sink: EmitSink, on_error: Optional[ErrorCallback] = None) -> TraversalStats:
        report = on_error or write_to_stderr
        stats = TraversalStats()
        self.log.info(
            "traversal_started",
            max_depth=self.config.max_depth,
            relative=self.config.display_relative,
        )

        # the root is evaluated as an item exactly once, before any descent.
        if self.resolver.should_emit(self._root_entry()):
            self._emit(self._root_entry(), sink, stats)

        frames: List[Tuple[Iterator["os.DirEntry[str]"], int]] = []
        root_frame = self._read_directory(self.root, 0, stats, report)
        if root_frame:
            frames.append(root_frame)

        while frames:
            entries, depth = frames[-1]
            dirent = next(entries, None)
            if dirent is None:
                frames.pop()
                continue

            entry = self._make_entry(dirent)
            if entry.is_dir and self.resolver.should_prune(entry):
                stats.pruned += 1
                self.log.debug("directory_pruned", path=entry.full_path)
                continue

            if self.resolver.should_emit(entry):
                self._emit(entry, sink, stats)

            if entry.is_dir:
                child_frame = self._read_directory(entry.full_path, depth, stats, report)
                if child_frame:
                    frames.append(child_frame)

        self.log.info(
            "traversal_complete",
            emitted=stats.emitted,
            directories_read=stats.directories_read,
            pruned=stats.pruned,
            errors=stats.errors,
        )
        return stats


def collect_paths(
    root: PathLike,
    config: FilterConfig,
    on_error: Optional[ErrorCallback] = None,
) -> List[str]:
    # runs a walk into a collecting sink and returns the paths in emission order.
    sink = CollectingSink()
    DirectoryTraverser(config, root).traverse(sink, on_error=on_error)
    return sink.paths
