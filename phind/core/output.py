import sys
from typing import List, Optional, Protocol, TextIO
import structlog

from phind.exceptions import OutputError

log = structlog.get_logger(__name__)


class EmitSink(Protocol):
    # receives each matched display path, in traversal order.
    def emit(self, path: str) -> None:
        ...


def write_to_stdout(text_content: str, stream: Optional[TextIO] = None):
    # writes text to standard output and flushes, so paths appear as they are found.
    out = stream if stream is not None else sys.stdout
    try:
        out.write(text_content)
        out.flush()
    except UnicodeEncodeError as e:
        # undecodable file names arrive as surrogate escapes; write their raw bytes.
        log.debug("stdout_write_failed_trying_binary_fallback", error=str(e))
        binary_out = getattr(out, "buffer", None)
        if binary_out is None:
            raise OutputError(f"cannot write path to output stream: {e}")
        binary_out.write(text_content.encode("utf-8", errors="surrogateescape"))
        binary_out.flush()


def write_to_stderr(message: str):
    # default error channel for traversal diagnostics.
    sys.stderr.write(message + "\n")
    sys.stderr.flush()


class StdoutSink:
    """Prints each path as soon as it is discovered."""

    def __init__(self, terminator: str = "\n", stream: Optional[TextIO] = None):
        self.terminator = terminator
        self.stream = stream

    def emit(self, path: str) -> None:
        write_to_stdout(path + self.terminator, self.stream)


class CollectingSink:
    """Accumulates paths for consumption after the walk."""

    def __init__(self):
        self.paths: List[str] = []

    def emit(self, path: str) -> None:
        self.paths.append(path)

    def __len__(self) -> int:
        return len(self.paths)
