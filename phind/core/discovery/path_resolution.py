import os
import stat
from pathlib import Path
from typing import Union
import structlog

from phind.exceptions import StartPathError

log = structlog.get_logger(__name__)

def validate_start_path(start_arg: Union[str, "os.PathLike[str]"]) -> Path:
    # resolves the starting path to an absolute path (symlinks are kept as given)
    # and confirms it is an accessible directory.
    start_str = os.fspath(start_arg)
    start_path = Path(os.path.abspath(start_str))
    described = f'Start path "{start_str}" (resolved to "{start_path}")'

    try:
        st = os.stat(start_path)
    except FileNotFoundError:
        raise StartPathError(f"{described} not found.")
    except PermissionError:
        raise StartPathError(f"Permission denied accessing start path \"{start_str}\" (resolved to \"{start_path}\").")
    except OSError as e:
        raise StartPathError(f"Error accessing start path \"{start_str}\" (resolved to \"{start_path}\"): {e.strerror or e}")

    if not stat.S_ISDIR(st.st_mode):
        raise StartPathError(f"{described} is not a directory.")

    log.info("start_path_validated", path=str(start_path))
    return start_path
