# mediaconv/utils/sizes.py
import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def human_size(n: int) -> str:
    """1536 -> '1.5KB'. Binary multiples, at most two decimals."""
    value = float(n)
    for unit in _UNITS:
        if abs(value) < 1024 or unit == _UNITS[-1]:
            if unit == "B":
                return f"{int(value)}B"
            return f"{value:.2f}".rstrip("0").rstrip(".") + unit
        value /= 1024


def size_of_file(path) -> int:
    return os.lstat(path).st_size


def size_of_directory(path) -> int:
    """
    Total bytes of every regular file below `path`, media or not.

    Entries that cannot be read are skipped so one bad subfolder does not
    lose the size of the rest. Symlinks are not followed.
    """
    total = 0
    stack = [Path(path)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            log.debug("size: skipping unreadable directory %s: %s", current, e)
            continue
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
                elif entry.is_file(follow_symlinks=False):
                    total += entry.stat(follow_symlinks=False).st_size
            except OSError as e:
                log.debug("size: skipping %s: %s", entry.path, e)
    return total
