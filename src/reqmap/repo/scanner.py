from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from reqmap.repo.ignore import should_ignore_dir


def scan_source_files(root: Path, suffix: str = ".java") -> list[Path]:
    """
    Return every file under root whose name ends with suffix, recursively.
    Deterministic: directories and files are visited in sorted order.
    """
    out: list[Path] = []
    for dirpath, dirs, files in os.walk(root):
        root_p = Path(dirpath)

        # prune ignored dirs, sort in place so os.walk descends in order
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(root_p / d))

        for f in sorted(files):
            if f.endswith(suffix):
                out.append(root_p / f)
    return out


def expand_paths(paths: Iterable[Path | str], suffix: str = ".java") -> list[Path]:
    """
    Resolve CLI path arguments into individual source files, in argument order.

    A directory expands to its source files; a file stands for itself whatever its suffix.
    Raises FileNotFoundError for a path that does not exist.
    """
    out: list[Path] = []
    for p in paths:
        path = Path(p).expanduser()
        if path.is_dir():
            out.extend(scan_source_files(path, suffix=suffix))
        elif path.exists():
            out.append(path)
        else:
            raise FileNotFoundError(f"No such file or directory: {path}")
    return out
