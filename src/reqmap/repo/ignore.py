from __future__ import annotations

from pathlib import Path

# VCS and IDE metadata only; build output directories are still scanned
DEFAULT_IGNORES = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".gradle",
}


def should_ignore_dir(dir_path: Path) -> bool:
    return dir_path.name in DEFAULT_IGNORES
