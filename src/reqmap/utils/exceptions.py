from __future__ import annotations


class ReqmapError(Exception):
    """Base class for errors raised by reqmap."""


class JavaSyntaxError(ReqmapError):
    """A source file could not be parsed as Java."""

    def __init__(self, file_path: str, line: int | None = None) -> None:
        self.file_path = file_path
        self.line = line
        where = file_path if line is None else f"{file_path}:{line}"
        super().__init__(f"Java syntax error in {where}")
