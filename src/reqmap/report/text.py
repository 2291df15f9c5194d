"""
Output formatters for discovered endpoints.

Supports:
- text: aligned one-line-per-endpoint report (default)
- table: rich Table
- json: array of endpoint objects
"""

from __future__ import annotations

import json
from typing import Sequence, TextIO

from rich.table import Table
from rich.text import Text

from reqmap.domain.models import Endpoint


def sort_endpoints(endpoints: Sequence[Endpoint]) -> list[Endpoint]:
    # sorted() is stable: equal (path, method) keep collection order
    return sorted(endpoints, key=lambda e: (e.http_path, e.http_method))


def _max_len(values: Sequence[str]) -> int:
    return max((len(v) for v in values), default=0)


def format_report(endpoints: Sequence[Endpoint]) -> list[str]:
    """
    `[<index>] <path> <method> = <declaration_id> (<file_path>)`, one line per endpoint.

    Column widths are computed over the whole collection. An empty collection yields no lines.
    """
    ordered = sort_endpoints(endpoints)

    index_len = len(str(len(ordered)))
    path_len = _max_len([e.http_path for e in ordered])
    method_len = _max_len([e.http_method for e in ordered])
    decl_len = _max_len([e.declaration_id for e in ordered])

    lines: list[str] = []
    for i, e in enumerate(ordered, start=1):
        lines.append(
            f"[{str(i).rjust(index_len)}] "
            f"{e.http_path.ljust(path_len)} "
            f"{e.http_method.ljust(method_len)} = "
            f"{e.declaration_id.ljust(decl_len)} "
            f"({e.file_path})"
        )
    return lines


def write_report(endpoints: Sequence[Endpoint], out: TextIO) -> None:
    for line in format_report(endpoints):
        out.write(line + "\n")


def render_table(endpoints: Sequence[Endpoint]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("PATH")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("DECLARATION")
    table.add_column("FILE")

    for i, e in enumerate(sort_endpoints(endpoints), start=1):
        # Text() so brackets in paths are never parsed as markup
        table.add_row(str(i), Text(e.http_path), e.http_method, Text(e.declaration_id), Text(e.file_path))
    return table


def write_json(endpoints: Sequence[Endpoint], out: TextIO) -> None:
    data = [e.model_dump(mode="json") for e in sort_endpoints(endpoints)]
    json.dump(data, out, indent=2, ensure_ascii=False)
    out.write("\n")
