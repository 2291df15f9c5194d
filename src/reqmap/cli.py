from __future__ import annotations

import logging
import sys

import typer
from rich.console import Console
from rich.markup import escape

from reqmap.orchestrator.pipeline import run
from reqmap.utils.exceptions import ReqmapError
from reqmap.utils.logger import set_level


app = typer.Typer(no_args_is_help=True, add_completion=False)

err_console = Console(stderr=True)

_FORMATS = ("text", "table", "json")


@app.command()
def scan(
    paths: list[str] = typer.Argument(..., help="Java source files or directories to scan"),
    format: str = typer.Option("text", "--format", "-f", help="Output format: text|table|json"),
    keep_going: bool = typer.Option(False, "--keep-going", help="Skip files that fail to parse"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    """Print every @RequestMapping endpoint declared under PATHS."""
    fmt = format.lower().strip()
    if fmt not in _FORMATS:
        raise typer.BadParameter("format must be one of: text, table, json")

    previous_level = set_level(logging.WARNING) if quiet else None

    try:
        run(paths, out=sys.stdout, fmt=fmt, keep_going=keep_going)
    except (FileNotFoundError, ReqmapError) as e:
        err_console.print(f"[bold red]error[/bold red]: {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1) from e
    finally:
        if previous_level is not None:
            set_level(previous_level)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
