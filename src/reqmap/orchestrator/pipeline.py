from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Collection, Iterable, Literal, Optional, TextIO

from rich.console import Console

from reqmap.config import Config
from reqmap.domain.models import Endpoint
from reqmap.extractors.spring.parser import parse_java_file
from reqmap.orchestrator.collector import EndpointCollector
from reqmap.report.text import render_table, write_json, write_report
from reqmap.repo.scanner import expand_paths
from reqmap.utils.exceptions import JavaSyntaxError
from reqmap.utils.logger import get_logger

logger = get_logger(__name__)

OutputFormat = Literal["text", "table", "json"]


@dataclass(frozen=True)
class ScanResult:
    endpoints: list[Endpoint]
    files_scanned: int
    unresolved: list[str]  # declaration ids dropped for lack of an HTTP method
    skipped_files: list[str]  # only populated with keep_going


def collect_endpoints(
    paths: Iterable[Path | str],
    suffix: Optional[str] = None,
    annotation_names: Optional[Collection[str]] = None,
    keep_going: bool = False,
) -> ScanResult:
    """
    Expand paths, parse every source file on its own and collect endpoints.

    Files are processed strictly one after another, each with a fresh parser,
    so types with the same name in different files never clash.
    """
    files = expand_paths(paths, suffix=suffix or Config.SOURCE_SUFFIX)
    collector = EndpointCollector(annotation_names or Config.annotation_names())
    skipped: list[str] = []

    for f in files:
        file_path = str(f)
        logger.info("%d endpoints so far. Processing %s", len(collector), file_path)
        try:
            declarations = parse_java_file(f)
        except JavaSyntaxError as e:
            if not keep_going:
                raise
            logger.warning("Skipping %s", e)
            skipped.append(file_path)
            continue
        collector.collect(declarations, file_path)

    return ScanResult(
        endpoints=collector.endpoints,
        files_scanned=len(files),
        unresolved=collector.unresolved,
        skipped_files=skipped,
    )


def write_output(endpoints: list[Endpoint], out: TextIO, fmt: OutputFormat = "text") -> None:
    # nothing at all is printed for an empty text or table report
    if fmt == "text":
        write_report(endpoints, out)
    elif fmt == "table":
        if endpoints:
            Console(file=out, soft_wrap=True).print(render_table(endpoints))
    elif fmt == "json":
        write_json(endpoints, out)
    else:
        raise ValueError(f"Unknown output format: {fmt}")


def run(
    paths: Iterable[Path | str],
    out: TextIO,
    fmt: OutputFormat = "text",
    keep_going: bool = False,
) -> ScanResult:
    """Collect endpoints from paths and write the report to out."""
    result = collect_endpoints(paths, keep_going=keep_going)
    write_output(result.endpoints, out, fmt=fmt)

    logger.info(
        "Files scanned: %d, endpoints: %d, unresolved declarations: %d, skipped files: %d",
        result.files_scanned,
        len(result.endpoints),
        len(result.unresolved),
        len(result.skipped_files),
    )
    for decl_id in result.unresolved:
        logger.debug("No HTTP method resolved for %s", decl_id)

    return result
