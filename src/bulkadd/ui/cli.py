# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, TextIO

from dotenv import load_dotenv

from bulkadd.app import run_bulk_add, service_config_from_environment
from bulkadd.common import configure_logging
from bulkadd.config import ConfigurationError
from bulkadd.domain.ingest_pipeline import AdvisoryDuplicatePolicy, SkipDuplicatesPolicy
from bulkadd.domain.model import ReferenceItem

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from bulkadd.config import ServiceConfig
    from bulkadd.domain.model import BatchReport, ItemResult

log = logging.getLogger(__name__)

EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_ITEM_FAILURES = 3


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Bulk-add restaurants from 'name | type | location | tags' lines"
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Text file with one entry per line ('-' reads stdin, the default)",
    )
    parser.add_argument(
        "--reference",
        type=Path,
        help="JSON file with existing entries ([{name, location_hint}]) to flag duplicates",
    )
    parser.add_argument(
        "--skip-duplicates",
        action="store_true",
        help="Do not process lines flagged as duplicates",
    )
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        metavar="LINE=PLACE_ID",
        help="Use PLACE_ID for input line LINE instead of the top match (repeatable)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        help="Number of lines resolved in parallel (defaults to config)",
    )
    parser.add_argument(
        "--deadline",
        type=float,
        help="Seconds after which unfinished lines are given up (defaults to config)",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def _read_input(source: str, stdin: TextIO) -> str:
    if source == "-":
        return stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _load_reference(path: Path | None) -> list[ReferenceItem]:
    if path is None:
        return []
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Reference file {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise ValueError(f"Reference file {path} must contain a JSON list")

    items: list[ReferenceItem] = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise ValueError(f"Reference entry #{index} needs a string 'name'")
        location = entry.get("location_hint", entry.get("location", ""))
        items.append(ReferenceItem(name=entry["name"], location_hint=str(location or "")))
    return items


def _parse_overrides(values: Sequence[str]) -> dict[int, str]:
    overrides: dict[int, str] = {}
    for value in values:
        line, sep, place_id = value.partition("=")
        if not sep or not place_id.strip():
            raise ValueError(f"Invalid override {value!r}; expected LINE=PLACE_ID")
        try:
            overrides[int(line)] = place_id.strip()
        except ValueError as exc:
            raise ValueError(f"Invalid override line number in {value!r}") from exc
    return overrides


def _apply_cli_overrides(services: ServiceConfig, args: argparse.Namespace) -> ServiceConfig:
    pipeline = services.pipeline
    if args.concurrency is not None:
        pipeline = replace(pipeline, concurrency=args.concurrency)
    if args.deadline is not None:
        pipeline = replace(pipeline, deadline_seconds=args.deadline)
    return replace(services, pipeline=pipeline)


def _item_to_dict(result: ItemResult) -> dict[str, object]:
    entry: dict[str, object] = {
        "line": result.line_number,
        "outcome": str(result.outcome),
        "stage": str(result.stage),
    }
    if result.reason:
        entry["reason"] = result.reason
    if result.duplicate_of is not None:
        entry["duplicate_of"] = result.duplicate_of.describe()
    if result.processed is not None:
        entry["place_id"] = result.processed.place_id
        entry["neighborhood"] = result.processed.neighborhood.name
    return entry


def render_report(report: BatchReport, *, as_json: bool, out: TextIO) -> None:
    if as_json:
        payload = {
            "summary": report.summary(),
            "items": [_item_to_dict(result) for result in report.outcomes],
        }
        print(json.dumps(payload, indent=2), file=out)
        return

    for result in report.outcomes:
        line = f"line {result.line_number}: {result.outcome}"
        if result.reason:
            line += f" at {result.stage} ({result.reason})"
        if result.duplicate_of is not None:
            line += f" [{result.duplicate_of.describe()}]"
        print(line, file=out)
    summary = report.summary()
    print(
        f"total={summary['total']} parsed={summary['parsed']} submitted={summary['submitted']} "
        f"duplicates={summary['duplicates']} submission={summary['submission']}",
        file=out,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Command line entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        raw_text = _read_input(parsed_args.input, sys.stdin)
        reference = _load_reference(parsed_args.reference)
        overrides = _parse_overrides(parsed_args.override)
        services = _apply_cli_overrides(service_config_from_environment(), parsed_args)
    except (OSError, ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    policy = SkipDuplicatesPolicy() if parsed_args.skip_duplicates else AdvisoryDuplicatePolicy()
    try:
        report = run_bulk_add(
            raw_text,
            reference,
            services=services,
            duplicate_policy=policy,
            place_overrides=overrides,
        )
    except Exception:
        log.exception("Fatal error during bulk add")
        sys.exit(EXIT_FATAL)

    render_report(report, as_json=parsed_args.json, out=sys.stdout)
    if report.failure_counts:
        sys.exit(EXIT_ITEM_FAILURES)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(130)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
