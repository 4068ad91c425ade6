from __future__ import annotations

import argparse
import sys
from pathlib import Path

import requests

from .content import ResourceClass
from .http_client import HttpClient
from .pipeline import STATUS_FETCH_FAILED, ExtractConfig, run
from .selection import ConsoleSelectionService

USAGE = (
    "Usage: cx-extract https://example.com [--mode=css|js] [--all] "
    '[--name "Name"] [--no-zip] [--debug]'
)


class UsageError(Exception):
    pass


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cx-extract",
        description=(
            "Extract the CSS and/or JS referenced by a web page into a "
            "client extension bundle"
        ),
    )
    p.add_argument("url", nargs="?", default=None, help="Page to extract from")
    p.add_argument(
        "-m",
        "--mode",
        default=None,
        help="css or js; omit to run both, css first",
    )
    p.add_argument(
        "-n",
        "--name",
        default=None,
        help="Visible name shared by both runs (skips the name prompt)",
    )
    p.add_argument(
        "-a",
        "--all",
        dest="include_all",
        action="store_true",
        help="Include every discovered resource without prompting",
    )
    p.add_argument(
        "--no-zip",
        "--noZip",
        dest="no_zip",
        action="store_true",
        help="Leave the staging files in place instead of writing a ZIP",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Print raw and parsed arguments before running",
    )
    p.add_argument("-o", "--out", type=Path, default=Path("output"))
    p.add_argument("--timeout", type=int, default=45)
    p.add_argument(
        "--workers",
        type=int,
        default=8,
        help="Concurrent downloads for external resources",
    )
    p.add_argument(
        "--isolate-staging",
        action="store_true",
        help="Give each resource class its own staging directory",
    )
    return p


def _modes_for(raw_mode: str | None) -> list[ResourceClass]:
    if raw_mode is None:
        return [ResourceClass.CSS, ResourceClass.JS]
    try:
        return [ResourceClass(raw_mode)]
    except ValueError:
        raise UsageError("Invalid mode. Use --mode=css or --mode=js") from None


def main(argv: list[str] | None = None) -> int:
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    args = _build_parser().parse_args(raw_argv)

    if args.debug:
        print(f"[DEBUG] raw argv: {raw_argv}")
        print(f"[DEBUG] parsed args: {vars(args)}")

    try:
        if not args.url:
            raise UsageError(USAGE)
        modes = _modes_for(args.mode)
    except UsageError as e:
        print(str(e), file=sys.stderr)
        return 1

    config = ExtractConfig(
        url=args.url,
        output_dir=args.out,
        auto_approve_all=bool(args.include_all),
        skip_archive=bool(args.no_zip),
        visible_name=args.name,
        isolate_staging=bool(args.isolate_staging),
        max_workers=int(args.workers),
    )

    session = requests.Session()
    http = HttpClient(session, timeout_s=int(args.timeout))
    results = run(config, modes, http=http, selector=ConsoleSelectionService())

    if any(r.status == STATUS_FETCH_FAILED for r in results):
        return 2
    return 0
