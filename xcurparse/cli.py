# xcurparse/cli.py
"""
cli.py

Rich console CLI:
- info:    decode one or more cursor files and print header, table of
           contents, comments and size classes.
- sniff:   report whether files carry the Xcursor magic.
- extract: write every frame as a PNG image.
- version: show the package version.
"""
from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich.console import Console

from xcurparse import __version__
from xcurparse.config import XCURSOR_IMAGE_MAX_SIZE, XCURSOR_MAX_TOC, DecoderLimits
from xcurparse.errors import XCursorError
from xcurparse.logging import configure_logging
from xcurparse.reporting import render_cursor, to_json_dict, write_json
from xcurparse.xcursor import XCursorDecoder, is_xcursor

console = Console()


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return n


def _add_decode_options(sp: argparse.ArgumentParser) -> None:
    sp.add_argument("--debug", action="store_true", help="Enable debug logging")
    sp.add_argument(
        "--strict",
        action="store_true",
        help="Fail when a chunk type differs from its table of contents entry",
    )
    sp.add_argument(
        "--max-toc",
        type=_non_negative_int,
        default=XCURSOR_MAX_TOC,
        metavar="N",
        help=f"Largest accepted table of contents (default: {XCURSOR_MAX_TOC})",
    )
    sp.add_argument(
        "--max-dimension",
        type=_non_negative_int,
        default=XCURSOR_IMAGE_MAX_SIZE,
        metavar="PX",
        help=f"Largest accepted image width or height (default: {XCURSOR_IMAGE_MAX_SIZE})",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="xcurparse",
        description="Inspect X-Windows cursor (Xcursor) files.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = p.add_subparsers(dest="cmd", title="Available Commands", metavar="<command>")

    sp_info = sub.add_parser("info", help="Decode cursor files and print their contents")
    sp_info.add_argument("paths", nargs="+", metavar="PATH", help="Cursor file(s)")
    sp_info.add_argument(
        "--json-out", type=str, default=None, help="Write a JSON summary to this path"
    )
    _add_decode_options(sp_info)

    sp_sniff = sub.add_parser("sniff", help="Check files for the Xcursor magic")
    sp_sniff.add_argument("paths", nargs="+", metavar="PATH", help="File(s) to check")

    sp_extract = sub.add_parser("extract", help="Write every frame as a PNG image")
    sp_extract.add_argument("path", help="Cursor file")
    sp_extract.add_argument("--out", required=True, help="Output directory")
    sp_extract.add_argument(
        "--size", type=int, default=None, help="Only extract this nominal size"
    )
    _add_decode_options(sp_extract)

    sub.add_parser("version", help="Show the version of xcurparse")

    return p


def _decoder(args: argparse.Namespace) -> XCursorDecoder:
    return XCursorDecoder(
        DecoderLimits(
            max_toc_entries=args.max_toc,
            max_dimension=args.max_dimension,
            strict_types=args.strict,
        )
    )


def _missing(paths: List[str]) -> List[str]:
    missing = [p for p in paths if not os.path.exists(p)]
    for p in missing:
        console.print(f"[red]File not found:[/red] {p}")
    return missing


def _cmd_info(args: argparse.Namespace) -> int:
    if _missing(args.paths):
        return 2
    decoder = _decoder(args)
    failed = False
    summaries = []
    for path in args.paths:
        try:
            cursor = decoder.decode(path, check_magic=True)
        except XCursorError as e:
            console.print(f"[red]{path}: {type(e).__name__}:[/red] {e}")
            failed = True
            continue
        render_cursor(cursor, console)
        summaries.append(to_json_dict(cursor))

    if args.json_out:
        write_json(summaries[0] if len(summaries) == 1 else summaries, args.json_out)
        console.print(f"[dim]Wrote JSON summary → {args.json_out}[/dim]")
    return 1 if failed else 0


def _cmd_sniff(args: argparse.Namespace) -> int:
    for path in args.paths:
        verdict = "[green]xcursor[/green]" if is_xcursor(path) else "[yellow]not xcursor[/yellow]"
        console.print(f"{path}: {verdict}")
    return 0


def _cmd_extract(args: argparse.Namespace) -> int:
    if _missing([args.path]):
        return 2
    try:
        cursor = _decoder(args).decode(args.path, check_magic=True)
    except XCursorError as e:
        console.print(f"[red]{args.path}: {type(e).__name__}:[/red] {e}")
        return 1

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    stem = cursor.name or "cursor"
    written = 0
    for size, frames in cursor.size_classes.items():
        if args.size is not None and size != args.size:
            continue
        for i, frame in enumerate(frames):
            target = out_dir / f"{stem}_{size}_{i:03d}.png"
            frame.to_image().save(target)
            logger.debug("wrote {}", target)
            written += 1
    console.print(f"[dim]Wrote {written} frame(s) → {out_dir}[/dim]")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "version":
        console.print(f"xcurparse version {__version__}")
        return 0

    configure_logging(debug=getattr(args, "debug", False))

    if args.cmd == "info":
        return _cmd_info(args)
    if args.cmd == "sniff":
        return _cmd_sniff(args)
    if args.cmd == "extract":
        return _cmd_extract(args)

    parser.print_help()
    return 1
