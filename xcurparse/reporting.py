# xcurparse/reporting.py
"""
Console and JSON reporting for decoded cursors.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

from rich import box
from rich.console import Console
from rich.table import Table

from xcurparse.cursor import CursorFile
from xcurparse.xcursor import CHUNK_NAMES

console = Console()


def _chunk_name(chunk_type: int) -> str:
    return CHUNK_NAMES.get(chunk_type, f"unknown ({chunk_type:#x})")


def to_json_dict(cursor: CursorFile) -> Dict[str, Any]:
    """Summarize a cursor as a JSON-serializable dict. Pixels are left out."""
    return {
        "name": cursor.name,
        "version": cursor.version,
        "declared_size": cursor.declared_size,
        "table_of_contents": [
            {"type": _chunk_name(e.type), "subtype": e.subtype, "position": e.position}
            for e in cursor.table_of_contents
        ],
        "comments": [{"kind": c.kind.name.lower(), "text": c.text} for c in cursor.comments],
        "size_classes": {
            str(size): [
                {
                    "width": f.width,
                    "height": f.height,
                    "hot_spot": list(f.hot_spot),
                    "delay_ms": f.delay_ms,
                }
                for f in frames
            ]
            for size, frames in cursor.size_classes.items()
        },
    }


def write_json(summary: Union[CursorFile, Dict[str, Any], List[Dict[str, Any]]], path: str) -> None:
    """Write one cursor, or already built summaries, to a file as pretty JSON."""
    if isinstance(summary, CursorFile):
        summary = to_json_dict(summary)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)


def render_cursor(cursor: CursorFile, out: Optional[Console] = None) -> None:
    """Render header, table of contents, comments and size classes."""
    out = out or console

    t = Table(title=f"Cursor {cursor.name or '<stream>'}", box=box.SIMPLE_HEAVY)
    t.add_column("Field", style="bold")
    t.add_column("Value")
    t.add_row("Version", f"{cursor.version:#x}")
    t.add_row("Header size", str(cursor.declared_size))
    t.add_row("ToC entries", str(len(cursor.table_of_contents)))
    t.add_row("Nominal sizes", ", ".join(str(s) for s in cursor.nominal_sizes) or "-")
    t.add_row("Frames", str(cursor.frame_count))
    out.print(t)

    if cursor.table_of_contents:
        toc = Table(title="Table of Contents", box=box.ROUNDED, title_style="bold magenta")
        toc.add_column("#", justify="right")
        toc.add_column("Type", style="cyan")
        toc.add_column("Subtype", justify="right")
        toc.add_column("Position", justify="right")
        for i, e in enumerate(cursor.table_of_contents):
            toc.add_row(str(i), _chunk_name(e.type), str(e.subtype), str(e.position))
        out.print(toc)

    if cursor.comments:
        ct = Table(title="Comments", box=box.ROUNDED, title_style="bold magenta")
        ct.add_column("Kind", style="yellow")
        ct.add_column("Text")
        for c in cursor.comments:
            ct.add_row(c.kind.name.lower(), c.text)
        out.print(ct)

    for size, frames in cursor.size_classes.items():
        ft = Table(title=f"Size {size}", box=box.ROUNDED, title_style="bold green")
        ft.add_column("Frame", justify="right")
        ft.add_column("Dimensions", style="green")
        ft.add_column("Hotspot")
        ft.add_column("Delay (ms)", justify="right")
        for i, f in enumerate(frames):
            ft.add_row(str(i), f"{f.width}x{f.height}", f"{f.hotspot_x},{f.hotspot_y}", str(f.delay_ms))
        out.print(ft)
