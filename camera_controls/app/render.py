"""Plain-text rendering of control groups for headless mode."""

from __future__ import annotations

from typing import Iterable, List, Optional

from camera_controls.controls.state import ControlGroup, ControlRow, RowKind

TITLE_WIDTH = 32


def format_value(row: ControlRow) -> str:
    if row.kind is RowKind.SWITCH:
        return "on" if row.value else "off"
    if row.kind is RowKind.RANGE:
        return f"{row.value}  ({row.minimum}..{row.maximum} step {row.step})"
    if row.kind is RowKind.CHOICE:
        current = row.options[row.selected] if row.options and row.selected is not None else "?"
        return f"{current}  ({' | '.join(row.options)})"
    if row.kind is RowKind.INFO:
        return row.text
    return ""


def format_row(row: ControlRow) -> str:
    tag = f"[{row.kind.value}]"
    line = f"  {row.title:<{TITLE_WIDTH}} {tag:<8} {format_value(row)}".rstrip()
    if row.kind is not RowKind.INFO and not row.enabled:
        line += "  (disabled)"
    return line


def render_groups(groups: Iterable[ControlGroup], *, header: Optional[str] = None) -> str:
    """One ``== Title ==`` block per group, rows in order."""
    lines: List[str] = []
    if header:
        lines.append(header)
        lines.append("")
    for group in groups:
        lines.append(f"== {group.title} ==")
        lines.extend(format_row(row) for row in group.rows)
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


__all__ = ["format_row", "format_value", "render_groups"]
