"""Presentation of control groups: Tk panel and plain-text rendering."""

from camera_controls.app.render import format_row, render_groups

__all__ = ["format_row", "render_groups"]
