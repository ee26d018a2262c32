"""Tk panel presenting the controller's groups as editable rows."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from camera_controls.controls.controller import ControlsController, DeviceState
from camera_controls.controls.state import ControlGroup, ControlRow, RowKind
from camera_controls.core.logging_utils import LoggerLike, ensure_structured_logger

try:  # pragma: no cover - GUI availability varies
    import tkinter as tk  # type: ignore
    from tkinter import ttk  # type: ignore
except Exception:  # pragma: no cover
    tk = None  # type: ignore
    ttk = None  # type: ignore

WINDOW_TITLE = "Camera Controls"


class ControlsPanel:
    """Window with a device path entry, one LabelFrame per group and a reset button.

    Widget edits are routed to ``controller.apply``; rows the controller
    reports as changed are written back into the widgets with change
    callbacks suppressed.
    """

    def __init__(
        self,
        root,
        controller: ControlsController,
        *,
        debounce_ms: int = 100,
        logger: LoggerLike = None,
    ) -> None:
        if tk is None:
            raise RuntimeError("tkinter is not available")
        self._root = root
        self._controller = controller
        self._debounce_ms = debounce_ms
        self._logger = ensure_structured_logger(logger, component="ControlsPanel", fallback_name=__name__)

        self._path_var: Optional[tk.StringVar] = None
        self._status_var: Optional[tk.StringVar] = None
        self._groups_frame = None
        self._row_widgets: Dict[int, Dict[str, Any]] = {}
        self._debounce_ids: Dict[int, str] = {}
        self._suppress_change = False

        self._build_ui()
        controller.add_listener(self._on_rows_changed)
        self.rebuild()

    # ------------------------------------------------------------------
    # Window construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        assert tk is not None and ttk is not None

        self._root.title(WINDOW_TITLE)
        self._root.minsize(360, 240)

        main_frame = ttk.Frame(self._root, padding=10)
        main_frame.pack(fill=tk.BOTH, expand=True)
        main_frame.columnconfigure(0, weight=1)
        main_frame.rowconfigure(1, weight=1)

        self._build_device_section(main_frame, row=0)

        self._groups_frame = ttk.Frame(main_frame)
        self._groups_frame.grid(row=1, column=0, sticky="nsew")
        self._groups_frame.columnconfigure(0, weight=1)

        self._build_buttons_section(main_frame, row=2)

    def _build_device_section(self, parent, row: int) -> None:
        frame = ttk.Frame(parent)
        frame.grid(row=row, column=0, sticky="ew", pady=(0, 8))
        frame.columnconfigure(1, weight=1)

        ttk.Label(frame, text="Device:").grid(row=0, column=0, sticky="w", padx=(0, 5))
        self._path_var = tk.StringVar(value=self._controller.device_path or "")
        entry = ttk.Entry(frame, textvariable=self._path_var)
        entry.grid(row=0, column=1, sticky="ew")
        entry.bind("<Return>", lambda e: self._switch_device())
        ttk.Button(frame, text="Open", command=self._switch_device).grid(row=0, column=2, padx=(5, 0))

    def _build_buttons_section(self, parent, row: int) -> None:
        btn_frame = ttk.Frame(parent)
        btn_frame.grid(row=row, column=0, sticky="ew", pady=(8, 0))
        btn_frame.columnconfigure(0, weight=1)

        self._status_var = tk.StringVar(value="")
        ttk.Label(btn_frame, textvariable=self._status_var).grid(row=0, column=0, sticky="w")
        ttk.Button(btn_frame, text="Reset defaults", command=self._reset_defaults).grid(row=0, column=1, sticky="e")

    # ------------------------------------------------------------------
    # Groups - dynamic rebuild
    # ------------------------------------------------------------------

    def rebuild(self) -> None:
        """Recreate every group frame from the controller's current groups."""
        if self._groups_frame is None:
            return
        for after_id in self._debounce_ids.values():
            self._root.after_cancel(after_id)
        self._debounce_ids.clear()
        for child in self._groups_frame.winfo_children():
            child.destroy()
        self._row_widgets.clear()

        groups: List[ControlGroup] = []
        info_group = self._controller.information_group()
        if info_group is not None:
            groups.append(info_group)
        groups.extend(self._controller.groups)

        if not groups:
            ttk.Label(self._groups_frame, text="No controls available").grid(row=0, column=0, padx=10, pady=10)
        for index, group in enumerate(groups):
            self._build_group(group, index)

        self._update_status()

    def _build_group(self, group: ControlGroup, index: int) -> None:
        lf = ttk.LabelFrame(self._groups_frame, text=group.title)
        lf.grid(row=index, column=0, sticky="new", pady=(0, 8), padx=2)
        lf.columnconfigure(1, weight=1)
        for row_idx, row in enumerate(group.rows):
            self._build_row(lf, row_idx, row)

    def _build_row(self, parent, row_idx: int, row: ControlRow) -> None:
        ttk.Label(parent, text=f"{row.title}:").grid(row=row_idx, column=0, sticky="w", padx=5, pady=2)
        widget_info: Dict[str, Any] = {"kind": row.kind}

        if row.kind is RowKind.SWITCH:
            var = tk.BooleanVar(value=bool(row.value))
            cb = ttk.Checkbutton(parent, variable=var, command=lambda cid=row.control_id: self._on_switch_toggled(cid))
            cb.grid(row=row_idx, column=1, sticky="w", padx=5, pady=2)
            widget_info.update(var=var, widget=cb)

        elif row.kind is RowKind.RANGE:
            frame = ttk.Frame(parent)
            frame.grid(row=row_idx, column=1, sticky="ew", padx=5, pady=2)
            frame.columnconfigure(0, weight=1)
            var = tk.DoubleVar(value=float(row.value))
            scale = ttk.Scale(
                frame,
                from_=float(row.minimum),
                to=float(row.maximum),
                variable=var,
                orient=tk.HORIZONTAL,
                command=lambda v, cid=row.control_id: self._on_scale_changed(cid, v),
            )
            scale.grid(row=0, column=0, sticky="ew")
            val_label = ttk.Label(frame, text=str(row.value), width=6, anchor="e")
            val_label.grid(row=0, column=1, padx=(4, 0))
            widget_info.update(var=var, widget=scale, value_label=val_label)

        elif row.kind is RowKind.CHOICE:
            combo = ttk.Combobox(parent, values=list(row.options), state="readonly", width=18)
            combo.grid(row=row_idx, column=1, sticky="ew", padx=5, pady=2)
            if row.selected is not None and row.options:
                combo.current(row.selected)
            combo.bind("<<ComboboxSelected>>", lambda e, cid=row.control_id: self._on_choice_selected(cid))
            widget_info.update(widget=combo)

        elif row.kind is RowKind.ACTION:
            btn = ttk.Button(parent, text=row.title, command=lambda cid=row.control_id: self._on_action(cid))
            btn.grid(row=row_idx, column=1, sticky="w", padx=5, pady=2)
            widget_info.update(widget=btn)

        else:
            ttk.Label(parent, text=row.text).grid(row=row_idx, column=1, sticky="w", padx=5, pady=1)
            return

        self._row_widgets[row.control_id] = widget_info
        self._set_enabled(widget_info, row.enabled)

    # ------------------------------------------------------------------
    # Controller -> widgets
    # ------------------------------------------------------------------

    def _on_rows_changed(self, rows: List[ControlRow]) -> None:
        self._suppress_change = True
        try:
            for row in rows:
                self._update_row(row)
        finally:
            self._suppress_change = False

    def _update_row(self, row: ControlRow) -> None:
        widget_info = self._row_widgets.get(row.control_id)
        if not widget_info:
            return
        try:
            if row.kind is RowKind.SWITCH:
                widget_info["var"].set(bool(row.value))
            elif row.kind is RowKind.RANGE:
                widget_info["widget"].configure(from_=float(row.minimum), to=float(row.maximum))
                widget_info["var"].set(float(row.value))
                widget_info["value_label"].config(text=str(row.value))
            elif row.kind is RowKind.CHOICE:
                combo = widget_info["widget"]
                combo.configure(values=list(row.options))
                if row.selected is not None and row.options:
                    combo.current(row.selected)
        except tk.TclError:
            self._logger.debug("Unable to update row %s", row.title, exc_info=True)
            return
        self._set_enabled(widget_info, row.enabled)

    def _set_enabled(self, widget_info: Dict[str, Any], enabled: bool) -> None:
        widget = widget_info.get("widget")
        if widget is None:
            return
        try:
            if widget_info["kind"] is RowKind.CHOICE:
                widget.configure(state="readonly" if enabled else "disabled")
            else:
                widget.state(["!disabled"] if enabled else ["disabled"])
        except tk.TclError:
            pass

    # ------------------------------------------------------------------
    # Widgets -> controller
    # ------------------------------------------------------------------

    def _on_switch_toggled(self, control_id: int) -> None:
        if self._suppress_change:
            return
        widget_info = self._row_widgets.get(control_id)
        if widget_info:
            self._apply(control_id, bool(widget_info["var"].get()))

    def _on_scale_changed(self, control_id: int, value: str) -> None:
        """Handle scale value change with debouncing."""
        if self._suppress_change:
            return
        widget_info = self._row_widgets.get(control_id)
        if not widget_info:
            return

        widget_info["value_label"].config(text=str(int(round(float(value)))))

        pending = self._debounce_ids.pop(control_id, None)
        if pending:
            self._root.after_cancel(pending)
        self._debounce_ids[control_id] = self._root.after(
            self._debounce_ms,
            lambda: self._on_scale_settled(control_id),
        )

    def _on_scale_settled(self, control_id: int) -> None:
        self._debounce_ids.pop(control_id, None)
        widget_info = self._row_widgets.get(control_id)
        if not widget_info:
            return
        try:
            value = float(widget_info["var"].get())
        except (ValueError, tk.TclError):
            self._logger.debug("Invalid slider value for %#x", control_id)
            return
        self._apply(control_id, value)

    def _on_choice_selected(self, control_id: int) -> None:
        if self._suppress_change:
            return
        widget_info = self._row_widgets.get(control_id)
        if widget_info:
            self._apply(control_id, widget_info["widget"].current())

    def _on_action(self, control_id: int) -> None:
        self._apply(control_id, None)

    def _apply(self, control_id: int, value: Any) -> None:
        self._logger.debug("Control changed: %#x = %s", control_id, value)
        self._controller.apply(control_id, value)

    def _reset_defaults(self) -> None:
        self._controller.reset_all_defaults()

    def _switch_device(self) -> None:
        path = (self._path_var.get() if self._path_var else "").strip()
        if not path:
            return
        self._controller.switch_device(path)
        self.rebuild()

    def _update_status(self) -> None:
        state = self._controller.state
        path = self._controller.device_path or ""
        if state is DeviceState.BOUND:
            card = self._controller.device_info.card or path
            text = f"{card} ({len(self._controller.registry)} controls)"
            self._root.title(f"{WINDOW_TITLE} - {card}")
        elif state is DeviceState.ERROR:
            text = f"Unable to use {path}"
            self._root.title(WINDOW_TITLE)
        else:
            text = "No device selected"
        if self._status_var is not None:
            self._status_var.set(text)
        if self._path_var is not None and path:
            self._path_var.set(path)


def run_panel(controller: ControlsController, *, geometry: Optional[str] = None, debounce_ms: int = 100, logger: LoggerLike = None) -> None:
    """Create the Tk root, show the panel and block in the main loop."""
    if tk is None:
        raise RuntimeError("tkinter is not available; use --mode headless")
    root = tk.Tk()
    if geometry:
        try:
            root.geometry(geometry)
        except tk.TclError:
            ensure_structured_logger(logger, fallback_name=__name__).warning("Ignoring invalid window geometry %s", geometry)
    ControlsPanel(root, controller, debounce_ms=debounce_ms, logger=logger)
    root.mainloop()


__all__ = ["ControlsPanel", "WINDOW_TITLE", "run_panel"]
