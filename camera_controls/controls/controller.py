"""
Controls Controller - owns the bound device, its groups and its bindings.

The controller is the only object the panel talks to. It tracks one of
three states:
- UNBOUND: no device selected yet
- BOUND: a device is open and its controls are grouped and registered
- ERROR: the last switch failed; a single "Error" group explains why

State transitions all go through switch_device(). User edits go through
apply(), which triggers a refresh of every binding when the edited
binding reports that sibling controls may have changed.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, List, Optional

from camera_controls.controls.bindings import ControlBinding
from camera_controls.controls.errors import DeviceQueryError
from camera_controls.controls.factory import create_binding
from camera_controls.controls.grouping import group_descriptors
from camera_controls.controls.registry import ControlRegistry
from camera_controls.controls.source import ControlSource, SourceOpener
from camera_controls.controls.state import ControlGroup, ControlRow, DeviceInfo, error_group
from camera_controls.core.logging_utils import LoggerLike, ensure_structured_logger

INFO_GROUP_TITLE = "Information"

# Receives the rows whose enablement or value changed.
ChangeListener = Callable[[List[ControlRow]], None]


class DeviceState(Enum):
    """Binding state of the controller."""
    UNBOUND = "unbound"
    BOUND = "bound"
    ERROR = "error"


class ControlsController:
    """Device-switch state machine plus refresh coordination for one panel."""

    def __init__(self, opener: SourceOpener, *, logger: LoggerLike = None) -> None:
        self.logger = ensure_structured_logger(logger, component="ControlsController", fallback_name=__name__)
        self._opener = opener
        self._source: Optional[ControlSource] = None
        self._listeners: List[ChangeListener] = []

        self.registry = ControlRegistry()
        self.groups: List[ControlGroup] = []
        self.state = DeviceState.UNBOUND
        self.device_path: Optional[str] = None
        self.device_info = DeviceInfo()
        self.error_message: Optional[str] = None

    @property
    def source(self) -> Optional[ControlSource]:
        return self._source

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def information_group(self) -> Optional[ControlGroup]:
        """Device details as read-only rows, or None unless bound."""
        if self.state is not DeviceState.BOUND:
            return None
        return ControlGroup(title=INFO_GROUP_TITLE, entries=list(self.device_info.as_rows()))

    # =========================================================================
    # Device switching
    # =========================================================================

    def switch_device(self, path: str) -> DeviceState:
        """Drop every binding of the previous device and attach to ``path``."""
        self.logger.info("Switching to device %s", path)
        self.registry = ControlRegistry()
        self.groups = []
        self._source = None
        self.device_info = DeviceInfo()
        self.device_path = path
        self.error_message = None
        self.state = DeviceState.UNBOUND

        try:
            source = self._opener(path)
            descriptors = source.list_descriptors()
        except DeviceQueryError as exc:
            self._enter_error(str(exc))
            return self.state

        def bind(descriptor):
            return create_binding(descriptor, source, logger=self.logger)

        groups = group_descriptors(descriptors, bind, logger=self.logger)
        registry = ControlRegistry()
        for group in groups:
            for entry in group.entries:
                if isinstance(entry, ControlBinding):
                    registry.add(entry)

        self._source = source
        self.groups = groups
        self.registry = registry
        self.device_info = self._query_device_info(source)
        self.state = DeviceState.BOUND
        self.logger.info(
            "Bound %s: %d controls in %d groups",
            path,
            len(registry),
            len(groups),
        )
        return self.state

    def _enter_error(self, message: str) -> None:
        self.logger.error("Error opening device %s: %s", self.device_path, message)
        self.error_message = message
        self.groups = [error_group(message)]
        self.state = DeviceState.ERROR

    def _query_device_info(self, source: ControlSource) -> DeviceInfo:
        try:
            return source.device_info()
        except DeviceQueryError as exc:
            self.logger.warning("Error querying caps for device %s: %s", source.path, exc)
            return DeviceInfo()

    # =========================================================================
    # User edits
    # =========================================================================

    def apply(self, control_id: int, value: Any = None) -> bool:
        """Write a user edit; returns True when a refresh followed."""
        binding = self.registry.get(control_id)
        if binding is None:
            self.logger.warning("No control with id %#x on %s", control_id, self.device_path)
            return False
        previous = binding.row
        refresh_requested = binding.apply(value)
        changed = [binding.row] if binding.row != previous else []
        if changed:
            self._notify(changed)
        if not refresh_requested:
            return False
        self.refresh()
        return True

    def refresh(self) -> List[ControlRow]:
        """Re-query every descriptor and resynchronize the registered bindings.

        Descriptors unknown to the registry and bindings missing from the
        new listing are left alone. Returns the rows that changed.
        """
        if self._source is None:
            return []
        try:
            descriptors = self._source.list_descriptors()
        except DeviceQueryError as exc:
            self.logger.error("Error querying controls for device %s: %s", self.device_path, exc)
            return []

        changed: List[ControlRow] = []
        for descriptor in descriptors:
            binding = self.registry.get(descriptor.control_id)
            if binding is None:
                continue
            state_changed = binding.update_state(descriptor)
            value_changed = binding.update_value(descriptor)
            if state_changed or value_changed:
                changed.append(binding.row)

        self.logger.debug("Refresh updated %d controls", len(changed))
        if changed:
            self._notify(changed)
        return changed

    def reset_all_defaults(self) -> List[ControlRow]:
        """Restore every range control to its declared default."""
        changed = [binding.row for binding in self.registry if binding.reset_default()]
        self.logger.info("Reset %d controls to defaults", len(changed))
        if changed:
            self._notify(changed)
        return changed

    def _notify(self, rows: List[ControlRow]) -> None:
        for listener in list(self._listeners):
            try:
                listener(rows)
            except Exception:
                self.logger.exception("Change listener failed")


__all__ = ["ChangeListener", "ControlsController", "DeviceState", "INFO_GROUP_TITLE"]
