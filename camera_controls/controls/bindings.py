"""Live bindings between a device control and its presentable row.

Four variants exist: switch, range, choice and action. Each one keeps
the last value the device confirmed, either through a read or a
successful write, and never updates it ahead of the device.

All variants share one surface:

- ``row``: current ``ControlRow`` snapshot for the panel
- ``apply(value)``: write a user edit; returns True when sibling
  controls may have changed and a refresh should follow
- ``update_state(descriptor)``: re-evaluate enablement only
- ``update_value(descriptor)``: re-read the value only
- ``reset_default()``: restore the declared default (range only)

``update_*`` and ``reset_default`` return True when something changed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

from camera_controls.controls.errors import ControlValueError, DeviceQueryError, DeviceWriteError
from camera_controls.controls.source import ControlSource
from camera_controls.controls.state import (
    ControlCategory,
    ControlDescriptor,
    ControlRow,
    MenuItems,
    RawValue,
    RowKind,
)
from camera_controls.core.logging_utils import LoggerLike, ensure_structured_logger

# Buttons fire on any write; the payload is ignored by the driver.
ACTION_TRIGGER_VALUE = 0


class ControlBinding(ABC):
    """Shared plumbing for the four binding variants."""

    kind: ClassVar[RowKind]
    category: ClassVar[ControlCategory]

    def __init__(self, source: ControlSource, descriptor: ControlDescriptor, *, logger: LoggerLike = None) -> None:
        assert descriptor.category is self.category, (
            f"{type(self).__name__} cannot bind {descriptor.control_type} control {descriptor.name}"
        )
        self._source = source
        self._descriptor = descriptor
        self._logger = ensure_structured_logger(logger, component="Bindings", fallback_name=__name__)
        self.control_id = descriptor.control_id
        self.title = descriptor.name
        self.enabled = descriptor.interactive

    @property
    def descriptor(self) -> ControlDescriptor:
        return self._descriptor

    @property
    @abstractmethod
    def row(self) -> ControlRow: ...

    @abstractmethod
    def apply(self, value: Any = None) -> bool: ...

    @abstractmethod
    def update_value(self, descriptor: ControlDescriptor) -> bool: ...

    def update_state(self, descriptor: ControlDescriptor) -> bool:
        enabled = descriptor.interactive
        if enabled == self.enabled:
            return False
        self.enabled = enabled
        return True

    def reset_default(self) -> bool:
        return False

    # ------------------------------------------------------------------
    # Device access

    def _writable(self) -> bool:
        if self._descriptor.read_only:
            self._logger.warning("Ignoring write to read-only control %s", self.title)
            return False
        return True

    def _write(self, value: RawValue) -> bool:
        try:
            self._source.write(self.control_id, value)
        except DeviceWriteError as exc:
            self._logger.error("Error setting control %s: %s", self.title, exc)
            return False
        self._logger.debug("Set control %s = %s", self.title, value)
        return True

    def _read_bool(self, descriptor: ControlDescriptor) -> bool:
        value = self._source.read(descriptor.control_id)
        if not isinstance(value, bool):
            raise ControlValueError(f"Value of {descriptor.name} is not a boolean: {value!r}")
        return value

    def _read_int(self, descriptor: ControlDescriptor) -> int:
        value = self._source.read(descriptor.control_id)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ControlValueError(f"Value of {descriptor.name} is not an integer: {value!r}")
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.control_id:#x}, title={self.title!r})"


class SwitchBinding(ControlBinding):
    """On/off control; a successful toggle may affect sibling controls."""

    kind = RowKind.SWITCH
    category = ControlCategory.SWITCH

    def __init__(self, source: ControlSource, descriptor: ControlDescriptor, *, logger: LoggerLike = None) -> None:
        super().__init__(source, descriptor, logger=logger)
        self.value = self._query_state(descriptor)

    @property
    def row(self) -> ControlRow:
        return ControlRow(
            kind=self.kind,
            title=self.title,
            control_id=self.control_id,
            enabled=self.enabled,
            value=self.value,
        )

    def apply(self, value: Any = None) -> bool:
        active = bool(value)
        if not self._writable() or not self._write(active):
            # The toggle widget keeps its new position until the next refresh
            return False
        self.value = active
        return True

    def update_value(self, descriptor: ControlDescriptor) -> bool:
        self._descriptor = descriptor
        active = self._query_state(descriptor)
        if active == self.value:
            return False
        self.value = active
        return True

    def _query_state(self, descriptor: ControlDescriptor) -> bool:
        try:
            return self._read_bool(descriptor)
        except DeviceQueryError as exc:
            self._logger.warning("Error while checking state of control %s: %s", descriptor.name, exc)
            return False


class RangeBinding(ControlBinding):
    """Bounded integer control.

    Numeric edits are assumed not to affect sibling controls, so ``apply``
    never asks for a refresh.
    """

    kind = RowKind.RANGE
    category = ControlCategory.RANGE

    def __init__(self, source: ControlSource, descriptor: ControlDescriptor, *, logger: LoggerLike = None) -> None:
        _check_bounds(descriptor)
        super().__init__(source, descriptor, logger=logger)
        self.value = self._query_state(descriptor)

    @property
    def minimum(self) -> int:
        return self._descriptor.minimum

    @property
    def maximum(self) -> int:
        return self._descriptor.maximum

    @property
    def step(self) -> int:
        return self._descriptor.step

    @property
    def default(self) -> int:
        return self._descriptor.default

    @property
    def row(self) -> ControlRow:
        return ControlRow(
            kind=self.kind,
            title=self.title,
            control_id=self.control_id,
            enabled=self.enabled,
            value=self.value,
            minimum=self.minimum,
            maximum=self.maximum,
            step=self.step,
        )

    def apply(self, value: Any = None) -> bool:
        try:
            target = self.coerce(value)
        except (TypeError, ValueError):
            self._logger.warning("Ignoring non-numeric value %r for %s", value, self.title)
            return False
        if self._writable() and self._write(target):
            self.value = target
        return False

    def coerce(self, value: Any) -> int:
        """Round ``value`` onto the step grid and clamp it into bounds."""
        number = int(round(float(value)))
        step = self.step
        if step > 1:
            number = self.minimum + round((number - self.minimum) / step) * step
        return max(self.minimum, min(self.maximum, number))

    def update_value(self, descriptor: ControlDescriptor) -> bool:
        _check_bounds(descriptor)
        self._descriptor = descriptor
        value = self._query_state(descriptor)
        if value == self.value:
            return False
        self.value = value
        return True

    def reset_default(self) -> bool:
        previous = self.value
        if self._writable() and self._write(self.default):
            self.value = self.default
        return self.value != previous

    def _query_state(self, descriptor: ControlDescriptor) -> int:
        try:
            return self._read_int(descriptor)
        except DeviceQueryError as exc:
            self._logger.warning("Error while checking state of control %s: %s", descriptor.name, exc)
            return descriptor.default


class ChoiceBinding(ControlBinding):
    """Selection from the device's enumerated (raw value, label) items.

    A device value that matches no item selects the first item.
    """

    kind = RowKind.CHOICE
    category = ControlCategory.CHOICE

    def __init__(self, source: ControlSource, descriptor: ControlDescriptor, *, logger: LoggerLike = None) -> None:
        _check_items(descriptor)
        super().__init__(source, descriptor, logger=logger)
        self.value = self._query_state(descriptor)
        self.selected = match_item_index(descriptor.items, self.value)

    @property
    def items(self) -> MenuItems:
        return self._descriptor.items

    @property
    def row(self) -> ControlRow:
        return ControlRow(
            kind=self.kind,
            title=self.title,
            control_id=self.control_id,
            enabled=self.enabled,
            value=self.value,
            options=tuple(label for _, label in self.items),
            selected=self.selected,
        )

    def apply(self, value: Any = None) -> bool:
        index = int(value)
        if not 0 <= index < len(self.items):
            self._logger.warning("Ignoring selection %s outside of %d items for %s", index, len(self.items), self.title)
            return False
        raw_value = self.items[index][0]
        if not self._writable() or not self._write(raw_value):
            return False
        self.value = raw_value
        self.selected = index
        return True

    def update_value(self, descriptor: ControlDescriptor) -> bool:
        _check_items(descriptor)
        items_changed = descriptor.items != self._descriptor.items
        self._descriptor = descriptor
        value = self._query_state(descriptor)
        selected = match_item_index(descriptor.items, value)
        if not items_changed and value == self.value and selected == self.selected:
            return False
        self.value = value
        self.selected = selected
        return True

    def _query_state(self, descriptor: ControlDescriptor) -> int:
        try:
            return self._read_int(descriptor)
        except DeviceQueryError as exc:
            self._logger.warning("Error while checking state of control %s: %s", descriptor.name, exc)
            return descriptor.default


class ActionBinding(ControlBinding):
    """Momentary trigger; the write itself is the action."""

    kind = RowKind.ACTION
    category = ControlCategory.ACTION

    @property
    def row(self) -> ControlRow:
        return ControlRow(
            kind=self.kind,
            title=self.title,
            control_id=self.control_id,
            enabled=self.enabled,
        )

    def apply(self, value: Any = None) -> bool:
        return self._writable() and self._write(ACTION_TRIGGER_VALUE)

    def update_value(self, descriptor: ControlDescriptor) -> bool:
        self._descriptor = descriptor
        return False


def match_item_index(items: MenuItems, value: Optional[int]) -> int:
    """Index of the item whose raw value equals ``value``, else 0."""
    for index, (raw_value, _label) in enumerate(items):
        if raw_value == value:
            return index
    return 0


def _check_items(descriptor: ControlDescriptor) -> None:
    assert descriptor.items, f"No menu items found for {descriptor.name}"


def _check_bounds(descriptor: ControlDescriptor) -> None:
    assert descriptor.minimum <= descriptor.default <= descriptor.maximum, (
        f"Default {descriptor.default} of {descriptor.name} outside "
        f"[{descriptor.minimum}, {descriptor.maximum}]"
    )


__all__ = [
    "ACTION_TRIGGER_VALUE",
    "ActionBinding",
    "ChoiceBinding",
    "ControlBinding",
    "RangeBinding",
    "SwitchBinding",
    "match_item_index",
]
