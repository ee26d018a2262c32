"""Control discovery, bindings and the device-switch controller."""

from camera_controls.controls.bindings import (
    ActionBinding,
    ChoiceBinding,
    ControlBinding,
    RangeBinding,
    SwitchBinding,
)
from camera_controls.controls.controller import ControlsController, DeviceState
from camera_controls.controls.errors import (
    ControlValueError,
    ControlsError,
    DeviceOpenError,
    DeviceQueryError,
    DeviceWriteError,
    UnsupportedControlCategory,
)
from camera_controls.controls.factory import create_binding
from camera_controls.controls.grouping import group_descriptors
from camera_controls.controls.registry import ControlRegistry
from camera_controls.controls.source import ControlSource, SourceOpener
from camera_controls.controls.state import (
    ControlCategory,
    ControlDescriptor,
    ControlFlags,
    ControlGroup,
    ControlRow,
    ControlType,
    DeviceInfo,
    InfoRow,
    RowKind,
)

__all__ = [
    "ActionBinding",
    "ChoiceBinding",
    "ControlBinding",
    "ControlCategory",
    "ControlDescriptor",
    "ControlFlags",
    "ControlGroup",
    "ControlRegistry",
    "ControlRow",
    "ControlSource",
    "ControlType",
    "ControlValueError",
    "ControlsController",
    "ControlsError",
    "DeviceInfo",
    "DeviceOpenError",
    "DeviceQueryError",
    "DeviceState",
    "DeviceWriteError",
    "InfoRow",
    "RangeBinding",
    "RowKind",
    "SourceOpener",
    "SwitchBinding",
    "UnsupportedControlCategory",
    "create_binding",
    "group_descriptors",
]
