"""Exceptions raised around device control access."""

from __future__ import annotations


class ControlsError(Exception):
    """Base class for camera-controls errors."""


class DeviceQueryError(ControlsError):
    """Descriptor listing or value read failed (busy device, I/O fault)."""


class DeviceOpenError(DeviceQueryError):
    """The device could not be opened at all."""


class ControlValueError(DeviceQueryError):
    """The device returned a value of the wrong kind for the control."""


class DeviceWriteError(ControlsError):
    """The device rejected a value."""


class UnsupportedControlCategory(ControlsError):
    """No binding exists for the control's declared type."""

    def __init__(self, name: str, control_type: object) -> None:
        super().__init__(f"Unsupported control category {control_type} for {name}")
        self.name = name
        self.control_type = control_type


__all__ = [
    "ControlValueError",
    "ControlsError",
    "DeviceOpenError",
    "DeviceQueryError",
    "DeviceWriteError",
    "UnsupportedControlCategory",
]
