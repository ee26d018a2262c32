"""Interface every control backend implements."""

from __future__ import annotations

from typing import Callable, List, Protocol, runtime_checkable

from camera_controls.controls.state import ControlDescriptor, DeviceInfo, RawValue


@runtime_checkable
class ControlSource(Protocol):
    """An open device whose controls can be listed, read and written.

    ``list_descriptors`` and ``read`` raise ``DeviceQueryError``;
    ``write`` raises ``DeviceWriteError``.
    """

    @property
    def path(self) -> str: ...

    def list_descriptors(self) -> List[ControlDescriptor]: ...

    def read(self, control_id: int) -> RawValue: ...

    def write(self, control_id: int, value: RawValue) -> None: ...

    def device_info(self) -> DeviceInfo: ...


# Opens a device path; raises DeviceOpenError when the device is unusable.
SourceOpener = Callable[[str], ControlSource]


__all__ = ["ControlSource", "SourceOpener"]
