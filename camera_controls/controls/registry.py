"""Mapping of control id to its live binding for the bound device."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from camera_controls.controls.bindings import ControlBinding


class ControlRegistry:
    """One binding per control id; rebuilt wholesale on every device switch."""

    def __init__(self) -> None:
        self._bindings: Dict[int, ControlBinding] = {}

    def add(self, binding: ControlBinding) -> None:
        if binding.control_id in self._bindings:
            raise ValueError(f"Control id {binding.control_id:#x} already registered")
        self._bindings[binding.control_id] = binding

    def get(self, control_id: int) -> Optional[ControlBinding]:
        return self._bindings.get(control_id)

    def bindings(self) -> List[ControlBinding]:
        return list(self._bindings.values())

    def clear(self) -> None:
        self._bindings.clear()

    def __contains__(self, control_id: object) -> bool:
        return control_id in self._bindings

    def __iter__(self) -> Iterator[ControlBinding]:
        return iter(list(self._bindings.values()))

    def __len__(self) -> int:
        return len(self._bindings)


__all__ = ["ControlRegistry"]
