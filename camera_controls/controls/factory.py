"""Map a control descriptor to the binding variant for its declared type."""

from __future__ import annotations

from typing import Dict, Type

from camera_controls.controls.bindings import (
    ActionBinding,
    ChoiceBinding,
    ControlBinding,
    RangeBinding,
    SwitchBinding,
)
from camera_controls.controls.errors import UnsupportedControlCategory
from camera_controls.controls.source import ControlSource
from camera_controls.controls.state import ControlCategory, ControlDescriptor
from camera_controls.core.logging_utils import LoggerLike

BINDING_TYPES: Dict[ControlCategory, Type[ControlBinding]] = {
    ControlCategory.SWITCH: SwitchBinding,
    ControlCategory.RANGE: RangeBinding,
    ControlCategory.CHOICE: ChoiceBinding,
    ControlCategory.ACTION: ActionBinding,
}


def create_binding(
    descriptor: ControlDescriptor,
    source: ControlSource,
    *,
    logger: LoggerLike = None,
) -> ControlBinding:
    """Build the binding for ``descriptor``, reading its current value from ``source``.

    Raises ``UnsupportedControlCategory`` for string, bitmask, area,
    class and unknown types.
    """
    binding_type = BINDING_TYPES.get(descriptor.category)
    if binding_type is None:
        raise UnsupportedControlCategory(descriptor.name, descriptor.control_type.value)
    return binding_type(source, descriptor, logger=logger)


__all__ = ["BINDING_TYPES", "create_binding"]
