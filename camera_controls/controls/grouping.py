"""Partition the device's descriptor stream into titled control groups."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Set

from camera_controls.controls.bindings import ControlBinding
from camera_controls.controls.errors import UnsupportedControlCategory
from camera_controls.controls.state import DEFAULT_GROUP_TITLE, ControlDescriptor, ControlGroup
from camera_controls.core.logging_utils import LoggerLike, ensure_structured_logger

BindingBuilder = Callable[[ControlDescriptor], ControlBinding]


def group_descriptors(
    descriptors: Iterable[ControlDescriptor],
    bind: BindingBuilder,
    *,
    logger: LoggerLike = None,
) -> List[ControlGroup]:
    """Walk ``descriptors`` once, in device order, and return non-empty groups.

    A class boundary closes the running group and opens one titled with
    the boundary's label. Controls seen before any boundary land in a
    synthesized "Controls" group. Disabled controls and types without a
    binding are left out; a group that ends up empty is dropped.
    """
    log = ensure_structured_logger(logger, component="Grouping", fallback_name=__name__)
    groups: List[ControlGroup] = []
    current: Optional[ControlGroup] = None
    seen: Set[int] = set()

    for descriptor in descriptors:
        if descriptor.disabled:
            log.debug("Skipping disabled control %s", descriptor.name)
            continue

        if descriptor.is_boundary:
            _close(groups, current)
            current = ControlGroup(title=descriptor.name)
            continue

        if descriptor.control_id in seen:
            log.warning("Skipping duplicate control id %#x (%s)", descriptor.control_id, descriptor.name)
            continue

        try:
            binding = bind(descriptor)
        except UnsupportedControlCategory as exc:
            log.info("%s", exc)
            continue

        seen.add(descriptor.control_id)
        if current is None:
            current = ControlGroup(title=DEFAULT_GROUP_TITLE)
        current.add(binding)

    _close(groups, current)
    return groups


def _close(groups: List[ControlGroup], group: Optional[ControlGroup]) -> None:
    if group is not None and len(group):
        groups.append(group)


__all__ = ["BindingBuilder", "group_descriptors"]
