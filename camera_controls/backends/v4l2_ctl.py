"""Control source backed by the ``v4l2-ctl`` tool from v4l-utils."""

from __future__ import annotations

import functools
import re
import subprocess
from typing import Dict, List, Optional, Sequence, Tuple

from camera_controls.controls.errors import DeviceOpenError, DeviceQueryError, DeviceWriteError
from camera_controls.controls.source import SourceOpener
from camera_controls.controls.state import (
    ControlDescriptor,
    ControlFlags,
    ControlType,
    DeviceInfo,
    RawValue,
    display_name_from_key,
)
from camera_controls.core.logging_utils import LoggerLike, ensure_structured_logger

DEFAULT_COMMAND = "v4l2-ctl"
DEFAULT_TIMEOUT_S = 2.0

# Parse lines like:
#                brightness 0x00980900 (int)    : min=0 max=255 step=1 default=128 value=128
#             auto_exposure 0x009a0901 (menu)   : min=0 max=3 default=3 value=3 (Aperture Priority Mode)
#                               1: Manual Mode
#                               3: Aperture Priority Mode
# Class headers ("User Controls", "Camera Controls") are the only unindented lines.
_CONTROL_RE = re.compile(r"^\s*(\w+)\s+0x([0-9a-f]+)\s+\(([\w-]+)\)\s*:?\s*(.*)$", re.IGNORECASE)
_MENU_ITEM_RE = re.compile(r"^\s+(-?\d+):\s+(.+)$")
_INT_MENU_HEX_RE = re.compile(r"\s*\(0x[0-9a-f]+\)\s*$", re.IGNORECASE)
_FLAGS_RE = re.compile(r"\bflags=(.+)$")
_GET_CTRL_RE = re.compile(r"^\s*(\w+)\s*:\s*(-?\d+)\s*$")

_ATTRIBUTES = ("min", "max", "step", "default")

# Class marker ids: the class bits of the following control plus one.
_CLASS_MASK = 0x0FFF0000


def parse_control_listing(text: str, *, logger: LoggerLike = None) -> List[ControlDescriptor]:
    """Turn ``v4l2-ctl --list-ctrls-menus`` output into ordered descriptors.

    Class headers become class-boundary descriptors. Their id is derived
    from the control that follows them, or 0 when none does.
    """
    log = ensure_structured_logger(logger, component="V4l2Ctl", fallback_name=__name__)
    descriptors: List[ControlDescriptor] = []
    pending_classes: List[str] = []
    menu_owner: Optional[int] = None
    menu_items: List[Tuple[int, str]] = []

    def close_menu() -> None:
        nonlocal menu_owner, menu_items
        if menu_owner is not None:
            owner = descriptors[menu_owner]
            descriptors[menu_owner] = _with_items(owner, tuple(menu_items))
        menu_owner = None
        menu_items = []

    for line in text.splitlines():
        if not line.strip():
            continue

        menu_match = _MENU_ITEM_RE.match(line)
        if menu_match and menu_owner is not None:
            label = menu_match.group(2).strip()
            if descriptors[menu_owner].control_type is ControlType.INTEGER_MENU:
                label = _INT_MENU_HEX_RE.sub("", label)
            menu_items.append((int(menu_match.group(1)), label))
            continue

        control_match = _CONTROL_RE.match(line)
        if control_match is None:
            if not line[0].isspace():
                close_menu()
                pending_classes.append(line.strip())
            else:
                log.debug("Ignoring unrecognized line: %s", line.strip())
            continue

        close_menu()
        key, hex_id, type_name, attrs_str = control_match.groups()
        control_id = int(hex_id, 16)
        for class_name in pending_classes:
            descriptors.append(_class_descriptor(class_name, (control_id & _CLASS_MASK) | 1))
        pending_classes = []

        descriptor = _control_descriptor(key, control_id, type_name, attrs_str, log)
        descriptors.append(descriptor)
        if descriptor.control_type in (ControlType.MENU, ControlType.INTEGER_MENU):
            menu_owner = len(descriptors) - 1

    close_menu()
    for class_name in pending_classes:
        descriptors.append(_class_descriptor(class_name, 0))
    return descriptors


def _control_descriptor(key: str, control_id: int, type_name: str, attrs_str: str, log) -> ControlDescriptor:
    control_type = ControlType.parse(type_name)
    flags_match = _FLAGS_RE.search(attrs_str)
    flags = ControlFlags.NONE
    if flags_match:
        flags, unknown = ControlFlags.from_names(flags_match.group(1).split(","))
        if unknown:
            log.debug("Unknown flags for %s: %s", key, ", ".join(unknown))
        attrs_str = attrs_str[: flags_match.start()]

    attrs: Dict[str, int] = {}
    for attr in _ATTRIBUTES:
        m = re.search(rf"\b{attr}=(-?\d+)", attrs_str)
        if m:
            attrs[attr] = int(m.group(1))

    if control_type is ControlType.BOOLEAN:
        attrs.setdefault("min", 0)
        attrs.setdefault("max", 1)

    log.debug(
        "v4l2 control %s: type=%s min=%s max=%s default=%s",
        key,
        type_name,
        attrs.get("min"),
        attrs.get("max"),
        attrs.get("default"),
    )
    return ControlDescriptor(
        control_id=control_id,
        name=display_name_from_key(key),
        control_type=control_type,
        key=key,
        minimum=attrs.get("min", 0),
        maximum=attrs.get("max", 0),
        step=attrs.get("step", 1),
        default=attrs.get("default", 0),
        flags=flags,
    )


def _class_descriptor(title: str, control_id: int) -> ControlDescriptor:
    return ControlDescriptor(
        control_id=control_id,
        name=title,
        control_type=ControlType.CTRL_CLASS,
        flags=ControlFlags.READ_ONLY | ControlFlags.WRITE_ONLY,
    )


def _with_items(descriptor: ControlDescriptor, items: Tuple[Tuple[int, str], ...]) -> ControlDescriptor:
    return ControlDescriptor(
        control_id=descriptor.control_id,
        name=descriptor.name,
        control_type=descriptor.control_type,
        key=descriptor.key,
        minimum=descriptor.minimum,
        maximum=descriptor.maximum,
        step=descriptor.step,
        default=descriptor.default,
        items=items,
        flags=descriptor.flags,
    )


_INFO_KEYS = {
    "driver name": "driver",
    "card type": "card",
    "bus info": "bus",
    "driver version": "version",
    "capabilities": "capabilities",
}


def parse_device_info(text: str) -> DeviceInfo:
    """Read the driver block of ``v4l2-ctl --info``.

    Capability names listed under ``Capabilities`` are appended to its
    hex mask. Only the first occurrence of each key counts.
    """
    values: Dict[str, str] = {}
    capability_names: List[str] = []
    collecting = False

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        key, sep, value = stripped.partition(":")
        if sep and value.strip() and re.search(r"\s:\s", line):
            field = _INFO_KEYS.get(key.strip().lower())
            collecting = field == "capabilities" and "capabilities" not in values
            if field and field not in values:
                values[field] = value.strip()
            continue
        if collecting:
            capability_names.append(stripped)

    if capability_names and "capabilities" in values:
        values["capabilities"] = f"{values['capabilities']} ({', '.join(capability_names)})"
    return DeviceInfo(**values)


class V4l2CtlSource:
    """Lists, reads and writes controls of one device by running ``v4l2-ctl``.

    Reads and writes address controls by the key learned from the latest
    listing, so ``list_descriptors`` must run before ``read``/``write``.
    """

    def __init__(
        self,
        path: str,
        *,
        command: str = DEFAULT_COMMAND,
        timeout: float = DEFAULT_TIMEOUT_S,
        info: Optional[DeviceInfo] = None,
        logger: LoggerLike = None,
    ) -> None:
        self._path = path
        self._command = command
        self._timeout = timeout
        self._info = info
        self._controls: Dict[int, Tuple[str, ControlType]] = {}
        self._logger = ensure_structured_logger(logger, component="V4l2Ctl", fallback_name=__name__)

    @property
    def path(self) -> str:
        return self._path

    def list_descriptors(self) -> List[ControlDescriptor]:
        output = self._run(["--list-ctrls-menus"])
        descriptors = parse_control_listing(output, logger=self._logger)
        self._controls = {
            d.control_id: (d.key, d.control_type) for d in descriptors if not d.is_boundary
        }
        self._logger.debug("Listed %d descriptors for %s", len(descriptors), self._path)
        return descriptors

    def read(self, control_id: int) -> RawValue:
        key, control_type = self._lookup(control_id, DeviceQueryError)
        output = self._run([f"--get-ctrl={key}"])
        for line in output.splitlines():
            match = _GET_CTRL_RE.match(line)
            if match and match.group(1) == key:
                value = int(match.group(2))
                if control_type is ControlType.BOOLEAN:
                    return bool(value)
                return value
        raise DeviceQueryError(f"Unexpected v4l2-ctl output for {key}: {output.strip()!r}")

    def write(self, control_id: int, value: RawValue) -> None:
        key, _control_type = self._lookup(control_id, DeviceWriteError)
        try:
            self._run([f"--set-ctrl={key}={int(value)}"])
        except DeviceQueryError as exc:
            raise DeviceWriteError(f"Setting {key}={int(value)} failed: {exc}") from exc

    def device_info(self) -> DeviceInfo:
        if self._info is None:
            self._info = parse_device_info(self._run(["--info"]))
        return self._info

    def _lookup(self, control_id: int, error: type) -> Tuple[str, ControlType]:
        entry = self._controls.get(control_id)
        if entry is None:
            raise error(f"Unknown control id {control_id:#x} on {self._path}")
        return entry

    def _run(self, args: Sequence[str]) -> str:
        cmd = [self._command, "-d", self._path, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise DeviceQueryError(f"{self._command} not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise DeviceQueryError(f"{self._command} timed out for {self._path}") from exc
        except OSError as exc:
            raise DeviceQueryError(f"{self._command} error for {self._path}: {exc}") from exc

        stderr = (result.stderr or "").strip()
        if result.returncode != 0 or "failed" in stderr.lower():
            raise DeviceQueryError(stderr or f"{self._command} exited with status {result.returncode}")
        return result.stdout

    def __repr__(self) -> str:
        return f"V4l2CtlSource(path={self._path!r}, command={self._command!r})"


def open_v4l2_device(
    path: str,
    *,
    command: str = DEFAULT_COMMAND,
    timeout: float = DEFAULT_TIMEOUT_S,
    logger: LoggerLike = None,
) -> V4l2CtlSource:
    """Open ``path`` by querying its driver info; raises ``DeviceOpenError``."""
    source = V4l2CtlSource(path, command=command, timeout=timeout, logger=logger)
    try:
        source.device_info()
    except DeviceQueryError as exc:
        raise DeviceOpenError(f"Cannot open {path}: {exc}") from exc
    return source


def v4l2_opener(
    *,
    command: str = DEFAULT_COMMAND,
    timeout: float = DEFAULT_TIMEOUT_S,
    logger: LoggerLike = None,
) -> SourceOpener:
    """Opener for ``ControlsController`` bound to one command and timeout."""
    return functools.partial(open_v4l2_device, command=command, timeout=timeout, logger=logger)


__all__ = [
    "DEFAULT_COMMAND",
    "DEFAULT_TIMEOUT_S",
    "V4l2CtlSource",
    "open_v4l2_device",
    "parse_control_listing",
    "parse_device_info",
    "v4l2_opener",
]
