"""Data models for device controls, rows and groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, Flag
from typing import Any, Iterable, List, Optional, Protocol, Tuple, Union

# Raw control value as exchanged with the device: bool for switches, int otherwise.
RawValue = Union[bool, int]

MenuItems = Tuple[Tuple[int, str], ...]

DEFAULT_GROUP_TITLE = "Controls"
ERROR_GROUP_TITLE = "Error"


class ControlType(Enum):
    """Device-declared control type, named as ``v4l2-ctl`` prints it."""

    INTEGER = "int"
    INTEGER64 = "int64"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    BOOLEAN = "bool"
    MENU = "menu"
    INTEGER_MENU = "intmenu"
    BUTTON = "button"
    CTRL_CLASS = "class"
    STRING = "str"
    BITMASK = "bitmask"
    AREA = "area"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, text: str) -> "ControlType":
        try:
            return cls(text.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class ControlCategory(Enum):
    """Binding category a control type maps onto."""

    SWITCH = "switch"
    RANGE = "range"
    CHOICE = "choice"
    ACTION = "action"
    CLASS = "class"
    UNSUPPORTED = "unsupported"


_CATEGORY_BY_TYPE = {
    ControlType.BOOLEAN: ControlCategory.SWITCH,
    ControlType.INTEGER: ControlCategory.RANGE,
    ControlType.INTEGER64: ControlCategory.RANGE,
    ControlType.U8: ControlCategory.RANGE,
    ControlType.U16: ControlCategory.RANGE,
    ControlType.U32: ControlCategory.RANGE,
    ControlType.MENU: ControlCategory.CHOICE,
    ControlType.INTEGER_MENU: ControlCategory.CHOICE,
    ControlType.BUTTON: ControlCategory.ACTION,
    ControlType.CTRL_CLASS: ControlCategory.CLASS,
}


class ControlFlags(Flag):
    """Control flags; bit values follow ``V4L2_CTRL_FLAG_*``."""

    NONE = 0
    DISABLED = 0x0001
    GRABBED = 0x0002
    READ_ONLY = 0x0004
    UPDATE = 0x0008
    INACTIVE = 0x0010
    SLIDER = 0x0020
    WRITE_ONLY = 0x0040
    VOLATILE = 0x0080
    HAS_PAYLOAD = 0x0100
    EXECUTE_ON_WRITE = 0x0200
    MODIFY_LAYOUT = 0x0400
    DYNAMIC_ARRAY = 0x0800

    @classmethod
    def from_names(cls, names: Iterable[str]) -> Tuple["ControlFlags", List[str]]:
        """Combine flag names such as ``read-only``; returns (flags, unknown names)."""
        flags = cls.NONE
        unknown: List[str] = []
        for name in names:
            key = name.strip().lower()
            if not key:
                continue
            member = FLAG_NAMES.get(key)
            if member is None:
                unknown.append(key)
            else:
                flags |= member
        return flags, unknown


FLAG_NAMES = {
    "disabled": ControlFlags.DISABLED,
    "grabbed": ControlFlags.GRABBED,
    "read-only": ControlFlags.READ_ONLY,
    "update": ControlFlags.UPDATE,
    "inactive": ControlFlags.INACTIVE,
    "slider": ControlFlags.SLIDER,
    "write-only": ControlFlags.WRITE_ONLY,
    "volatile": ControlFlags.VOLATILE,
    "has-payload": ControlFlags.HAS_PAYLOAD,
    "execute-on-write": ControlFlags.EXECUTE_ON_WRITE,
    "modify-layout": ControlFlags.MODIFY_LAYOUT,
    "dynamic-array": ControlFlags.DYNAMIC_ARRAY,
}


@dataclass(slots=True, frozen=True)
class ControlDescriptor:
    """Device-reported metadata for one control, as of the latest query."""

    control_id: int
    name: str
    control_type: ControlType
    key: str = ""
    minimum: int = 0
    maximum: int = 0
    step: int = 1
    default: int = 0
    items: MenuItems = ()
    flags: ControlFlags = ControlFlags.NONE

    @property
    def category(self) -> ControlCategory:
        return _CATEGORY_BY_TYPE.get(self.control_type, ControlCategory.UNSUPPORTED)

    @property
    def is_boundary(self) -> bool:
        return self.control_type is ControlType.CTRL_CLASS

    @property
    def disabled(self) -> bool:
        return bool(self.flags & ControlFlags.DISABLED)

    @property
    def read_only(self) -> bool:
        return bool(self.flags & ControlFlags.READ_ONLY)

    @property
    def inactive(self) -> bool:
        return bool(self.flags & ControlFlags.INACTIVE)

    @property
    def write_only(self) -> bool:
        return bool(self.flags & ControlFlags.WRITE_ONLY)

    @property
    def interactive(self) -> bool:
        """Editable right now: neither read-only nor inactive."""
        return not (self.read_only or self.inactive)


class RowKind(Enum):
    SWITCH = "switch"
    RANGE = "range"
    CHOICE = "choice"
    ACTION = "action"
    INFO = "info"


@dataclass(slots=True, frozen=True)
class ControlRow:
    """Snapshot of one row as a panel presents it."""

    kind: RowKind
    title: str
    control_id: Optional[int] = None
    enabled: bool = True
    value: Any = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    step: Optional[int] = None
    options: Tuple[str, ...] = ()
    selected: Optional[int] = None
    text: str = ""


class PresentableEntry(Protocol):
    @property
    def row(self) -> ControlRow: ...


@dataclass(slots=True, frozen=True)
class InfoRow:
    """Read-only label/text entry, used for messages and device details."""

    title: str
    text: str

    @property
    def row(self) -> ControlRow:
        return ControlRow(kind=RowKind.INFO, title=self.title, text=self.text, enabled=False)


@dataclass(slots=True)
class ControlGroup:
    """Ordered entries sharing one device-declared control class."""

    title: str
    entries: List[PresentableEntry] = field(default_factory=list)

    def add(self, entry: PresentableEntry) -> None:
        self.entries.append(entry)

    @property
    def rows(self) -> List[ControlRow]:
        return [entry.row for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


def error_group(message: str) -> ControlGroup:
    """Single group shown in place of the controls when a device fails."""
    return ControlGroup(title=ERROR_GROUP_TITLE, entries=[InfoRow("Message", message)])


@dataclass(slots=True, frozen=True)
class DeviceInfo:
    """Driver details reported by the device."""

    driver: str = ""
    card: str = ""
    bus: str = ""
    version: str = ""
    capabilities: str = ""

    def as_rows(self) -> List[InfoRow]:
        return [
            InfoRow("Bus", self.bus),
            InfoRow("Card", self.card),
            InfoRow("Driver", self.driver),
            InfoRow("Version", self.version),
            InfoRow("Capabilities", self.capabilities),
        ]


def display_name_from_key(key: str) -> str:
    """``white_balance_automatic`` -> ``White Balance Automatic``."""
    return " ".join(part.capitalize() for part in key.split("_") if part)


__all__ = [
    "ControlCategory",
    "ControlDescriptor",
    "ControlFlags",
    "ControlGroup",
    "ControlRow",
    "ControlType",
    "DEFAULT_GROUP_TITLE",
    "DeviceInfo",
    "ERROR_GROUP_TITLE",
    "InfoRow",
    "MenuItems",
    "RawValue",
    "RowKind",
    "display_name_from_key",
    "error_group",
]
