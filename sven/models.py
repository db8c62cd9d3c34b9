"""Desk state, position and command types with their JSON wire codecs."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

U32_MAX = 2**32 - 1
INITIAL_STATUS = "offline"


class DecodeError(ValueError):
    """Raised when a bus or HTTP payload cannot be decoded."""


class DeskPosition(Enum):
    """Named desk presets; the integer value is the code used in Position commands."""

    BOTTOM = 0
    TOP = 1
    ARMREST = 2
    ABOVE_ARMREST = 3
    STANDING = 4
    CUSTOM = 5

    @property
    def wire_name(self) -> str:
        return _POSITION_WIRE_NAMES[self]

    @classmethod
    def from_wire(cls, value: Any) -> DeskPosition:
        if isinstance(value, str):
            for position, name in _POSITION_WIRE_NAMES.items():
                if name == value:
                    return position
        raise DecodeError(f"unknown desk position: {value!r}")


_POSITION_WIRE_NAMES: dict[DeskPosition, str] = {
    DeskPosition.BOTTOM: "Bottom",
    DeskPosition.TOP: "Top",
    DeskPosition.ARMREST: "Armrest",
    DeskPosition.ABOVE_ARMREST: "AboveArmrest",
    DeskPosition.STANDING: "Standing",
    DeskPosition.CUSTOM: "Custom",
}


class CommandKind(Enum):
    """Command variants. The payload unit depends on the variant:

    - UP_DURATION / DOWN_DURATION: milliseconds of motion
    - UP_RELATIVE / DOWN_RELATIVE: millimeters of travel
    - ABSOLUTE_HEIGHT: target height in millimeters
    - POSITION: a DeskPosition code
    """

    UP_DURATION = "UpDuration"
    DOWN_DURATION = "DownDuration"
    UP_RELATIVE = "UpRelative"
    DOWN_RELATIVE = "DownRelative"
    ABSOLUTE_HEIGHT = "AbsoluteHeight"
    POSITION = "Position"

    @property
    def label(self) -> str:
        return _COMMAND_LABELS[self]

    @classmethod
    def from_wire(cls, value: Any) -> CommandKind:
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise DecodeError(f"unknown command: {value!r}")


_COMMAND_LABELS: dict[CommandKind, str] = {
    CommandKind.UP_DURATION: "Up Duration",
    CommandKind.DOWN_DURATION: "Down Duration",
    CommandKind.UP_RELATIVE: "Up Relative",
    CommandKind.DOWN_RELATIVE: "Down Relative",
    CommandKind.ABSOLUTE_HEIGHT: "Absolute Height",
    CommandKind.POSITION: "Position",
}


def _require_u32(value: Any, field_name: str) -> int:
    # bool is an int subclass; JSON true/false must not pass as 1/0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{field_name} must be an unsigned integer, got {value!r}")
    if value < 0 or value > U32_MAX:
        raise DecodeError(f"{field_name} out of range: {value}")
    return value


def _load_object(payload: bytes | str, what: str) -> dict[str, Any]:
    # ValueError covers bad UTF-8, bad JSON and over-long integer literals
    try:
        data = json.loads(payload)
    except (ValueError, RecursionError) as exc:
        raise DecodeError(f"invalid {what} JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(f"{what} payload must be a JSON object")
    return data


def _require_keys(data: dict[str, Any], keys: set[str], what: str) -> None:
    # Extra keys are ignored so newer firmware can add fields without breaking the mirror.
    missing = keys - data.keys()
    if missing:
        raise DecodeError(f"{what} missing field(s): {', '.join(sorted(missing))}")


@dataclass(frozen=True)
class DeskState:
    """Last reported desk height and preset. ``height_mm == 0`` means not yet observed."""

    height_mm: int
    position: DeskPosition

    @property
    def height_known(self) -> bool:
        return self.height_mm != 0

    @classmethod
    def unknown(cls) -> DeskState:
        return cls(height_mm=0, position=DeskPosition.CUSTOM)

    @classmethod
    def from_json(cls, payload: bytes | str) -> DeskState:
        data = _load_object(payload, "state")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeskState:
        _require_keys(data, {"height_mm", "position"}, "state")
        return cls(
            height_mm=_require_u32(data["height_mm"], "height_mm"),
            position=DeskPosition.from_wire(data["position"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"height_mm": self.height_mm, "position": self.position.wire_name}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class DeskCommand:
    """A write-only intent for the desk. ``value`` is not checked against the kind's unit."""

    command: CommandKind
    value: int

    def __post_init__(self) -> None:
        _require_u32(self.value, "value")

    def __str__(self) -> str:
        return f"{self.command.label} ({self.value})"

    @classmethod
    def from_json(cls, payload: bytes | str) -> DeskCommand:
        data = _load_object(payload, "command")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeskCommand:
        _require_keys(data, {"command", "value"}, "command")
        return cls(
            command=CommandKind.from_wire(data["command"]),
            value=_require_u32(data["value"], "value"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"command": self.command.value, "value": self.value}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def decode_status(payload: bytes) -> str:
    """Decode a raw status payload; invalid UTF-8 is rejected rather than repaired."""
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"status is not valid UTF-8: {exc}") from exc
