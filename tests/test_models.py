"""Tests for sven.models — desk types and JSON wire codecs."""

from __future__ import annotations

import json

import pytest
from sven.models import (
    U32_MAX,
    CommandKind,
    DecodeError,
    DeskCommand,
    DeskPosition,
    DeskState,
    decode_status,
)


class TestDeskPosition:
    def test_integer_codes_follow_declaration_order(self) -> None:
        assert [p.value for p in DeskPosition] == [0, 1, 2, 3, 4, 5]
        assert DeskPosition.ABOVE_ARMREST.value == 3

    def test_wire_names(self) -> None:
        assert DeskPosition.ABOVE_ARMREST.wire_name == "AboveArmrest"
        assert DeskPosition.from_wire("Standing") is DeskPosition.STANDING

    @pytest.mark.parametrize("value", ["standing", "STANDING", 4, None, ""])
    def test_from_wire_rejects_unknown(self, value) -> None:
        with pytest.raises(DecodeError):
            DeskPosition.from_wire(value)


class TestDeskState:
    def test_unknown_baseline(self) -> None:
        state = DeskState.unknown()
        assert state.height_mm == 0
        assert state.position is DeskPosition.CUSTOM
        assert state.height_known is False

    def test_from_json(self) -> None:
        state = DeskState.from_json(b'{"height_mm": 850, "position": "Bottom"}')
        assert state == DeskState(850, DeskPosition.BOTTOM)
        assert state.height_known is True

    def test_from_json_ignores_extra_keys(self) -> None:
        state = DeskState.from_json(b'{"height_mm": 850, "position": "Bottom", "extra": 1}')
        assert state == DeskState(850, DeskPosition.BOTTOM)

    def test_to_json_matches_wire_format(self) -> None:
        state = DeskState(720, DeskPosition.ARMREST)
        assert json.loads(state.to_json()) == {"height_mm": 720, "position": "Armrest"}

    @pytest.mark.parametrize(
        "payload",
        [
            b"",
            b"not json",
            b"\xff\xfe\x00",
            b"[]",
            b'"Bottom"',
            b'{"height_mm": 850}',
            b'{"position": "Bottom"}',
            b'{"height_mm": -1, "position": "Bottom"}',
            b'{"height_mm": 850.5, "position": "Bottom"}',
            b'{"height_mm": "850", "position": "Bottom"}',
            b'{"height_mm": true, "position": "Bottom"}',
            b'{"height_mm": 4294967296, "position": "Bottom"}',
            b'{"height_mm": 850, "position": "Sideways"}',
        ],
    )
    def test_from_json_rejects_malformed(self, payload: bytes) -> None:
        with pytest.raises(DecodeError):
            DeskState.from_json(payload)

    def test_decode_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            DeskState.from_json(b"{")

    def test_accepts_u32_max(self) -> None:
        state = DeskState.from_json(json.dumps({"height_mm": U32_MAX, "position": "Top"}))
        assert state.height_mm == U32_MAX


class TestDeskCommand:
    def test_wire_format(self) -> None:
        command = DeskCommand(CommandKind.ABSOLUTE_HEIGHT, 850)
        assert json.loads(command.to_json()) == {"command": "AbsoluteHeight", "value": 850}

    def test_from_json(self) -> None:
        command = DeskCommand.from_json('{"command": "DownRelative", "value": 20}')
        assert command.command is CommandKind.DOWN_RELATIVE
        assert command.value == 20

    def test_from_json_ignores_extra_keys(self) -> None:
        command = DeskCommand.from_json('{"command": "AbsoluteHeight", "value": 1, "extra": 2}')
        assert command == DeskCommand(CommandKind.ABSOLUTE_HEIGHT, 1)

    def test_str_uses_display_label(self) -> None:
        assert str(DeskCommand(CommandKind.UP_DURATION, 1500)) == "Up Duration (1500)"

    def test_position_carries_integer_code(self) -> None:
        command = DeskCommand(CommandKind.POSITION, DeskPosition.STANDING.value)
        assert command.to_dict() == {"command": "Position", "value": 4}

    def test_unit_is_not_validated_against_kind(self) -> None:
        # A Position code far outside the enum range is still accepted at this layer.
        command = DeskCommand(CommandKind.POSITION, 900)
        assert command.value == 900

    @pytest.mark.parametrize("value", [-1, U32_MAX + 1, 1.5, "10", True])
    def test_rejects_non_u32_value(self, value) -> None:
        with pytest.raises(DecodeError):
            DeskCommand(CommandKind.UP_RELATIVE, value)

    @pytest.mark.parametrize(
        "payload",
        [
            '{"command": "Sideways", "value": 1}',
            '{"command": "AbsoluteHeight"}',
            '{"value": 1}',
            "[1, 2]",
        ],
    )
    def test_from_json_rejects_malformed(self, payload: str) -> None:
        with pytest.raises(DecodeError):
            DeskCommand.from_json(payload)

    def test_every_kind_has_label(self) -> None:
        assert {kind.label for kind in CommandKind} == {
            "Up Duration",
            "Down Duration",
            "Up Relative",
            "Down Relative",
            "Absolute Height",
            "Position",
        }


class TestDecodeStatus:
    def test_plain_text(self) -> None:
        assert decode_status(b"online") == "online"

    def test_invalid_utf8_rejected(self) -> None:
        with pytest.raises(DecodeError):
            decode_status(b"\xff\xfe\xfd")
