"""Tests for the board registry and board definitions."""

import pytest
from pydantic import ValidationError

from firmgen.framework import BUILTIN_BOARDS, BoardRegistry, UnsupportedBoardError, default_boards
from firmgen.model import Architecture, BoardCapability, BoardDefinition, ChipFamily


class TestLookup:
    def test_builtin_ids(self):
        ids = default_boards().board_ids
        assert ids == sorted(ids)
        for expected in (
            "esp32-c3-devkitm-1",
            "esp32-c3-devkitc-02",
            "esp32-c6-devkitc-1",
            "esp32-c6-devkitm-1",
            "esp32-h2-devkitc-1",
            "esp32-h2-devkitm-1",
            "esp32-p4-function-ev-board",
            "esp32-s3-devkitc-1",
            "esp32dev",
        ):
            assert expected in ids

    def test_case_insensitive(self):
        board = default_boards().lookup("ESP32-C6-DevKitC-1")
        assert board.identifier == "esp32-c6-devkitc-1"
        assert board.chip_family is ChipFamily.ESP32_C6
        assert board.architecture is Architecture.RISCV

    def test_unknown_board(self):
        with pytest.raises(UnsupportedBoardError, match="Unsupported board 'esp8266'") as exc:
            default_boards().lookup("esp8266")
        assert exc.value.board_id == "esp8266"

    def test_contains(self):
        registry = default_boards()
        assert "esp32dev" in registry
        assert "ESP32DEV" in registry
        assert "nope" not in registry
        assert len(registry) == len(BUILTIN_BOARDS)

    def test_default_is_cached(self):
        assert default_boards() is default_boards()


class TestCapabilities:
    def test_h2_has_no_wifi(self):
        registry = default_boards()
        assert not registry.supports("esp32-h2-devkitc-1", BoardCapability.WIFI)
        assert registry.supports("esp32-h2-devkitc-1", BoardCapability.THREAD)

    def test_unknown_board_supports_nothing(self):
        assert not default_boards().supports("nope", BoardCapability.WIFI)

    def test_boards_with_capability(self):
        thread = default_boards().boards_with_capability(BoardCapability.THREAD)
        assert "esp32-c6-devkitc-1" in thread
        assert "esp32-c3-devkitm-1" not in thread

    def test_boards_for_family(self):
        assert default_boards().boards_for_family(ChipFamily.ESP32_C3) == [
            "esp32-c3-devkitc-02",
            "esp32-c3-devkitm-1",
        ]


class TestBoardDefinition:
    def _board(self, **overrides):
        fields = dict(
            identifier="test-board",
            display_name="Test",
            chip_family=ChipFamily.ESP32_C3,
            architecture=Architecture.RISCV,
            capabilities=frozenset({BoardCapability.ADC}),
            max_pin=10,
        )
        fields.update(overrides)
        return BoardDefinition(**fields)

    def test_pins_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="reserved_pins"):
            self._board(reserved_pins=frozenset({11}))

    def test_adc_channel(self):
        board = self._board(adc_channels={3: 1})
        assert board.adc_channel(3) == 1
        assert board.adc_channel(4) is None
        assert board.adc_pins == frozenset({3})

    def test_frozen(self):
        board = self._board()
        with pytest.raises(ValidationError):
            board.max_pin = 20

    def test_duplicate_board_rejected(self):
        b = self._board()
        with pytest.raises(ValueError, match="more than once"):
            BoardRegistry([b, b])
