"""Board capability registry.

Board definitions are plain data, assembled into a :class:`BoardRegistry`
once and never changed afterwards.  Lookups are case-insensitive.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from types import MappingProxyType

from firmgen.errors import UnsupportedBoardError
from firmgen.model.board import (
    Architecture,
    BoardCapability,
    BoardDefinition,
    ChipFamily,
)

_WIFI_BT = frozenset({
    BoardCapability.WIFI,
    BoardCapability.BLUETOOTH,
    BoardCapability.ADC,
    BoardCapability.PWM,
    BoardCapability.I2C,
    BoardCapability.SPI,
    BoardCapability.UART,
})
_THREAD = frozenset({
    BoardCapability.BLUETOOTH,
    BoardCapability.THREAD,
    BoardCapability.MATTER,
    BoardCapability.ZIGBEE,
    BoardCapability.ADC,
    BoardCapability.PWM,
    BoardCapability.I2C,
    BoardCapability.SPI,
    BoardCapability.UART,
})
_NO_RADIO = frozenset({
    BoardCapability.ADC,
    BoardCapability.PWM,
    BoardCapability.I2C,
    BoardCapability.SPI,
    BoardCapability.UART,
})


def _identity(pins: Iterable[int]) -> dict[int, int]:
    return {p: p for p in pins}


def _esp32_c3(identifier: str, display_name: str) -> BoardDefinition:
    return BoardDefinition(
        identifier=identifier,
        display_name=display_name,
        chip_family=ChipFamily.ESP32_C3,
        architecture=Architecture.RISCV,
        capabilities=_WIFI_BT,
        max_pin=21,
        input_only_pins=frozenset({18, 19}),
        # strapping 2/8/9, SPI flash 11-17
        reserved_pins=frozenset({2, 8, 9, *range(11, 18)}),
        adc_channels=_identity(range(0, 5)),
        ledc_channels=6,
    )


def _esp32_c6(identifier: str, display_name: str) -> BoardDefinition:
    return BoardDefinition(
        identifier=identifier,
        display_name=display_name,
        chip_family=ChipFamily.ESP32_C6,
        architecture=Architecture.RISCV,
        capabilities=_WIFI_BT | _THREAD,
        max_pin=30,
        input_only_pins=frozenset({18, 19}),
        reserved_pins=frozenset({4, 5, 8, 9, 15}),
        adc_channels=_identity(range(0, 8)),
        ledc_channels=6,
    )


def _esp32_h2(identifier: str, display_name: str) -> BoardDefinition:
    return BoardDefinition(
        identifier=identifier,
        display_name=display_name,
        chip_family=ChipFamily.ESP32_H2,
        architecture=Architecture.RISCV,
        capabilities=_THREAD,
        max_pin=27,
        # strapping 8/9, flash/PSRAM 24-27
        reserved_pins=frozenset({8, 9, 24, 25, 26, 27}),
        adc_channels=_identity(range(0, 5)),
        ledc_channels=6,
    )


BUILTIN_BOARDS: tuple[BoardDefinition, ...] = (
    _esp32_c3("esp32-c3-devkitm-1", "ESP32-C3 DevKit-M"),
    _esp32_c3("esp32-c3-devkitc-02", "ESP32-C3 DevKit-C"),
    _esp32_c6("esp32-c6-devkitc-1", "ESP32-C6 DevKit-C"),
    _esp32_c6("esp32-c6-devkitm-1", "ESP32-C6 DevKit-M"),
    _esp32_h2("esp32-h2-devkitc-1", "ESP32-H2 DevKit-C"),
    _esp32_h2("esp32-h2-devkitm-1", "ESP32-H2 DevKit-M"),
    BoardDefinition(
        identifier="esp32-p4-function-ev-board",
        display_name="ESP32-P4 Function EV Board",
        chip_family=ChipFamily.ESP32_P4,
        architecture=Architecture.RISCV,
        capabilities=_NO_RADIO,
        max_pin=54,
        reserved_pins=frozenset(range(34, 39)),
        adc_channels=_identity(range(0, 8)),
        ledc_channels=8,
    ),
    BoardDefinition(
        identifier="esp32-s3-devkitc-1",
        display_name="ESP32-S3 DevKitC-1",
        chip_family=ChipFamily.ESP32_S3,
        architecture=Architecture.XTENSA,
        capabilities=_WIFI_BT,
        max_pin=48,
        # strapping 0/3/45/46, octal flash/PSRAM 26-32
        reserved_pins=frozenset({0, 3, 45, 46, *range(26, 33)}),
        adc_channels={pin: pin - 1 for pin in range(1, 11)},
        ledc_channels=8,
    ),
    BoardDefinition(
        identifier="esp32dev",
        display_name="ESP32 DevKitC",
        chip_family=ChipFamily.ESP32,
        architecture=Architecture.XTENSA,
        capabilities=_WIFI_BT,
        max_pin=39,
        input_only_pins=frozenset(range(34, 40)),
        # strapping 0/2/5/12/15, SPI flash 6-11
        reserved_pins=frozenset({0, 2, 5, 12, 15, *range(6, 12)}),
        adc_channels={
            36: 0, 37: 1, 38: 2, 39: 3,
            32: 4, 33: 5, 34: 6, 35: 7,
        },
        ledc_channels=8,
    ),
)


class BoardRegistry:
    """Read-only lookup from board id to :class:`BoardDefinition`."""

    def __init__(self, boards: Iterable[BoardDefinition]) -> None:
        table: dict[str, BoardDefinition] = {}
        for board in boards:
            key = board.identifier.lower()
            if key in table:
                raise ValueError(f"Board '{board.identifier}' is defined more than once")
            table[key] = board
        self._boards = MappingProxyType(table)

    def __contains__(self, board_id: object) -> bool:
        return isinstance(board_id, str) and board_id.lower() in self._boards

    def __len__(self) -> int:
        return len(self._boards)

    def lookup(self, board_id: str) -> BoardDefinition:
        board = self._boards.get(board_id.lower())
        if board is None:
            raise UnsupportedBoardError(board_id, self.board_ids)
        return board

    @property
    def board_ids(self) -> list[str]:
        return sorted(self._boards)

    def supports(self, board_id: str, capability: BoardCapability) -> bool:
        """False for unknown boards rather than raising."""
        board = self._boards.get(board_id.lower())
        return board is not None and board.supports(capability)

    def boards_with_capability(self, capability: BoardCapability) -> list[str]:
        return sorted(k for k, b in self._boards.items() if b.supports(capability))

    def boards_for_family(self, family: ChipFamily) -> list[str]:
        return sorted(k for k, b in self._boards.items() if b.chip_family == family)


@lru_cache(maxsize=None)
def default_boards() -> BoardRegistry:
    """The registry of built-in boards, built on first use."""
    return BoardRegistry(BUILTIN_BOARDS)
