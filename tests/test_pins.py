"""Tests for pin normalization, resolution and claims."""

import pytest

from firmgen.framework import (
    InvalidPinFormatError,
    PinConflictError,
    PinLedger,
    PinOutOfRangeError,
    PinRoleMismatchError,
    PinValidator,
)
from firmgen.model import PinMode, PinRequirement, PinSpec, normalize_pin_number

from conftest import board


# ---------------------------------------------------------------------------
# normalize_pin_number
# ---------------------------------------------------------------------------

class TestNormalize:
    def test_int_passes_through(self):
        assert normalize_pin_number(4) == 4

    def test_symbolic(self):
        assert normalize_pin_number("GPIO4") == 4

    def test_case_and_whitespace_ignored(self):
        assert normalize_pin_number("  gpio12 ") == 12

    @pytest.mark.parametrize("raw", ["4", "GP4", "GPIO", "GPIO-1", "D4", ""])
    def test_bad_strings(self, raw):
        with pytest.raises(InvalidPinFormatError, match="Invalid pin format"):
            normalize_pin_number(raw)

    def test_bool_rejected(self):
        with pytest.raises(InvalidPinFormatError):
            normalize_pin_number(True)


class TestPinSpec:
    def test_scalar_shorthand_int(self):
        spec = PinSpec.model_validate(5)
        assert spec.number == 5
        assert spec.canonical() == 5

    def test_scalar_shorthand_str(self):
        spec = PinSpec.model_validate("GPIO7")
        assert spec.canonical() == 7
        assert str(spec) == "GPIO7"

    def test_mode_any_case(self):
        spec = PinSpec.model_validate({"number": 3, "mode": "INPUT_PULLDOWN"})
        assert spec.mode is PinMode.INPUT_PULLDOWN


# ---------------------------------------------------------------------------
# PinValidator
# ---------------------------------------------------------------------------

class TestResolve:
    def test_symbolic_resolves_to_number(self, c6):
        pin = PinValidator(c6).resolve("GPIO4", PinRequirement.INPUT)
        assert pin.number == 4
        assert pin.gpio == "GPIO_NUM_4"

    def test_out_of_range(self):
        s3 = board("esp32-s3-devkitc-1")
        assert s3.max_pin == 48
        with pytest.raises(PinOutOfRangeError) as exc:
            PinValidator(s3).resolve(99, PinRequirement.INPUT)
        assert exc.value.pin == 99
        assert exc.value.max_pin == 48

    def test_negative_out_of_range(self, c6):
        with pytest.raises(PinOutOfRangeError):
            PinValidator(c6).resolve(-1, PinRequirement.INPUT)

    def test_adc_role_mismatch(self):
        s3 = board("esp32-s3-devkitc-1")
        with pytest.raises(PinRoleMismatchError, match="ADC pins are"):
            PinValidator(s3).resolve(40, PinRequirement.ADC)

    def test_adc_channel_mapping(self, esp32dev):
        pin = PinValidator(esp32dev).resolve(36, PinRequirement.ADC)
        assert pin.adc_channel == 0
        pin = PinValidator(esp32dev).resolve("GPIO32", PinRequirement.ADC)
        assert pin.adc_channel == 4

    def test_pin_4_not_adc_on_esp32dev(self, esp32dev):
        with pytest.raises(PinRoleMismatchError) as exc:
            PinValidator(esp32dev).resolve(4, PinRequirement.ADC)
        assert exc.value.requirement is PinRequirement.ADC

    @pytest.mark.parametrize("requirement", [PinRequirement.OUTPUT, PinRequirement.PWM])
    def test_input_only_rejects_output(self, esp32dev, requirement):
        with pytest.raises(PinRoleMismatchError, match="input-only"):
            PinValidator(esp32dev).resolve(34, requirement)

    def test_input_only_accepts_input(self, esp32dev):
        assert PinValidator(esp32dev).resolve(34, PinRequirement.INPUT).number == 34

    def test_reserved_pin_flagged(self, esp32dev):
        pin = PinValidator(esp32dev).resolve(0, PinRequirement.INPUT)
        assert pin.reserved

    def test_spec_mode_and_inverted_carried(self, c6):
        spec = PinSpec(number="GPIO3", mode="input_pullup", inverted=True)
        pin = PinValidator(c6).resolve(spec, PinRequirement.INPUT)
        assert pin.mode is PinMode.INPUT_PULLUP
        assert pin.inverted is True

    def test_available_pins(self, esp32dev):
        v = PinValidator(esp32dev)
        assert v.available_pins(PinRequirement.ADC) == [32, 33, 34, 35, 36, 37, 38, 39]
        assert 34 not in v.available_pins(PinRequirement.OUTPUT)
        assert 34 in v.available_pins(PinRequirement.INPUT)


# ---------------------------------------------------------------------------
# PinLedger
# ---------------------------------------------------------------------------

class TestLedger:
    def _pin(self, number, requirement, board_id="esp32-c6-devkitc-1"):
        return PinValidator(board(board_id)).resolve(number, requirement)

    def test_inputs_may_share(self):
        ledger = PinLedger()
        ledger.claim(self._pin(4, PinRequirement.INPUT), "a")
        ledger.claim(self._pin(4, PinRequirement.INPUT), "b")
        assert ledger.owners(4) == ["a", "b"]

    def test_outputs_may_not_share(self):
        ledger = PinLedger()
        ledger.claim(self._pin(6, PinRequirement.OUTPUT), "fan")
        with pytest.raises(PinConflictError, match="already claimed by 'fan'"):
            ledger.claim(self._pin(6, PinRequirement.OUTPUT), "lamp")

    def test_input_after_output_conflicts(self):
        ledger = PinLedger()
        ledger.claim(self._pin(6, PinRequirement.OUTPUT), "fan")
        with pytest.raises(PinConflictError):
            ledger.claim(self._pin(6, PinRequirement.INPUT), "door")

    def test_same_owner_twice_conflicts(self):
        ledger = PinLedger()
        ledger.claim(self._pin(10, PinRequirement.PWM), "rgb")
        with pytest.raises(PinConflictError):
            ledger.claim(self._pin(10, PinRequirement.PWM), "rgb")

    def test_adc_is_exclusive(self):
        ledger = PinLedger()
        ledger.claim(self._pin(1, PinRequirement.ADC), "light_level")
        with pytest.raises(PinConflictError):
            ledger.claim(self._pin(1, PinRequirement.INPUT), "button")
