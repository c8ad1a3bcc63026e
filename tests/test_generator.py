"""Tests for configuration validation and code assembly."""

import logging

import pytest

from firmgen.components import builtin_factories
from firmgen.framework import (
    CodeGenerator,
    DuplicateComponentIdError,
    FactoryRegistry,
    GenerationContext,
    IncompatibleConfigurationError,
    MissingRequiredPropertyError,
    PinConflictError,
    PinOutOfRangeError,
    UnknownPlatformError,
    UnsupportedBoardError,
    component_key,
    generate_code,
    validate_configuration,
)
from firmgen.model import ComponentCode, ComponentKind

from conftest import make_config


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------

class TestSwitchScenario:
    def test_gpio_switch_on_pin_6(self):
        config = make_config(switch=[{
            "platform": "gpio",
            "pin": 6,
            "inverted": False,
            "restore_mode": "restore_default_off",
        }])
        unit = generate_code(config)

        assert "bool gpio_switch_6_state = false;" in unit.declarations
        turn_on = unit.definitions[0].split("void gpio_switch_6_turn_off")[0]
        assert "gpio_set_level(GPIO_NUM_6, 1);" in turn_on
        assert "gpio_switch_6_config.mode = GPIO_MODE_OUTPUT;" in unit.setup
        assert unit.includes == ['#include "driver/gpio.h"']

    def test_inverted_switch_drives_low_for_on(self):
        config = make_config(switch=[{"platform": "gpio", "pin": 6, "inverted": True}])
        unit = generate_code(config)
        turn_on = unit.definitions[0].split("void gpio_switch_6_turn_off")[0]
        assert "gpio_set_level(GPIO_NUM_6, 0);" in turn_on

    def test_restore_mode_any_case(self):
        config = make_config(switch=[{
            "platform": "gpio", "pin": 6, "restore_mode": "RESTORE_DEFAULT_ON",
        }])
        unit = generate_code(config)
        assert "bool gpio_switch_6_state = true;" in unit.declarations


class TestDHTScenario:
    def test_two_distinct_keys(self):
        config = make_config(sensor=[{
            "platform": "dht",
            "pin": "GPIO4",
            "model": "dht22",
            "id": "room",
            "temperature": {"name": "Room Temperature"},
            "humidity": {"name": "Room Humidity"},
        }])
        unit = generate_code(config)

        assert [e.id for e in unit.entities] == ["room_temperature", "room_humidity"]
        temp = unit.entity_key("room_temperature")
        hum = unit.entity_key("room_humidity")
        assert temp == component_key("room_temperature", "sensor")
        assert hum == component_key("room_humidity", "sensor")
        assert temp != hum

    def test_synthesized_id_and_am2302(self):
        config = make_config(sensor=[{
            "platform": "dht", "pin": 4, "model": "AM2302",
            "temperature": {},
        }])
        unit = generate_code(config)
        assert "DHT dht_4(4, DHT22);" in unit.declarations
        assert unit.entities[0].id == "dht_4_temperature"


# ---------------------------------------------------------------------------
# Merge properties
# ---------------------------------------------------------------------------

class TestMerge:
    def test_includes_deduplicated_in_first_seen_order(self):
        config = make_config(
            sensor=[{"platform": "adc", "pin": 1}],
            switch=[
                {"platform": "gpio", "pin": 6},
                {"platform": "gpio", "pin": 7},
            ],
            light=[{"platform": "binary", "pin": 10}],
        )
        unit = generate_code(config)
        assert unit.includes == ['#include "driver/adc.h"', '#include "driver/gpio.h"']

    def test_sections_in_kind_order(self):
        config = make_config(
            light=[{"platform": "binary", "pin": 10}],
            switch=[{"platform": "gpio", "pin": 6}],
            binary_sensor=[{"platform": "gpio", "pin": 3}],
            sensor=[{"platform": "adc", "pin": 1}],
        )
        unit = generate_code(config)
        assert [e.id for e in unit.entities] == [
            "adc_sensor_1", "binary_sensor_3", "gpio_switch_6", "binary_light_10",
        ]
        assert [e.role for e in unit.entities] == ["sensor", "binary_sensor", "switch", "light"]

    def test_entries_in_declaration_order(self):
        config = make_config(switch=[
            {"platform": "gpio", "pin": 7},
            {"platform": "gpio", "pin": 6},
        ])
        unit = generate_code(config)
        assert [e.id for e in unit.entities] == ["gpio_switch_7", "gpio_switch_6"]

    def test_deterministic(self):
        config = make_config(
            sensor=[
                {"platform": "dht", "pin": 4, "model": "dht11",
                 "temperature": {}, "humidity": {}},
                {"platform": "adc", "pin": 1, "filters": [{"type": "offset", "value": 0.5}]},
            ],
            light=[{"platform": "rgb", "red_pin": 10, "green_pin": 11, "blue_pin": 12}],
        )
        first = generate_code(config).model_dump_json()
        second = generate_code(config).model_dump_json()
        assert first == second


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailFast:
    def test_missing_pin(self):
        config = make_config(switch=[{"platform": "gpio"}])
        with pytest.raises(MissingRequiredPropertyError) as exc:
            generate_code(config)
        assert exc.value.component == "gpio"
        assert exc.value.property == "pin"

    def test_unknown_platform(self):
        config = make_config(sensor=[{"platform": "nonexistent", "pin": 4}])
        with pytest.raises(UnknownPlatformError) as exc:
            generate_code(config)
        assert exc.value.component_kind is ComponentKind.SENSOR

    def test_first_failing_entry_is_reported(self):
        config = make_config(
            sensor=[{"platform": "adc", "pin": 99}],
            switch=[{"platform": "gpio"}],
        )
        with pytest.raises(PinOutOfRangeError):
            generate_code(config)

    def test_unsupported_board(self):
        with pytest.raises(UnsupportedBoardError):
            generate_code(make_config(board="arduino-uno"))

    def test_duplicate_ids(self):
        config = make_config(switch=[
            {"platform": "gpio", "pin": 6, "id": "fan"},
            {"platform": "gpio", "pin": 7, "id": "fan"},
        ])
        with pytest.raises(DuplicateComponentIdError, match="'fan'"):
            generate_code(config)

    def test_duplicate_across_kinds(self):
        config = make_config(
            binary_sensor=[{"platform": "gpio", "pin": 3, "id": "door"}],
            light=[{"platform": "binary", "pin": 10, "id": "door"}],
        )
        with pytest.raises(DuplicateComponentIdError):
            validate_configuration(config)

    def test_dht_reading_id_collides_with_other_entry(self):
        config = make_config(
            sensor=[{"platform": "dht", "pin": 4, "model": "dht22", "id": "room",
                     "temperature": {}}],
            switch=[{"platform": "gpio", "pin": 6, "id": "room_temperature"}],
        )
        with pytest.raises(DuplicateComponentIdError, match="room_temperature"):
            generate_code(config)

    def test_ids_naming_the_same_symbol(self):
        config = make_config(switch=[
            {"platform": "gpio", "pin": 6, "id": "fan-1"},
            {"platform": "gpio", "pin": 7, "id": "fan_1"},
        ])
        with pytest.raises(DuplicateComponentIdError, match="'fan_1' clashes with 'fan-1'"):
            validate_configuration(config)

    def test_output_pin_shared(self):
        config = make_config(
            switch=[{"platform": "gpio", "pin": 6}],
            light=[{"platform": "binary", "pin": 6}],
        )
        with pytest.raises(PinConflictError) as exc:
            generate_code(config)
        assert exc.value.owner == "gpio_switch_6"
        assert exc.value.other == "binary_light_6"

    def test_input_pin_shared(self):
        config = make_config(
            sensor=[{"platform": "dht", "pin": 3, "model": "dht22", "temperature": {}}],
            binary_sensor=[{"platform": "gpio", "pin": 3}],
        )
        unit = generate_code(config)
        assert len(unit.entities) == 2

    def test_rgb_light_reuses_own_pin(self):
        config = make_config(light=[
            {"platform": "rgb", "red_pin": 10, "green_pin": 10, "blue_pin": 12},
        ])
        with pytest.raises(PinConflictError):
            generate_code(config)

    def test_no_unit_on_failure(self):
        gen = CodeGenerator(FactoryRegistry(builtin_factories()).freeze())
        config = make_config(switch=[{"platform": "gpio", "pin": 6}, {"platform": "gpio"}])
        result = None
        with pytest.raises(MissingRequiredPropertyError):
            result = gen.generate_code(config)
        assert result is None


class TestSectionChecks:
    def test_wifi_needs_radio(self):
        config = make_config(
            board="esp32-h2-devkitc-1",
            wifi={"ssid": "net", "password": "secret"},
        )
        with pytest.raises(IncompatibleConfigurationError, match="no WiFi radio"):
            validate_configuration(config)

    def test_api_needs_wifi(self):
        config = make_config(api={})
        with pytest.raises(IncompatibleConfigurationError, match="requires wifi"):
            generate_code(config)


# ---------------------------------------------------------------------------
# Advisories, contexts, custom registries
# ---------------------------------------------------------------------------

class TestAdvisories:
    def test_reserved_pin_is_advisory_not_error(self, caplog):
        config = make_config(board="esp32dev", switch=[{"platform": "gpio", "pin": 2}])
        with caplog.at_level(logging.WARNING, logger="firmgen"):
            unit = generate_code(config)
        assert len(unit.advisories) == 1
        advisory = unit.advisories[0]
        assert advisory.pin == 2
        assert advisory.component == "gpio_switch_2"
        assert "strapping" in caplog.text

    def test_validate_returns_advisories(self):
        config = make_config(board="esp32dev", binary_sensor=[{"platform": "gpio", "pin": 0}])
        advisories = validate_configuration(config)
        assert [a.pin for a in advisories] == [0]

    def test_clean_config_has_none(self):
        config = make_config(switch=[{"platform": "gpio", "pin": 6}])
        assert validate_configuration(config) == []


class TestContext:
    def test_target_board_override(self):
        config = make_config(board="esp32-c6-devkitc-1", switch=[{"platform": "gpio", "pin": 40}])
        unit = generate_code(config, GenerationContext(target_board="esp32-s3-devkitc-1"))
        assert unit.board == "esp32-s3-devkitc-1"

    def test_pwm_channels_exhausted(self):
        # C6 has six LEDC channels; three RGB lights need nine
        pins = [(0, 1, 2), (3, 6, 7), (10, 11, 12)]
        config = make_config(light=[
            {"platform": "rgb", "id": f"rgb{i}", "red_pin": r, "green_pin": g, "blue_pin": b}
            for i, (r, g, b) in enumerate(pins)
        ])
        with pytest.raises(IncompatibleConfigurationError, match="PWM channels"):
            generate_code(config)

    def test_validate_counts_pwm_channels(self):
        pins = [(0, 1, 2), (3, 6, 7), (10, 11, 12)]
        config = make_config(light=[
            {"platform": "rgb", "id": f"rgb{i}", "red_pin": r, "green_pin": g, "blue_pin": b}
            for i, (r, g, b) in enumerate(pins)
        ])
        with pytest.raises(IncompatibleConfigurationError, match="rgb2 .*only 6 PWM channels"):
            validate_configuration(config)

    def test_pwm_channels_allocated_in_order(self):
        config = make_config(light=[
            {"platform": "rgb", "id": "a", "red_pin": 10, "green_pin": 11, "blue_pin": 12},
            {"platform": "rgb", "id": "b", "red_pin": 13, "green_pin": 14, "blue_pin": 16},
        ])
        unit = generate_code(config)
        setup = "\n".join(unit.setup)
        assert ".channel = LEDC_CHANNEL_0," in setup
        assert ".channel = LEDC_CHANNEL_5," in setup
        assert setup.index("a_red_channel") < setup.index("b_red_channel")


class _EchoSwitch:
    kind = ComponentKind.SWITCH
    platform = "echo"
    required_properties = ()
    optional_properties = ()

    def validate(self, entry, board):
        return []

    def generate_code(self, entry, ctx):
        return ComponentCode(includes=["#include <echo.h>"], loop=[f"// {entry.id}"])

    def component_id(self, entry):
        return entry.id

    def entity_ids(self, entry):
        return [entry.id]


class TestCustomRegistry:
    def test_explicit_registry(self):
        reg = FactoryRegistry([_EchoSwitch()]).freeze()
        config = make_config(switch=[{"platform": "echo", "id": "one"}])
        unit = generate_code(config, factories=reg)
        assert unit.loop == ["// one"]
        assert unit.includes == ["#include <echo.h>"]

    def test_builtin_platform_absent_from_custom_registry(self):
        reg = FactoryRegistry([_EchoSwitch()]).freeze()
        config = make_config(switch=[{"platform": "gpio", "pin": 6}])
        with pytest.raises(UnknownPlatformError):
            generate_code(config, factories=reg)
