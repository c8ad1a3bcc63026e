"""Tests for the matter: section, its board checks and its generated code."""

import textwrap

import pytest
from pydantic import ValidationError

from firmgen.framework import (
    IncompatibleConfigurationError,
    InvalidPropertyValueError,
    check_matter,
    generate_code,
    matter_code,
    validate_configuration,
)
from firmgen.loader import parse_configuration
from firmgen.model import BoardCapability, MatterConfig, MatterDeviceType, MatterTransport

from conftest import make_config

H2 = "esp32-h2-devkitc-1"
DATASET = "0e080000000000010000000300000f35"


def light(**fields) -> dict:
    return {"device_type": "on_off_light", **fields}


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

class TestModel:
    def test_defaults(self):
        m = MatterConfig(device_type="Extended_Color_Light")
        assert m.device_type is MatterDeviceType.EXTENDED_COLOR_LIGHT
        assert m.vendor_id == 0xFFF1
        assert m.product_id == 0x8000
        assert m.transport is MatterTransport.WIFI

    def test_thread_section_implies_thread_transport(self):
        m = MatterConfig(device_type="on_off_light", thread={})
        assert m.transport is MatterTransport.THREAD

    def test_explicit_transport_wins(self):
        m = MatterConfig(device_type="on_off_light", thread={}, network={"transport": "WIFI"})
        assert m.transport is MatterTransport.WIFI

    def test_discriminator_is_12_bit(self):
        with pytest.raises(ValidationError):
            MatterConfig(device_type="on_off_light", commissioning={"discriminator": 4096})

    def test_unknown_device_type(self):
        with pytest.raises(ValidationError):
            MatterConfig(device_type="toaster")

    def test_device_type_ids(self):
        assert MatterDeviceType.ON_OFF_LIGHT.device_type_id == 0x0100
        assert MatterDeviceType.DOOR_LOCK.device_type_id == 0x000A


# ---------------------------------------------------------------------------
# Board and section checks
# ---------------------------------------------------------------------------

class TestChecks:
    def test_board_without_matter(self):
        config = make_config(board="esp32dev", matter=light())
        with pytest.raises(IncompatibleConfigurationError, match="does not support Matter"):
            validate_configuration(config)

    def test_disabled_section_not_checked(self):
        config = make_config(board="esp32dev", matter=light(enabled=False))
        assert validate_configuration(config) == []

    def test_wifi_transport_needs_radio(self):
        config = make_config(board=H2, matter=light())
        with pytest.raises(IncompatibleConfigurationError, match="no WiFi radio"):
            validate_configuration(config)

    def test_thread_on_h2(self):
        config = make_config(board=H2, matter=light(thread={"dataset": DATASET}))
        assert validate_configuration(config) == []

    def test_product_id_zero(self, c6):
        with pytest.raises(InvalidPropertyValueError, match="product_id"):
            check_matter(MatterConfig(**light(product_id=0)), c6)

    @pytest.mark.parametrize("passcode", [0, 11111111, 12345678, 99999999])
    def test_disallowed_passcodes(self, c6, passcode):
        m = MatterConfig(**light(commissioning={"passcode": passcode}))
        with pytest.raises(InvalidPropertyValueError, match="commissioning.passcode"):
            check_matter(m, c6)

    @pytest.mark.parametrize("thread, prop", [
        ({"channel": 10}, "thread.channel"),
        ({"channel": 27}, "thread.channel"),
        ({"pan_id": 0xFFFF}, "thread.pan_id"),
        ({"ext_pan_id": "dead"}, "thread.ext_pan_id"),
        ({"network_key": "z" * 32}, "thread.network_key"),
        ({"dataset": "abc"}, "thread.dataset"),
        ({"dataset": ""}, "thread.dataset"),
    ])
    def test_bad_thread_values(self, c6, thread, prop):
        with pytest.raises(InvalidPropertyValueError, match=prop):
            check_matter(MatterConfig(**light(thread=thread)), c6)

    def test_thread_needs_radio(self, c6):
        wifi_only = c6.model_copy(update={
            "capabilities": frozenset({BoardCapability.WIFI, BoardCapability.MATTER}),
        })
        m = MatterConfig(**light(thread={}, network={"transport": "wifi"}))
        with pytest.raises(IncompatibleConfigurationError, match="802.15.4"):
            check_matter(m, wifi_only)

    def test_ethernet_unsupported(self, c6):
        m = MatterConfig(**light(network={"transport": "ethernet"}))
        with pytest.raises(IncompatibleConfigurationError, match="ethernet"):
            check_matter(m, c6)

    def test_thread_transport_needs_thread_enabled(self, c6):
        m = MatterConfig(**light(thread={"enabled": False}, network={"transport": "thread"}))
        with pytest.raises(IncompatibleConfigurationError, match="enabled thread section"):
            check_matter(m, c6)


# ---------------------------------------------------------------------------
# Generated code
# ---------------------------------------------------------------------------

class TestCode:
    def test_clusters_for_extended_color_light(self):
        code = matter_code(MatterConfig(device_type="extended_color_light"))
        setup = "\n".join(code.setup)
        for cluster in ("identify", "groups", "scenes", "on_off", "level_control", "color_control"):
            assert f"esp_matter::{cluster}::create(endpoint, CLUSTER_FLAG_SERVER" in setup
        assert "static constexpr uint32_t kDeviceTypeId = 0x010D;" in code.declarations
        assert setup.index("add_device_type") < setup.index("identify::create")
        assert code.setup[-1] == "ESP_ERROR_CHECK(esp_matter::start(matter_event_cb));"

    def test_commissioning_constants(self):
        m = MatterConfig(**light(commissioning={"discriminator": 1234, "passcode": 20202021}))
        code = matter_code(m)
        assert "static constexpr uint16_t kDiscriminator = 1234;" in code.declarations
        assert "static constexpr uint32_t kSetupPasscode = 20202021;" in code.declarations

    def test_thread_dataset(self):
        code = matter_code(MatterConfig(**light(thread={"dataset": DATASET})))
        i = code.setup.index("#if CONFIG_OPENTHREAD_ENABLED")
        assert code.setup[i + 1] == f'esp_matter::set_custom_thread_dataset("{DATASET}");'
        assert code.setup[i + 2] == "#endif"

    def test_wifi_has_no_thread_block(self):
        code = matter_code(MatterConfig(**light()))
        assert "#if CONFIG_OPENTHREAD_ENABLED" not in code.setup

    def test_merged_after_components(self):
        config = make_config(
            switch=[{"platform": "gpio", "pin": 6, "id": "plug"}],
            matter={"device_type": "smart_plug"},
        )
        unit = generate_code(config)
        start = unit.setup.index('ESP_LOGI(MATTER_TAG, "Starting Matter node");')
        assert any("plug" in line for line in unit.setup[:start])
        assert not any("plug" in line for line in unit.setup[start:])
        assert unit.includes[-3:] == [
            '#include "esp_matter.h"',
            '#include "esp_matter_ota.h"',
            '#include "app/server/Server.h"',
        ]

    def test_disabled_emits_nothing(self):
        config = make_config(matter=light(enabled=False))
        unit = generate_code(config)
        assert not any("esp_matter" in line for line in unit.setup + unit.includes)


class TestLoading:
    def test_hex_ids_from_yaml(self):
        doc = textwrap.dedent("""\
            device:
              name: lamp
            esp32:
              board: esp32-c6-devkitc-1
            matter:
              device_type: dimmable_light
              vendor_id: 0xFFF1
              product_id: 0x8001
              commissioning:
                discriminator: 3840
        """)
        config = parse_configuration(doc)
        assert config.matter.product_id == 0x8001
        assert config.matter.commissioning.passcode == 20202021
