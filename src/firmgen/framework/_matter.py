"""Matter support: board checks for the ``matter:`` section and its code.

The Matter node is built on the esp-matter SDK.  Its code is one more
:class:`ComponentCode`, merged after the component entries.  Setup codes
are taken as configured; nothing here derives pairing payloads.
"""

from __future__ import annotations

import re

from firmgen.errors import IncompatibleConfigurationError, InvalidPropertyValueError
from firmgen.model.board import BoardCapability, BoardDefinition
from firmgen.model.code import ComponentCode
from firmgen.model.matter import MatterCluster, MatterConfig, MatterTransport

from ._cpp import c_string

# Setup passcodes the Matter core specification forbids.
INVALID_PASSCODES = frozenset({
    11111111, 22222222, 33333333, 44444444, 55555555,
    66666666, 77777777, 88888888, 99999999, 12345678,
    87654321,
})

_HEX = re.compile(r"^[0-9A-Fa-f]*$")


def _invalid(prop: str, value: object, reason: str) -> InvalidPropertyValueError:
    return InvalidPropertyValueError("matter", prop, value, reason)


def check_matter(matter: MatterConfig, board: BoardDefinition) -> None:
    """Raise on the first problem with *matter* on *board*."""
    if not board.supports(BoardCapability.MATTER):
        raise IncompatibleConfigurationError(
            "matter", f"{board.identifier} ({board.chip_family.value}) does not support Matter"
        )

    if matter.product_id == 0:
        raise _invalid("product_id", matter.product_id, "must not be 0x0000")

    c = matter.commissioning
    if c is not None:
        if not 1 <= c.passcode <= 99999998:
            raise _invalid("commissioning.passcode", c.passcode, "must be between 1 and 99999998")
        if c.passcode in INVALID_PASSCODES:
            raise _invalid("commissioning.passcode", c.passcode, "is a disallowed trivial passcode")

    t = matter.thread
    if t is not None:
        if not board.supports(BoardCapability.THREAD):
            raise IncompatibleConfigurationError(
                "matter", f"{board.identifier} has no 802.15.4 radio for Thread"
            )
        if t.channel is not None and not 11 <= t.channel <= 26:
            raise _invalid("thread.channel", t.channel, "must be between 11 and 26")
        if t.pan_id is not None and not 0 <= t.pan_id <= 0xFFFE:
            raise _invalid("thread.pan_id", t.pan_id, "must be between 0 and 0xFFFE")
        for prop in ("ext_pan_id", "network_key"):
            value = getattr(t, prop)
            if value is not None and not (len(value) == 32 and _HEX.match(value)):
                raise _invalid(f"thread.{prop}", value, "expected 32 hexadecimal characters")
        if t.dataset is not None:
            if not t.dataset or len(t.dataset) % 2 or not _HEX.match(t.dataset):
                raise _invalid("thread.dataset", t.dataset, "expected a non-empty hex string")

    transport = matter.transport
    if transport is MatterTransport.ETHERNET:
        raise IncompatibleConfigurationError("matter", "the ethernet transport is not supported")
    if transport is MatterTransport.THREAD and not matter.thread_enabled:
        raise IncompatibleConfigurationError(
            "matter", "the thread transport requires an enabled thread section"
        )
    if transport is MatterTransport.WIFI and not board.supports(BoardCapability.WIFI):
        raise IncompatibleConfigurationError(
            "matter", f"{board.identifier} has no WiFi radio for the wifi transport"
        )


_CLUSTER_CREATE: dict[MatterCluster, str] = {
    MatterCluster.IDENTIFY: "esp_matter::identify::create(endpoint, CLUSTER_FLAG_SERVER);",
    MatterCluster.GROUPS: "esp_matter::groups::create(endpoint, CLUSTER_FLAG_SERVER);",
    MatterCluster.SCENES: "esp_matter::scenes::create(endpoint, CLUSTER_FLAG_SERVER);",
    MatterCluster.ON_OFF: (
        "esp_matter::on_off::create(endpoint, CLUSTER_FLAG_SERVER, "
        "esp_matter::on_off::get_feature_map_value(0));"
    ),
    MatterCluster.LEVEL_CONTROL: (
        "esp_matter::level_control::create(endpoint, CLUSTER_FLAG_SERVER, "
        "esp_matter::level_control::get_feature_map_value(0));"
    ),
    MatterCluster.COLOR_CONTROL: (
        "esp_matter::color_control::create(endpoint, CLUSTER_FLAG_SERVER, "
        "esp_matter::color_control::get_feature_map_value("
        "esp_matter::color_control::feature::hue_saturation::get_id()));"
    ),
    MatterCluster.SWITCH: "esp_matter::switch_cluster::create(endpoint, CLUSTER_FLAG_SERVER);",
    MatterCluster.DOOR_LOCK: (
        "esp_matter::door_lock::create(endpoint, CLUSTER_FLAG_SERVER, "
        "esp_matter::door_lock::get_feature_map_value("
        "esp_matter::door_lock::feature::pin_credential::get_id()));"
    ),
    MatterCluster.THERMOSTAT: (
        "esp_matter::thermostat::create(endpoint, CLUSTER_FLAG_SERVER, "
        "esp_matter::thermostat::get_feature_map_value("
        "esp_matter::thermostat::feature::heating::get_id() | "
        "esp_matter::thermostat::feature::cooling::get_id()));"
    ),
    MatterCluster.FAN_CONTROL: (
        "esp_matter::fan_control::create(endpoint, CLUSTER_FLAG_SERVER, "
        "esp_matter::fan_control::get_feature_map_value("
        "esp_matter::fan_control::feature::multi_speed::get_id()));"
    ),
    MatterCluster.WINDOW_COVERING: (
        "esp_matter::window_covering::create(endpoint, CLUSTER_FLAG_SERVER, "
        "esp_matter::window_covering::get_feature_map_value("
        "esp_matter::window_covering::feature::lift::get_id()));"
    ),
}


def _cluster_statement(cluster: MatterCluster) -> str | None:
    if cluster is MatterCluster.DESCRIPTOR:
        # created for every endpoint, before the device-type clusters
        return None
    stmt = _CLUSTER_CREATE.get(cluster)
    if stmt is None:
        stmt = f"esp_matter::{cluster.value}::create(endpoint, CLUSTER_FLAG_SERVER);"
    return stmt


_EVENT_CALLBACK = """\
static void matter_event_cb(const chip::DeviceLayer::ChipDeviceEvent *event, intptr_t arg) {
    switch (event->Type) {
    case chip::DeviceLayer::DeviceEventType::kWiFiConnectivityChange:
        ESP_LOGI(MATTER_TAG, "WiFi connectivity changed");
        break;
    case chip::DeviceLayer::DeviceEventType::kCommissioningComplete:
        ESP_LOGI(MATTER_TAG, "Commissioning complete");
        break;
    default:
        break;
    }
}"""

_ATTRIBUTE_CALLBACK = """\
static esp_err_t matter_attribute_cb(esp_matter::attribute::callback_type_t type,
                                     uint16_t endpoint_id, uint32_t cluster_id,
                                     uint32_t attribute_id, esp_matter_attr_val_t *val,
                                     void *priv_data) {
    if (type == esp_matter::attribute::PRE_UPDATE) {
        ESP_LOGI(MATTER_TAG, "Attribute update: endpoint=0x%x, cluster=0x%lx, attribute=0x%lx",
                 endpoint_id, (unsigned long)cluster_id, (unsigned long)attribute_id);
    }
    return ESP_OK;
}"""


def matter_code(matter: MatterConfig) -> ComponentCode:
    """Node, endpoint and cluster setup for *matter* (assumed checked)."""
    device_type = matter.device_type
    declarations = [
        'static const char *MATTER_TAG = "matter";',
        f"static constexpr uint16_t kVendorId = 0x{matter.vendor_id:04X};",
        f"static constexpr uint16_t kProductId = 0x{matter.product_id:04X};",
        f"static constexpr uint32_t kDeviceTypeId = 0x{device_type.device_type_id:04X};",
    ]
    c = matter.commissioning
    if c is not None:
        declarations += [
            f"static constexpr uint16_t kDiscriminator = {c.discriminator};",
            f"static constexpr uint32_t kSetupPasscode = {c.passcode};",
        ]

    setup = [
        'ESP_LOGI(MATTER_TAG, "Starting Matter node");',
        "esp_matter::node::config_t node_config;",
        "esp_matter::node_t *node = esp_matter::node::create(&node_config, matter_attribute_cb, NULL);",
        "if (!node) {",
        '    ESP_LOGE(MATTER_TAG, "Failed to create Matter node");',
        "    esp_restart();",
        "}",
        "esp_matter::endpoint_t *endpoint = esp_matter::endpoint::create(node, ENDPOINT_FLAG_NONE, NULL);",
        "esp_matter::cluster_t *descriptor = esp_matter::descriptor::create(endpoint, CLUSTER_FLAG_SERVER);",
        "(void)descriptor;",
        "esp_matter::endpoint::add_device_type(endpoint, kDeviceTypeId, 1);",
    ]
    for cluster in device_type.required_clusters:
        stmt = _cluster_statement(cluster)
        if stmt is not None:
            setup.append(stmt)

    if matter.transport is MatterTransport.THREAD:
        t = matter.thread
        setup.append("#if CONFIG_OPENTHREAD_ENABLED")
        if t is not None and t.dataset:
            setup.append(f"esp_matter::set_custom_thread_dataset({c_string(t.dataset)});")
        setup.append("#endif")

    setup.append("ESP_ERROR_CHECK(esp_matter::start(matter_event_cb));")
    if c is not None:
        setup.append(
            'ESP_LOGI(MATTER_TAG, "Commissioning: discriminator %u, passcode %lu", '
            "kDiscriminator, (unsigned long)kSetupPasscode);"
        )

    return ComponentCode(
        includes=[
            '#include "esp_matter.h"',
            '#include "esp_matter_ota.h"',
            '#include "app/server/Server.h"',
        ],
        declarations=declarations,
        setup=setup,
        definitions=[_EVENT_CALLBACK, _ATTRIBUTE_CALLBACK],
    )
