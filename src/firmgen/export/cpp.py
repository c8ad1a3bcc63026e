"""ESP-IDF project writer for a CompilationUnit.

Lays the unit's fragment phases out as a ``main.cpp`` and emits the
matching ``CMakeLists.txt`` and ``sdkconfig.defaults`` text.
"""

from __future__ import annotations

from io import StringIO

from firmgen.framework import BoardRegistry, c_string, default_boards
from firmgen.model import CompilationUnit, Configuration, LogLevel


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def to_main_cpp(unit: CompilationUnit, configuration: Configuration) -> str:
    """Render *unit* as the text of ``main/main.cpp``."""
    w = CppWriter()
    w.write_main(unit, configuration)
    return w.getvalue()


def to_cmake_lists(configuration: Configuration) -> str:
    """Top-level ``CMakeLists.txt`` for the ESP-IDF project."""
    return (
        "cmake_minimum_required(VERSION 3.16)\n"
        "\n"
        f'set(PROJECT_NAME "{configuration.device.name}")\n'
        "\n"
        "include($ENV{IDF_PATH}/tools/cmake/project.cmake)\n"
        "project(${PROJECT_NAME})\n"
    )


def to_sdkconfig(configuration: Configuration, boards: BoardRegistry | None = None) -> str:
    """``sdkconfig.defaults`` text for *configuration*'s board."""
    board = (boards or default_boards()).lookup(configuration.board)
    logger = configuration.logger
    level = logger.level if logger else LogLevel.INFO
    baud = logger.baud_rate if logger else 115200

    lines = [
        "# firmgen generated configuration",
        f"# Board: {board.identifier}",
        f"# Framework: {configuration.esp32.framework.type.value}",
        "",
        f'CONFIG_IDF_TARGET="{_idf_target(board.chip_family.value)}"',
        "",
        "# Compiler",
        "CONFIG_COMPILER_OPTIMIZATION_SIZE=y",
        "CONFIG_COMPILER_CXX_EXCEPTIONS=n",
        "CONFIG_COMPILER_CXX_RTTI=n",
        "",
        "# FreeRTOS",
        "CONFIG_FREERTOS_HZ=1000",
        "",
        "# Console",
        "CONFIG_ESP_CONSOLE_UART_DEFAULT=y",
        f"CONFIG_ESP_CONSOLE_UART_BAUDRATE={baud}",
        "",
        "# Logging",
        f"CONFIG_LOG_DEFAULT_LEVEL_{_SDK_LOG_LEVEL[level]}=y",
    ]
    if configuration.esp32.flash_size:
        lines += ["", f"CONFIG_ESPTOOLPY_FLASHSIZE_{configuration.esp32.flash_size.upper()}=y"]
    if configuration.ota:
        lines += ["", "# OTA", "CONFIG_PARTITION_TABLE_TWO_OTA=y"]
    if configuration.wifi is not None:
        lines += [
            "",
            "# WiFi",
            "CONFIG_ESP32_WIFI_ENABLED=y",
            "CONFIG_ESP32_WIFI_STATIC_RX_BUFFER_NUM=10",
            "CONFIG_ESP32_WIFI_DYNAMIC_RX_BUFFER_NUM=32",
            "CONFIG_ESP32_WIFI_TX_BUFFER_TYPE_DYNAMIC=y",
            "CONFIG_ESP32_WIFI_DYNAMIC_TX_BUFFER_NUM=32",
        ]
    matter = configuration.matter
    if matter is not None and matter.enabled:
        lines += ["", "# Matter", "CONFIG_ESP_MATTER_ENABLE_DATA_MODEL=y"]
        if matter.network is None or matter.network.ipv6_enabled:
            lines.append("CONFIG_LWIP_IPV6=y")
        if matter.thread_enabled:
            lines += ["CONFIG_OPENTHREAD_ENABLED=y", "CONFIG_OPENTHREAD_FTD=y"]
    return "\n".join(lines) + "\n"


def _idf_target(chip_family: str) -> str:
    return chip_family.lower().replace("-", "")


_SDK_LOG_LEVEL: dict[LogLevel, str] = {
    LogLevel.NONE: "NONE",
    LogLevel.ERROR: "ERROR",
    LogLevel.WARN: "WARN",
    LogLevel.INFO: "INFO",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.VERBOSE: "VERBOSE",
    LogLevel.VERY_VERBOSE: "VERBOSE",
}

_STANDARD_INCLUDES = (
    "#include <stdio.h>",
    "#include <string.h>",
    "#include <math.h>",
    "#include <freertos/FreeRTOS.h>",
    "#include <freertos/task.h>",
    "#include <esp_system.h>",
    "#include <esp_log.h>",
    "#include <esp_timer.h>",
    "#include <nvs_flash.h>",
)

_WIFI_INCLUDES = (
    "#include <esp_wifi.h>",
    "#include <esp_event.h>",
    "#include <esp_netif.h>",
)


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class CppWriter:
    """Emits C++ source into an internal buffer."""

    def __init__(self) -> None:
        self._buf = StringIO()
        self._indent = 0
        self._indent_str = "    "

    def getvalue(self) -> str:
        return self._buf.getvalue().rstrip("\n") + "\n"

    # -- Low-level output helpers -------------------------------------------

    def _line(self, text: str = "") -> None:
        if text:
            self._buf.write(self._indent_str * self._indent + text + "\n")
        else:
            self._buf.write("\n")

    def _block(self, text: str) -> None:
        """Write a multi-line fragment at the current indent."""
        for line in text.split("\n"):
            self._line(line)

    def _indent_inc(self) -> None:
        self._indent += 1

    def _indent_dec(self) -> None:
        self._indent = max(0, self._indent - 1)

    def _open(self, header: str) -> None:
        self._line(header + " {")
        self._indent_inc()

    def _close(self) -> None:
        self._indent_dec()
        self._line("}")

    # ======================================================================
    # main.cpp
    # ======================================================================

    def write_main(self, unit: CompilationUnit, config: Configuration) -> None:
        self._line(f"// Generated by firmgen for {config.device.name} ({unit.board})")
        self._line("// Do not edit: changes are lost on the next build.")
        self._line()

        for inc in _STANDARD_INCLUDES:
            self._line(inc)
        if config.wifi is not None:
            for inc in _WIFI_INCLUDES:
                self._line(inc)
        if config.api is not None:
            self._line('#include "api_server.h"')
        for inc in unit.includes:
            self._line(inc)
        self._line()

        self._line("static unsigned long millis() {")
        self._line("    return (unsigned long)(esp_timer_get_time() / 1000ULL);")
        self._line("}")
        self._line()

        if unit.declarations:
            self._line("// Global component declarations")
            for decl in unit.declarations:
                self._block(decl)
            self._line()

        if unit.definitions:
            self._line("// Component function definitions")
            for definition in unit.definitions:
                self._block(definition)
                self._line()

        if config.wifi is not None:
            self.write_wifi_setup(config)

        if config.api is not None:
            self.write_api_registration(unit, config)

        self.write_setup(unit, config)
        self._line()
        self.write_loop(unit)
        self._line()
        self._line("// ESP-IDF entry point")
        self._open('extern "C" void app_main()')
        self._line("setup();")
        self._open("while (true)")
        self._line("loop();")
        self._close()
        self._close()

    def write_wifi_setup(self, config: Configuration) -> None:
        wifi = config.wifi
        self._line("static void wifi_event_handler(void *arg, esp_event_base_t event_base,")
        self._line("                               int32_t event_id, void *event_data) {")
        self._indent_inc()
        self._open("if (event_base == WIFI_EVENT && event_id == WIFI_EVENT_STA_START)")
        self._line("esp_wifi_connect();")
        self._indent_dec()
        self._line("} else if (event_base == WIFI_EVENT && event_id == WIFI_EVENT_STA_DISCONNECTED) {")
        self._indent_inc()
        self._line('printf("WiFi disconnected, reconnecting...\\n");')
        self._line("esp_wifi_connect();")
        self._indent_dec()
        self._line("} else if (event_base == IP_EVENT && event_id == IP_EVENT_STA_GOT_IP) {")
        self._indent_inc()
        self._line("ip_event_got_ip_t *event = (ip_event_got_ip_t *)event_data;")
        self._line('printf("WiFi connected, IP: " IPSTR "\\n", IP2STR(&event->ip_info.ip));')
        self._close()
        self._close()
        self._line()

        self._open("void wifi_setup()")
        self._line("ESP_ERROR_CHECK(esp_netif_init());")
        self._line("ESP_ERROR_CHECK(esp_event_loop_create_default());")
        self._line("esp_netif_t *sta = esp_netif_create_default_wifi_sta();")
        if wifi.manual_ip is not None:
            ip = wifi.manual_ip
            self._line("esp_netif_dhcpc_stop(sta);")
            self._line("esp_netif_ip_info_t ip_info = {};")
            self._line(f"ip_info.ip.addr = ipaddr_addr({c_string(ip.static_ip)});")
            self._line(f"ip_info.gw.addr = ipaddr_addr({c_string(ip.gateway)});")
            self._line(f"ip_info.netmask.addr = ipaddr_addr({c_string(ip.subnet)});")
            self._line("esp_netif_set_ip_info(sta, &ip_info);")
        else:
            self._line("(void)sta;")
        self._line()
        self._line("wifi_init_config_t cfg = WIFI_INIT_CONFIG_DEFAULT();")
        self._line("ESP_ERROR_CHECK(esp_wifi_init(&cfg));")
        self._line("ESP_ERROR_CHECK(esp_event_handler_register(WIFI_EVENT, ESP_EVENT_ANY_ID, &wifi_event_handler, NULL));")
        self._line("ESP_ERROR_CHECK(esp_event_handler_register(IP_EVENT, IP_EVENT_STA_GOT_IP, &wifi_event_handler, NULL));")
        self._line()
        self._line("wifi_config_t wifi_config = {};")
        self._line(
            f"strncpy((char *)wifi_config.sta.ssid, {c_string(wifi.ssid)}, "
            f"sizeof(wifi_config.sta.ssid) - 1);"
        )
        self._line(
            f"strncpy((char *)wifi_config.sta.password, {c_string(wifi.password)}, "
            f"sizeof(wifi_config.sta.password) - 1);"
        )
        self._line("ESP_ERROR_CHECK(esp_wifi_set_mode(WIFI_MODE_STA));")
        self._line("ESP_ERROR_CHECK(esp_wifi_set_config(WIFI_IF_STA, &wifi_config));")
        self._line("ESP_ERROR_CHECK(esp_wifi_start());")
        self._close()
        self._line()

    def write_api_registration(self, unit: CompilationUnit, config: Configuration) -> None:
        self._line("// Component API registration")
        self._open("void register_api_entities()")
        for reg in unit.api_registrations:
            self._block(reg)
        self._close()
        self._line()

    def write_setup(self, unit: CompilationUnit, config: Configuration) -> None:
        self._open("void setup()")
        self._line("esp_err_t ret = nvs_flash_init();")
        self._open("if (ret == ESP_ERR_NVS_NO_FREE_PAGES || ret == ESP_ERR_NVS_NEW_VERSION_FOUND)")
        self._line("ESP_ERROR_CHECK(nvs_flash_erase());")
        self._line("ret = nvs_flash_init();")
        self._close()
        self._line("ESP_ERROR_CHECK(ret);")
        if config.logger is not None:
            self._line(f'esp_log_level_set("*", ESP_LOG_{_SDK_LOG_LEVEL[config.logger.level]});')
        self._line()
        self._line(f'printf("%s on %s\\n", {c_string(config.device.name)}, {c_string(unit.board)});')

        if unit.setup:
            self._line()
            self._line("// Component setup")
            for stmt in unit.setup:
                self._block(stmt)

        if config.wifi is not None:
            self._line()
            self._line("wifi_setup();")
        if config.api is not None:
            self._line(f"api_setup({config.api.port});")
            self._line("register_api_entities();")

        self._line()
        self._line('printf("Setup completed\\n");')
        self._close()

    def write_loop(self, unit: CompilationUnit) -> None:
        self._open("void loop()")
        for stmt in unit.loop:
            self._block(stmt)
        if unit.loop:
            self._line()
        self._line("// Yield so the idle task can feed the watchdog")
        self._line("vTaskDelay(pdMS_TO_TICKS(10));")
        self._close()
