import pytest

from embedgen.utils.validator import (
    estimateResources,
    parseMemorySize,
    resolveMicrocontrollerId,
    validateCode,
)

BLINK = "void setup() {\n  pinMode(13, OUTPUT);\n}\n\nvoid loop() {\n  delay(1000);\n}\n"


@pytest.mark.parametrize(
    "size, expected",
    [("2KB", 2048.0), ("1.9KB", 1.9 * 1024), ("4MB", 4 * 1024 * 1024), ("512", 512.0)],
)
def test_parse_memory_size(size, expected) -> None:
    assert parseMemorySize(size) == pytest.approx(expected)


def test_parse_memory_size_without_number_never_compares_true() -> None:
    size = parseMemorySize("Unknown")

    assert not size < 1
    assert not size >= 1


def test_ram_near_capacity_warns_but_stays_valid() -> None:
    result = validateCode(BLINK, "arduino-uno", "1.9KB / 2KB", "10KB / 32KB", "cpp")

    assert result.memory_valid is True
    assert "RAM usage (1.9KB) is approaching limit (2KB)" in result.warnings


def test_ram_over_capacity_is_invalid() -> None:
    result = validateCode(BLINK, "arduino-uno", "2.1KB / 2KB", "10KB / 32KB", "cpp")

    assert result.memory_valid is False


def test_flash_over_capacity_is_invalid() -> None:
    result = validateCode(BLINK, "arduino-uno", "1KB / 2KB", "32KB / 32KB", "cpp")

    assert result.memory_valid is False
    assert "Flash usage (32KB) is approaching limit (32KB)" in result.warnings


def test_battery_board_without_power_saving_is_flagged() -> None:
    result = validateCode(BLINK, "esp32", "10KB / 520KB", "100KB / 4MB", "cpp")

    assert result.power_efficient is False
    assert "No power-saving features detected in code for battery-powered device" in result.warnings


def test_battery_board_with_deep_sleep_is_efficient() -> None:
    code = BLINK + "esp_deep_sleep_start();\n"

    result = validateCode(code, "esp32", "10KB / 520KB", "100KB / 4MB", "cpp")

    assert result.power_efficient is True
    assert result.warnings == []


def test_mains_board_skips_power_check() -> None:
    result = validateCode(BLINK, "arduino-mega", "1KB / 8KB", "1KB / 256KB", "cpp")

    assert result.power_efficient is True


def test_unbalanced_braces_fail_for_c_family_only() -> None:
    code = "void loop() {\n  delay(1);\n"

    c_result = validateCode(code, "arduino-uno", "1KB", "1KB", "c")
    py_result = validateCode(code, "arduino-uno", "1KB", "1KB", "python")

    assert c_result.compilation_valid is False
    assert "Possible syntax error: mismatched braces" in c_result.warnings
    assert py_result.compilation_valid is True


@pytest.mark.parametrize("marker", ["TODO", "FIXME"])
def test_incomplete_markers_fail_compilation(marker) -> None:
    code = f"def loop():\n    pass  # {marker}: read sensor\n"

    result = validateCode(code, "raspberry-pi-pico", "1KB", "1KB", "python")

    assert result.compilation_valid is False


def test_unknown_microcontroller_yields_single_warning() -> None:
    result = validateCode(BLINK, "z80", "1KB / 1KB", "1KB / 1KB", "cpp")

    assert result.memory_valid is False
    assert result.power_efficient is False
    assert result.compilation_valid is False
    assert result.warnings == ["Unknown microcontroller. Cannot validate hardware constraints."]


def test_malformed_usage_strings_do_not_raise() -> None:
    result = validateCode(BLINK, "stm32f4", "", "lots", "cpp")

    assert result.memory_valid is False


def test_estimate_resources_uses_code_length() -> None:
    code = "x" * 300

    assert estimateResources(code, "arduino-uno") == {"ram": "10KB / 2KB", "flash": "30KB / 32KB"}
    assert estimateResources(code, "z80") == {"ram": "10KB / Unknown", "flash": "30KB / Unknown"}


@pytest.mark.parametrize(
    "name, expected",
    [("Arduino Uno", "arduino-uno"), ("esp32", "esp32"), ("  raspberry pi pico ", "raspberry-pi-pico"), ("Z80", "Z80")],
)
def test_resolve_microcontroller_id(name, expected) -> None:
    assert resolveMicrocontrollerId(name) == expected


def test_display_name_selects_the_same_board() -> None:
    by_name = validateCode(BLINK, "ESP32", "10KB / 520KB", "100KB / 4MB", "cpp")

    assert by_name == validateCode(BLINK, "esp32", "10KB / 520KB", "100KB / 4MB", "cpp")
    assert estimateResources("x" * 300, "Arduino Uno") == {"ram": "10KB / 2KB", "flash": "30KB / 32KB"}
