"""
Advisory checks over generated firmware. Nothing here compiles or runs the code:
memory, power and compilation plausibility are judged from the reported usage strings
and from plain substring matching.
"""

import math
import re
from typing import Dict

from embedgen.config import MICROCONTROLLERS
from embedgen.utils.types import ValidationResult

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d*\.?\d+)")

APPROACHING_LIMIT_RATIO = 0.9
POWER_SAVING_MARKERS = ("sleep", "power", "low_power")
BRACE_CHECKED_LANGUAGES = ("c", "cpp")
INCOMPLETE_MARKERS = ("TODO", "FIXME")


def parseMemorySize(size: str) -> float:
    """
    "1.9KB" -> 1945.6 bytes, "4MB" -> 4194304.0. Returns nan when there is no leading
    number, so every comparison against it is False.
    """
    match = _LEADING_NUMBER.match(size or "")
    if not match:
        return math.nan
    value = float(match.group(1))
    lowered = size.lower()
    if "kb" in lowered:
        return value * 1024
    if "mb" in lowered:
        return value * 1024 * 1024
    return value


def _usedPart(usage: str) -> str:
    # "1.9KB / 2KB" -> "1.9KB"
    return (usage or "").split("/")[0].strip()


def resolveMicrocontrollerId(name_or_id: str) -> str:
    # metadata carries display names ("Arduino Uno"), the board table is keyed by id
    if name_or_id in MICROCONTROLLERS:
        return name_or_id
    for board_id, board in MICROCONTROLLERS.items():
        if board["name"].lower() == (name_or_id or "").strip().lower():
            return board_id
    return name_or_id


def estimateResources(code: str, microcontroller: str) -> Dict[str, str]:
    """
    Rough usage estimate from code length, formatted as "<used> / <capacity>".
    """
    board = MICROCONTROLLERS.get(resolveMicrocontrollerId(microcontroller))
    ram_capacity = board["ram"] if board else "Unknown"
    flash_capacity = board["flash"] if board else "Unknown"
    return {
        "ram": f"{len(code) // 30}KB / {ram_capacity}",
        "flash": f"{len(code) // 10}KB / {flash_capacity}",
    }


def validateCode(
    code: str,
    microcontroller: str,
    ram_usage: str,
    flash_usage: str,
    language: str,
) -> ValidationResult:
    warnings = []
    board = MICROCONTROLLERS.get(resolveMicrocontrollerId(microcontroller))

    if not board:
        warnings.append("Unknown microcontroller. Cannot validate hardware constraints.")
        return ValidationResult(
            memory_valid=False,
            power_efficient=False,
            compilation_valid=False,
            warnings=warnings,
        )

    code = code or ""

    used_ram = parseMemorySize(_usedPart(ram_usage))
    total_ram = parseMemorySize(board["ram"])
    used_flash = parseMemorySize(_usedPart(flash_usage))
    total_flash = parseMemorySize(board["flash"])

    memory_valid = used_ram < total_ram and used_flash < total_flash
    if used_ram >= total_ram * APPROACHING_LIMIT_RATIO:
        warnings.append(
            f"RAM usage ({_usedPart(ram_usage)}) is approaching limit ({board['ram']})"
        )
    if used_flash >= total_flash * APPROACHING_LIMIT_RATIO:
        warnings.append(
            f"Flash usage ({_usedPart(flash_usage)}) is approaching limit ({board['flash']})"
        )

    power_efficient = True
    if board["battery_powered"]:
        lowered = code.lower()
        if not any(marker in lowered for marker in POWER_SAVING_MARKERS):
            power_efficient = False
            warnings.append(
                "No power-saving features detected in code for battery-powered device"
            )

    compilation_valid = True
    if language in BRACE_CHECKED_LANGUAGES and code.count("{") != code.count("}"):
        compilation_valid = False
        warnings.append("Possible syntax error: mismatched braces")

    if any(marker in code for marker in INCOMPLETE_MARKERS):
        compilation_valid = False
        warnings.append(
            "Code contains TODO or FIXME comments that may indicate incomplete implementation"
        )

    return ValidationResult(
        memory_valid=memory_valid,
        power_efficient=power_efficient,
        compilation_valid=compilation_valid,
        warnings=warnings,
    )
