"""Slot status values and the firmware flag word."""

from __future__ import annotations

from enum import Enum


class SlotStatus(str, Enum):
    """Resolved display status for a slot, highest priority first."""

    OFFLINE_NODE = "OFFLINE_NODE"
    STALE = "STALE"
    ERROR_SENSOR = "ERROR_SENSOR"
    CALIBRATING = "CALIBRATING"
    UNCALIBRATED = "UNCALIBRATED"
    EMPTY = "EMPTY"
    LOW = "LOW"
    OK = "OK"


STATUS_LABELS: dict[SlotStatus, str] = {
    SlotStatus.OK: "In Stock",
    SlotStatus.LOW: "Low Stock",
    SlotStatus.EMPTY: "Empty",
    SlotStatus.ERROR_SENSOR: "Sensor Error",
    SlotStatus.OFFLINE_NODE: "Offline",
    SlotStatus.STALE: "Stale Data",
    SlotStatus.UNCALIBRATED: "Needs Calibration",
    SlotStatus.CALIBRATING: "Calibrating…",
}

STALE_THRESHOLD_MS = 5 * 60 * 1000


class Flags:
    """Bits of the flag word sent by brain firmware.

    The layout is shared with deployed firmware and must not change:

      bit 0  stable weight
      bit 1  overload
      bit 2  sensor error
      bit 3  calibration mode
    """

    STABLE_WEIGHT = 1 << 0
    OVERLOAD = 1 << 1
    SENSOR_ERROR = 1 << 2
    CALIBRATION_MODE = 1 << 3

    NAMES = {
        STABLE_WEIGHT: "stable_weight",
        OVERLOAD: "overload",
        SENSOR_ERROR: "sensor_error",
        CALIBRATION_MODE: "calibration_mode",
    }


def has_flag(flags: int, bit: int) -> bool:
    """Return True when ``bit`` is set in the flag word."""
    return bool(flags & bit)


def describe_flags(flags: int) -> list[str]:
    """Names of the defined bits set in ``flags``, lowest bit first."""
    return [name for bit, name in Flags.NAMES.items() if flags & bit]


__all__ = [
    "SlotStatus",
    "STATUS_LABELS",
    "STALE_THRESHOLD_MS",
    "Flags",
    "has_flag",
    "describe_flags",
]
