"""Tests for slot status resolution."""

from __future__ import annotations

import pytest

from shelfwatch.models.status import STALE_THRESHOLD_MS, Flags, SlotStatus, describe_flags, has_flag
from shelfwatch.projection import resolve_status


def test_ok_when_everything_nominal(make_config, make_live, now) -> None:
    assert resolve_status(make_config(), make_live(), True, now) is SlotStatus.OK


def test_offline_without_live_record(make_config, now) -> None:
    assert resolve_status(make_config(), None, True, now) is SlotStatus.OFFLINE_NODE


def test_offline_when_node_not_present(make_config, make_live, now) -> None:
    assert resolve_status(make_config(), make_live(), False, now) is SlotStatus.OFFLINE_NODE


def test_offline_wins_over_every_other_condition(make_config, make_live, now) -> None:
    live = make_live(
        updated_at=now - STALE_THRESHOLD_MS - 1,
        flags=Flags.SENSOR_ERROR | Flags.CALIBRATION_MODE | Flags.OVERLOAD,
        quantity=-3,
    )
    assert resolve_status(make_config(tare_g=0), live, False, now) is SlotStatus.OFFLINE_NODE


def test_stale_boundary_is_exclusive(make_config, make_live, now) -> None:
    at_threshold = make_live(updated_at=now - 300_000)
    past_threshold = make_live(updated_at=now - 300_001)
    assert resolve_status(make_config(), at_threshold, True, now) is SlotStatus.OK
    assert resolve_status(make_config(), past_threshold, True, now) is SlotStatus.STALE


def test_stale_wins_over_sensor_error(make_config, make_live, now) -> None:
    live = make_live(updated_at=now - STALE_THRESHOLD_MS - 1, flags=Flags.SENSOR_ERROR)
    assert resolve_status(make_config(), live, True, now) is SlotStatus.STALE


def test_sensor_error(make_config, make_live, now) -> None:
    live = make_live(flags=Flags.SENSOR_ERROR)
    assert resolve_status(make_config(), live, True, now) is SlotStatus.ERROR_SENSOR


def test_sensor_error_wins_over_calibration(make_config, make_live, now) -> None:
    live = make_live(flags=Flags.SENSOR_ERROR | Flags.CALIBRATION_MODE)
    assert resolve_status(make_config(), live, True, now) is SlotStatus.ERROR_SENSOR


@pytest.mark.parametrize("tare_g", [0, 150.0])
def test_calibrating_regardless_of_tare(make_config, make_live, now, tare_g) -> None:
    live = make_live(flags=Flags.CALIBRATION_MODE)
    assert resolve_status(make_config(tare_g=tare_g), live, True, now) is SlotStatus.CALIBRATING


def test_uncalibrated_when_tare_is_zero(make_config, make_live, now) -> None:
    assert resolve_status(make_config(tare_g=0), make_live(), True, now) is SlotStatus.UNCALIBRATED


def test_uncalibrated_wins_over_empty(make_config, make_live, now) -> None:
    live = make_live(quantity=0)
    assert resolve_status(make_config(tare_g=0), live, True, now) is SlotStatus.UNCALIBRATED


@pytest.mark.parametrize("quantity", [0, -1])
def test_empty_for_zero_and_negative_quantity(make_config, make_live, now, quantity) -> None:
    live = make_live(quantity=quantity)
    assert resolve_status(make_config(), live, True, now) is SlotStatus.EMPTY


def test_low_threshold_is_inclusive(make_config, make_live, now) -> None:
    assert resolve_status(make_config(), make_live(quantity=2), True, now) is SlotStatus.LOW
    assert resolve_status(make_config(), make_live(quantity=1), True, now) is SlotStatus.LOW
    assert resolve_status(make_config(), make_live(quantity=3), True, now) is SlotStatus.OK


def test_custom_low_threshold(make_config, make_live, now) -> None:
    live = make_live(quantity=5)
    assert resolve_status(make_config(), live, True, now, low_threshold=5) is SlotStatus.LOW
    assert resolve_status(make_config(), live, True, now, low_threshold=4) is SlotStatus.OK


def test_overload_and_stable_bits_do_not_change_status(make_config, make_live, now) -> None:
    live = make_live(flags=Flags.OVERLOAD | Flags.STABLE_WEIGHT)
    assert resolve_status(make_config(), live, True, now) is SlotStatus.OK


def test_defaults_to_wall_clock(make_config, make_live) -> None:
    # a reading from 2023 is stale against the real clock
    assert resolve_status(make_config(), make_live(), True) is SlotStatus.STALE


def test_flag_bits_match_firmware_layout() -> None:
    assert (Flags.STABLE_WEIGHT, Flags.OVERLOAD, Flags.SENSOR_ERROR, Flags.CALIBRATION_MODE) == (
        0x01,
        0x02,
        0x04,
        0x08,
    )
    assert has_flag(0x0A, Flags.OVERLOAD)
    assert not has_flag(0x0A, Flags.SENSOR_ERROR)
    assert describe_flags(0x0D) == ["stable_weight", "sensor_error", "calibration_mode"]
    assert describe_flags(0xF0) == []
