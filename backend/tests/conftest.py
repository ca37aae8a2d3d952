"""Test fixtures for shelfwatch."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from shelfwatch.models.entities import SkuConfig, SlotConfig, SlotLiveState  # noqa: E402
from shelfwatch.models.status import Flags  # noqa: E402

NOW = 1_700_000_000_000


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("SHW_SOURCE", "memory")
    monkeypatch.setenv("SHW_SNAPSHOT_ROOT", str(tmp_path / "snapshots"))
    monkeypatch.setenv("SHW_DEBOUNCE_MS", "10")
    monkeypatch.delenv("SHW_CONFIG", raising=False)

    from shelfwatch.api import dependencies as deps
    from shelfwatch.core.config import get_settings

    get_settings.cache_clear()
    deps.get_app_settings.cache_clear()
    deps.shutdown_dependencies()
    yield
    deps.shutdown_dependencies()
    deps.get_app_settings.cache_clear()
    get_settings.cache_clear()


class FakeHandle:
    def __init__(self, delay: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeLoop:
    """Records ``call_later`` timers so tests decide when they fire."""

    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeHandle:
        handle = FakeHandle(delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def run_pending(self) -> int:
        fired = 0
        due, self.handles = self.pending, []
        for handle in due:
            handle.callback(*handle.args)
            fired += 1
        return fired


@pytest.fixture
def fake_loop() -> FakeLoop:
    return FakeLoop()


@pytest.fixture(scope="session")
def now() -> int:
    return NOW


@pytest.fixture(scope="session")
def make_config() -> Callable[..., SlotConfig]:
    base = SlotConfig(
        slot_id="slot-001",
        shelf_id="shelf-001",
        location_id="loc-001",
        network_id="net-001",
        name="Flour bin",
        node_id="AA:BB:CC:DD:EE:FF",
        sku_id="sku-flour",
        tare_g=150.0,
        calibration_factor=1.0,
        hysteresis_g=5.0,
        min_qty_step=1,
        status="active",
    )

    def factory(**overrides: Any) -> SlotConfig:
        return replace(base, **overrides)

    return factory


@pytest.fixture(scope="session")
def make_live() -> Callable[..., SlotLiveState]:
    base = SlotLiveState(
        slot_id="slot-001",
        net_weight_g=5000.0,
        quantity=5,
        updated_at=NOW - 1000,
        confidence=0.95,
        flags=Flags.STABLE_WEIGHT,
        source_node="AA:BB:CC:DD:EE:FF",
        seq=42,
    )

    def factory(**overrides: Any) -> SlotLiveState:
        return replace(base, **overrides)

    return factory


@pytest.fixture(scope="session")
def flour_sku() -> SkuConfig:
    return SkuConfig(
        sku_id="sku-flour",
        name="All-Purpose Flour 1 kg",
        unit_weight_g=1000.0,
        tolerance_g=20.0,
        packaging_weight_g=15.0,
        active=True,
    )
