"""Tests for charge cycle planning and state transitions."""

import pytest

from renewable_charge.core.cycle import ChargeCycle, CycleState
from renewable_charge.core.energy_package import EnergyPackage
from renewable_charge.core.settings import ChargingConfig

# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def test_plan_derives_duration_and_increment() -> None:
    """Duration and increment must be floored from the package size."""
    cycle = ChargeCycle.plan(EnergyPackage(size=6000), ChargingConfig(time_blocked_per_charged_kwh=10.0))
    assert cycle.total_charge_duration_seconds == 60
    assert cycle.charge_increment_wh == 100
    assert cycle.state is CycleState.CHARGING
    assert cycle.seconds_passed == 0
    assert cycle.energy_delivered == 0


def test_plan_floors_fractional_values() -> None:
    """Fractional durations and increments must round down."""
    cycle = ChargeCycle.plan(EnergyPackage(size=2550), ChargingConfig(time_blocked_per_charged_kwh=3.0))
    # 3.0 * 2.55 = 7.65 -> 7 ticks, 2550 // 7 = 364 Wh
    assert cycle.total_charge_duration_seconds == 7
    assert cycle.charge_increment_wh == 364


def test_plan_degenerate_duration_is_already_completed() -> None:
    """A duration of zero ticks must produce a finished, empty cycle."""
    cycle = ChargeCycle.plan(EnergyPackage(size=0), ChargingConfig())
    assert cycle.is_degenerate
    assert not cycle.is_active
    assert cycle.state is CycleState.COMPLETED
    assert cycle.charge_increment_wh == 0


# ---------------------------------------------------------------------------
# Budgets
# ---------------------------------------------------------------------------


def _cycle(size: int = 1000, duration: int = 10) -> ChargeCycle:
    return ChargeCycle(
        package_size_wh=size,
        total_charge_duration_seconds=duration,
        charge_increment_wh=size // duration,
    )


def test_budget_outcome_reports_exhausted_package() -> None:
    """Delivering the full package must end the cycle as exhausted."""
    cycle = _cycle()
    for _ in range(10):
        assert cycle.budget_outcome() is None
        cycle.record_increment()
    assert cycle.energy_delivered == 1000
    assert cycle.budget_outcome() is CycleState.EXHAUSTED


def test_budget_outcome_reports_elapsed_time() -> None:
    """Running out of ticks with energy left must end as completed."""
    cycle = ChargeCycle(package_size_wh=1005, total_charge_duration_seconds=10, charge_increment_wh=100)
    for _ in range(10):
        cycle.record_increment()
    assert cycle.energy_delivered == 1000
    assert cycle.budget_outcome() is CycleState.COMPLETED


def test_fits_checks_battery_and_package() -> None:
    """The next increment must fit both the battery and the package."""
    cycle = _cycle()
    assert cycle.fits(charged_capacity_wh=900, battery_capacity_wh=1000)
    assert not cycle.fits(charged_capacity_wh=901, battery_capacity_wh=1000)

    cycle.energy_delivered = 950
    assert not cycle.fits(charged_capacity_wh=0, battery_capacity_wh=50_000)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def test_finish_is_idempotent() -> None:
    """Only the first terminal transition may take effect."""
    cycle = _cycle()
    assert cycle.finish(CycleState.OVERFLOWED)
    assert not cycle.finish(CycleState.CANCELLED)
    assert cycle.state is CycleState.OVERFLOWED


def test_finish_rejects_non_terminal_state() -> None:
    cycle = _cycle()
    with pytest.raises(ValueError):
        cycle.finish(CycleState.CHARGING)


def test_record_increment_after_finish_raises() -> None:
    """Counters are frozen once the cycle has ended."""
    cycle = _cycle()
    cycle.finish(CycleState.CANCELLED)
    with pytest.raises(RuntimeError):
        cycle.record_increment()
    assert cycle.energy_delivered == 0


def test_terminal_states() -> None:
    terminal = {state for state in CycleState if state.is_terminal}
    assert CycleState.CHARGING not in terminal
    assert terminal == {
        CycleState.COMPLETED,
        CycleState.EXHAUSTED,
        CycleState.OVERFLOWED,
        CycleState.CANCELLED,
        CycleState.ABORTED,
    }
