"""Charge cycle state machine for the Renewable Charge engine.

A cycle is created when a car accepts an energy package and lives until one
of its terminal states is reached:

    CHARGING -> COMPLETED   time budget used up
    CHARGING -> EXHAUSTED   package fully delivered
    CHARGING -> OVERFLOWED  next increment would exceed battery or package
    CHARGING -> CANCELLED   car removed from play
    CHARGING -> ABORTED     invalid car state (e.g. no owner)

The cycle only does arithmetic on its own counters.  Locking, scheduling
and feedback belong to :class:`~renewable_charge.core.car.Car`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from renewable_charge.core.energy_package import EnergyPackage
from renewable_charge.core.settings import ChargingConfig


class CycleState(Enum):
    """Lifecycle state of a single charge cycle."""

    CHARGING = "charging"
    COMPLETED = "completed"
    EXHAUSTED = "exhausted"
    OVERFLOWED = "overflowed"
    CANCELLED = "cancelled"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self is not CycleState.CHARGING


@dataclass
class ChargeCycle:
    """Counters and budgets of one accepted package claim.

    Attributes:
        package_size_wh: Total energy the package may deliver.
        total_charge_duration_seconds: Number of ticks the cycle may run.
        charge_increment_wh: Energy applied on every successful tick.
        seconds_passed: Ticks that applied an increment so far.
        energy_delivered: Energy applied so far in watt-hours.
        state: Current lifecycle state.
    """

    package_size_wh: int
    total_charge_duration_seconds: int
    charge_increment_wh: int
    seconds_passed: int = 0
    energy_delivered: int = 0
    state: CycleState = CycleState.CHARGING

    @classmethod
    def plan(cls, package: EnergyPackage, config: ChargingConfig) -> ChargeCycle:
        """Derive duration and increment for *package*.

        A non-positive duration cannot be divided into ticks; such a cycle is
        returned already ``COMPLETED`` with a zero increment.
        """
        duration = math.floor(config.time_blocked_per_charged_kwh * package.size_kwh)
        if duration <= 0:
            return cls(
                package_size_wh=package.size,
                total_charge_duration_seconds=0,
                charge_increment_wh=0,
                state=CycleState.COMPLETED,
            )
        return cls(
            package_size_wh=package.size,
            total_charge_duration_seconds=duration,
            charge_increment_wh=package.size // duration,
        )

    @property
    def is_active(self) -> bool:
        return self.state is CycleState.CHARGING

    @property
    def is_degenerate(self) -> bool:
        """True if the package could not be spread over any ticks."""
        return self.total_charge_duration_seconds <= 0

    def budget_outcome(self) -> CycleState | None:
        """Return the terminal state if the energy or time budget is spent."""
        if self.energy_delivered >= self.package_size_wh:
            return CycleState.EXHAUSTED
        if self.seconds_passed >= self.total_charge_duration_seconds:
            return CycleState.COMPLETED
        return None

    def fits(self, charged_capacity_wh: int, battery_capacity_wh: int) -> bool:
        """Whether the next increment stays within battery and package."""
        inc = self.charge_increment_wh
        return (
            charged_capacity_wh + inc <= battery_capacity_wh
            and self.energy_delivered + inc <= self.package_size_wh
        )

    def record_increment(self) -> None:
        """Account for one applied increment."""
        if not self.is_active:
            raise RuntimeError(f"Cannot record an increment on a {self.state.value} cycle.")
        self.energy_delivered += self.charge_increment_wh
        self.seconds_passed += 1

    def finish(self, state: CycleState) -> bool:
        """Move to terminal *state*.

        Returns:
            True if this call ended the cycle, False if it had already ended.
        """
        if not state.is_terminal:
            raise ValueError("finish() requires a terminal state.")
        if not self.is_active:
            return False
        self.state = state
        return True
