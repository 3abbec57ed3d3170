"""Car model and charging state machine for the Renewable Charge game.

A car accepts one energy package at a time.  While a package is being
delivered the car is *blocked*: further claims are rejected until the
cycle reaches a terminal state.  Energy is applied in fixed increments on
every tick of a periodic driver, bounded by the package size, the cycle
duration and the battery capacity.
"""

from __future__ import annotations

import logging
import math
import threading
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from renewable_charge.core.cycle import ChargeCycle, CycleState
from renewable_charge.core.energy_package import EnergyPackage
from renewable_charge.core.errors import MissingOwnerError
from renewable_charge.core.feedback import ChargeFeedback, ChargeResult, LedFeedback, leds_to_light
from renewable_charge.core.scheduler import ThreadedTickScheduler, TickHandle, TickScheduler
from renewable_charge.core.settings import ChargingConfig

if TYPE_CHECKING:
    from renewable_charge.core.player import Player

_LOGGER = logging.getLogger(__name__)

CHIP_ID_SEPARATOR = ":"

ProgressCallback = Callable[[], None]
CompletionCallback = Callable[[CycleState], None]


@dataclass(frozen=True)
class CarStatus:
    """Consistent view of a car's charge state for display.

    Attributes:
        charged_capacity_wh: Battery level in Wh.
        is_blocked: Whether a charge cycle is running.
        range_in_km: Range the current charge provides.
        leds_to_light: LEDs representing the current charge.
    """

    charged_capacity_wh: int
    is_blocked: bool
    range_in_km: int
    leds_to_light: int


class Car:
    """An RFID-tagged toy car with a simulated battery.

    Attributes:
        name: Display name of the car.
        battery_capacity_wh: Battery capacity in Wh.
        energy_efficiency_km_wh: Range per Wh, derived from the declared range.
        config: Charging parameters shared by all cars.
    """

    def __init__(
        self,
        chip_id: str,
        name: str,
        battery_capacity_wh: int,
        max_range_km: int,
        config: ChargingConfig | None = None,
        *,
        charged_capacity_wh: int = 0,
        scheduler: TickScheduler | None = None,
        feedback: ChargeFeedback | None = None,
    ) -> None:
        if not chip_id:
            raise ValueError("chip_id must not be empty.")
        if not name:
            raise ValueError("Car name must not be empty.")
        if battery_capacity_wh <= 0:
            raise ValueError(f"Car '{name}': battery_capacity_wh must be > 0.")
        if max_range_km < 0:
            raise ValueError(f"Car '{name}': max_range_km must be >= 0.")
        if not 0 <= charged_capacity_wh <= battery_capacity_wh:
            raise ValueError(
                f"Car '{name}': charged_capacity_wh must be between 0 and {battery_capacity_wh}."
            )
        self._chip_id: str = chip_id
        self._name: str = name
        self._battery_capacity_wh: int = int(battery_capacity_wh)
        self._energy_efficiency_km_wh: float = max_range_km / battery_capacity_wh
        self.config: ChargingConfig = config or ChargingConfig()
        self._scheduler: TickScheduler = scheduler or ThreadedTickScheduler()
        self._feedback: ChargeFeedback = feedback or LedFeedback()

        self._lock = threading.RLock()
        self._charged_capacity_wh: int = int(charged_capacity_wh)
        self._cycle: ChargeCycle | None = None
        self._tick_handle: TickHandle | None = None
        self._on_complete: CompletionCallback | None = None
        self._owner_ref: weakref.ReferenceType[Player] | None = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def chip_ids(self) -> list[str]:
        """Chip identifiers registered for this car."""
        return self._chip_id.split(CHIP_ID_SEPARATOR)

    @property
    def battery_capacity_wh(self) -> int:
        return self._battery_capacity_wh

    @property
    def energy_efficiency_km_wh(self) -> float:
        return self._energy_efficiency_km_wh

    @property
    def charged_capacity_wh(self) -> int:
        with self._lock:
            return self._charged_capacity_wh

    @property
    def is_blocked(self) -> bool:
        with self._lock:
            return self._cycle is not None

    @property
    def range_in_km(self) -> int:
        with self._lock:
            return math.floor(self._charged_capacity_wh * self._energy_efficiency_km_wh)

    @property
    def active_cycle(self) -> ChargeCycle | None:
        """The running cycle, if any.  Read-only telemetry."""
        with self._lock:
            return self._cycle

    @property
    def owner(self) -> Player | None:
        ref = self._owner_ref
        return ref() if ref is not None else None

    @owner.setter
    def owner(self, player: Player | None) -> None:
        self._owner_ref = weakref.ref(player) if player is not None else None

    def snapshot(self) -> CarStatus:
        """Read charge level and blocked flag under a single lock."""
        with self._lock:
            charged = self._charged_capacity_wh
            return CarStatus(
                charged_capacity_wh=charged,
                is_blocked=self._cycle is not None,
                range_in_km=math.floor(charged * self._energy_efficiency_km_wh),
                leds_to_light=leds_to_light(charged, self._battery_capacity_wh, self.config.led_count),
            )

    # ------------------------------------------------------------------
    # Charging
    # ------------------------------------------------------------------

    def claim_package(
        self,
        energy_package: EnergyPackage,
        on_every_charge: ProgressCallback | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> bool:
        """Start charging the car with *energy_package*.

        The car stays blocked for ``time_blocked_per_charged_kwh`` seconds
        per kWh in the package and receives an equal share of the package on
        every tick.  The call returns as soon as the cycle is scheduled.

        Args:
            energy_package: Package to deliver.
            on_every_charge: Called after every applied increment.
            on_complete: Called once with the terminal state of the cycle.

        Returns:
            False if the car is already charging, True otherwise.
        """
        with self._lock:
            if self._cycle is not None:
                _LOGGER.info(f"Attempt to charge blocked car: {self._name}")
                return False

            cycle = ChargeCycle.plan(energy_package, self.config)
            if cycle.is_degenerate:
                _LOGGER.warning(
                    f"{self._name}: package of {energy_package.size}Wh yields no charge time "
                    f"(factor {self.config.time_blocked_per_charged_kwh}); completing instantly."
                )
            else:
                self._cycle = cycle
                self._on_complete = on_complete
                self._tick_handle = self._scheduler.schedule(
                    lambda: self._tick(cycle, on_every_charge, on_complete),
                    self.config.tick_interval_seconds,
                    name=f"charge-{self._name}",
                )
                _LOGGER.info(
                    f"{self._name}: charging {energy_package.size}Wh over "
                    f"{cycle.total_charge_duration_seconds}s "
                    f"({cycle.charge_increment_wh}Wh per tick)"
                )

        if cycle.is_degenerate:
            self._notify_complete(on_complete, cycle.state)
        return True

    def charge(self, energy_wh: int) -> ChargeResult:
        """Add *energy_wh* to the battery and update the owner's LEDs.

        No clamping is applied; the tick loop never passes an increment that
        would overflow the battery.

        Raises:
            MissingOwnerError: If the car has no owner to route feedback to.
        """
        with self._lock:
            owner = self._require_owner()
            result = self._apply_charge(energy_wh)
        self._feedback.show(self._name, owner, result)
        return result

    def cancel_charging(self) -> bool:
        """Stop the running charge cycle, keeping the energy delivered so far.

        Returns:
            True if a cycle was cancelled, False if the car was idle.
        """
        with self._lock:
            cycle = self._cycle
            on_complete = self._on_complete
            if cycle is None or not self._finish(cycle, CycleState.CANCELLED):
                return False
        self._notify_complete(on_complete, CycleState.CANCELLED)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_owner(self) -> Player:
        owner = self.owner
        if owner is None:
            raise MissingOwnerError(self._name)
        return owner

    def _apply_charge(self, energy_wh: int) -> ChargeResult:
        self._charged_capacity_wh += energy_wh
        return ChargeResult(
            charged_capacity_wh=self._charged_capacity_wh,
            leds_to_light=leds_to_light(
                self._charged_capacity_wh, self._battery_capacity_wh, self.config.led_count
            ),
        )

    def _tick(
        self,
        cycle: ChargeCycle,
        on_every_charge: ProgressCallback | None,
        on_complete: CompletionCallback | None,
    ) -> bool:
        """Run one tick of *cycle*; return whether the driver should continue.

        An unexpected error ends the cycle as ``ABORTED`` before it reaches
        the driver, so the car is never left blocked without a running tick.
        """
        try:
            return self._run_tick(cycle, on_every_charge, on_complete)
        except Exception:
            _LOGGER.exception(f"{self._name}: charge tick failed; aborting cycle")
            with self._lock:
                aborted = self._finish(cycle, CycleState.ABORTED)
            if aborted:
                self._notify_complete(on_complete, CycleState.ABORTED)
            return False

    def _run_tick(
        self,
        cycle: ChargeCycle,
        on_every_charge: ProgressCallback | None,
        on_complete: CompletionCallback | None,
    ) -> bool:
        result: ChargeResult | None = None
        owner: Player | None = None
        with self._lock:
            if self._cycle is not cycle or not cycle.is_active:
                return False

            outcome = cycle.budget_outcome()
            if outcome is None and not cycle.fits(self._charged_capacity_wh, self._battery_capacity_wh):
                outcome = CycleState.OVERFLOWED
            if outcome is None:
                try:
                    owner = self._require_owner()
                except MissingOwnerError as err:
                    _LOGGER.error(f"{err} Aborting charge cycle.")
                    outcome = CycleState.ABORTED
                else:
                    result = self._apply_charge(cycle.charge_increment_wh)
                    cycle.record_increment()
                    _LOGGER.debug(
                        f"Charging {self._name}: added {cycle.charge_increment_wh}Wh, "
                        f"total charged: {self._charged_capacity_wh}Wh"
                    )
                    outcome = cycle.budget_outcome()
            if outcome is not None:
                self._finish(cycle, outcome)

        if result is not None and owner is not None:
            try:
                self._feedback.show(self._name, owner, result)
            except Exception:
                _LOGGER.exception(f"{self._name}: charge feedback failed")
            if on_every_charge is not None:
                try:
                    on_every_charge()
                except Exception:
                    _LOGGER.exception(f"{self._name}: progress callback failed")
        if outcome is not None:
            self._notify_complete(on_complete, outcome)
        return outcome is None

    def _finish(self, cycle: ChargeCycle, state: CycleState) -> bool:
        # Caller holds self._lock.
        if not cycle.finish(state):
            return False
        if self._cycle is cycle:
            self._cycle = None
            self._on_complete = None
            if self._tick_handle is not None:
                self._tick_handle.cancel()
                self._tick_handle = None
        _LOGGER.info(
            f"Charging for {self._name} ended ({state.value}): "
            f"{cycle.energy_delivered}Wh delivered in {cycle.seconds_passed}s"
        )
        return True

    def _notify_complete(self, on_complete: CompletionCallback | None, state: CycleState) -> None:
        if on_complete is None:
            return
        try:
            on_complete(state)
        except Exception:
            _LOGGER.exception(f"{self._name}: completion callback failed")

    def __repr__(self) -> str:
        return (
            f"Car(chip_id={self._chip_id!r}, name={self._name!r}, "
            f"battery_capacity_wh={self._battery_capacity_wh}, "
            f"charged_capacity_wh={self.charged_capacity_wh}, "
            f"energy_efficiency_km_wh={self._energy_efficiency_km_wh:.4f})"
        )
