"""CLI entrypoint for the Renewable Charge engine."""

from __future__ import annotations

import logging
import sys

from renewable_charge import __version__
from renewable_charge.config import load_cars, load_config, load_players
from renewable_charge.core.cycle import CycleState
from renewable_charge.core.energy_package import EnergyPackage
from renewable_charge.core.garage import Garage
from renewable_charge.core.scheduler import ManualTickScheduler


class ConsoleStrip:
    """Prints LED frames instead of driving hardware."""

    def __init__(self, led_count: int) -> None:
        self.led_count = led_count
        self.frame = ""

    def send_many(self, count: int, red: int, green: int, blue: int) -> None:
        lit = max(0, min(count, self.led_count))
        self.frame = "#" * lit + "." * (self.led_count - lit)


def main() -> None:
    """Run a charge cycle on the virtual clock and print telemetry."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print(f"Renewable Charge Engine v{__version__}")
    print("=" * 56)

    # -- Load configuration ---------------------------------------------------
    config = load_config()
    scheduler = ManualTickScheduler()
    garage = Garage(load_cars(config=config, scheduler=scheduler))
    players = load_players()
    print(f"\n{len(garage)} cars, {len(players)} players loaded")
    print(f"Block time: {config.time_blocked_per_charged_kwh:.1f}s per kWh")

    # -- Assign a car ---------------------------------------------------------
    player = players[0]
    strip = ConsoleStrip(config.led_count)
    player.charge_strip = strip
    car = garage.assign(player, garage.cars[0].chip_ids[0])
    if car is None:
        print("No car could be assigned.")
        return

    print(f"\nPlayer: {player.name}")
    print(f"Car   : {car.name} ({car.battery_capacity_wh} Wh)")
    print("-" * 56)

    # -- Charge ---------------------------------------------------------------
    package = EnergyPackage(size=6000)
    outcome: list[CycleState] = []
    print(f"\nClaiming {package.size} Wh package:\n")
    print(f"  {'Tick':>4}  {'Charged (Wh)':>12}  {'Range (km)':>10}  LEDs")
    print(f"  {'----':>4}  {'------------':>12}  {'----------':>10}  ------")

    def on_every_charge() -> None:
        status = car.snapshot()
        print(
            f"  {int(scheduler.now):4d}  {status.charged_capacity_wh:12d}  "
            f"{status.range_in_km:10d}  {strip.frame}"
        )

    car.claim_package(package, on_every_charge, outcome.append)
    if car.claim_package(package):
        print("Second claim unexpectedly accepted.")
    scheduler.run_until_idle()

    state = outcome[0].value if outcome else "unknown"
    print(f"\nCycle ended: {state}; blocked={car.is_blocked}")


if __name__ == "__main__":
    sys.exit(main() or 0)
