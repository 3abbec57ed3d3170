#!/usr/bin/env python
"""Tabulate simulated charge cycles for tuning the block-time factor.

For every car in the game configuration and every requested package size,
a full charge cycle is run on the virtual clock.  The per-tick charge levels
are collected into a :class:`pandas.DataFrame` and written to
``results/charge_profile.csv``.

Usage
-----
::

    python scripts/charge_profile.py [PACKAGE_WH ...]

Requirements
------------
- ``pandas>=2.0.0`` and ``pyyaml>=6.0`` must be installed.
"""

from __future__ import annotations

import os
import sys

import pandas as pd

# Ensure the project root is on the import path when running as a script.
_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from renewable_charge.config import load_cars, load_config  # noqa: E402
from renewable_charge.core.car import Car  # noqa: E402
from renewable_charge.core.cycle import CycleState  # noqa: E402
from renewable_charge.core.energy_package import EnergyPackage  # noqa: E402
from renewable_charge.core.player import Player  # noqa: E402
from renewable_charge.core.scheduler import ManualTickScheduler  # noqa: E402

RESULTS_DIR: str = os.path.join(_project_root, "results")
OUTPUT_PATH: str = os.path.join(RESULTS_DIR, "charge_profile.csv")

DEFAULT_PACKAGES: tuple[int, ...] = (1000, 3000, 6000, 12000)


def profile_cycle(car: Car, package: EnergyPackage, scheduler: ManualTickScheduler) -> pd.DataFrame:
    """Run one cycle to completion and return its per-tick trace.

    The car must already have an owner.

    Returns:
        DataFrame with columns ``car``, ``package_wh``, ``tick``,
        ``charged_wh``, ``range_km``, ``leds`` and ``outcome``.
    """
    rows: list[dict] = []
    outcome: list[CycleState] = []
    start = scheduler.now

    def record() -> None:
        status = car.snapshot()
        rows.append(
            {
                "car": car.name,
                "package_wh": package.size,
                "tick": int(scheduler.now - start),
                "charged_wh": status.charged_capacity_wh,
                "range_km": status.range_in_km,
                "leds": status.leds_to_light,
            }
        )

    if not car.claim_package(package, record, outcome.append):
        raise RuntimeError(f"{car.name} is already charging.")
    scheduler.run_until_idle()

    frame = pd.DataFrame(rows, columns=["car", "package_wh", "tick", "charged_wh", "range_km", "leds"])
    frame["outcome"] = outcome[0].value if outcome else None
    return frame


def main() -> None:
    packages = [int(arg) for arg in sys.argv[1:]] or list(DEFAULT_PACKAGES)
    config = load_config()
    print(f"Block time factor: {config.time_blocked_per_charged_kwh}s per kWh")

    frames: list[pd.DataFrame] = []
    for size in packages:
        # Fresh cars per package so every profile starts from an empty battery.
        scheduler = ManualTickScheduler()
        owner = Player("profiler")
        for car in load_cars(config=config, scheduler=scheduler):
            owner.select_car(car)
            frames.append(profile_cycle(car, EnergyPackage(size=size), scheduler))

    profile = pd.concat(frames, ignore_index=True)
    summary = profile.groupby(["car", "package_wh"]).agg(
        ticks=("tick", "count"),
        charged_wh=("charged_wh", "max"),
        range_km=("range_km", "max"),
    )
    print(summary.to_string())

    os.makedirs(RESULTS_DIR, exist_ok=True)
    profile.to_csv(OUTPUT_PATH, index=False)
    print(f"\nProfile written to {OUTPUT_PATH}")


if __name__ == "__main__":
    main()
