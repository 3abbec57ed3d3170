"""Configuration loader for the Renewable Charge engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from renewable_charge.core.car import Car
from renewable_charge.core.player import Player
from renewable_charge.core.scheduler import TickScheduler
from renewable_charge.core.settings import ChargingConfig

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
GAME_CONFIG_PATH: Path = DATA_DIR / "game_config.yaml"

_CHARGING_FIELDS: tuple[str, ...] = (
    "time_blocked_per_charged_kwh",
    "led_count",
    "tick_interval_seconds",
)

_CAR_FIELDS: tuple[str, ...] = (
    "chip_id",
    "name",
    "battery_capacity_wh",
    "max_range_km",
)

_INT_CAR_FIELDS: tuple[str, ...] = _CAR_FIELDS[2:]  # capacity and range


def _read_yaml(path: Path | None) -> dict[str, Any]:
    config_path = path or GAME_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Game configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if not isinstance(data, dict):
        raise ValueError(f"Game configuration {config_path} must be a mapping.")
    return data


def load_config(path: Path | None = None) -> ChargingConfig:
    """Load the charging parameters from the game configuration file.

    Keys missing from the ``charging`` section fall back to the
    :class:`ChargingConfig` defaults.

    Args:
        path: Optional override for the configuration file path.

    Returns:
        A validated :class:`ChargingConfig`.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If a value is non-numeric, out of range or unknown.
    """
    section = _read_yaml(path).get("charging") or {}
    if not isinstance(section, dict):
        raise ValueError("'charging' section must be a mapping.")

    unknown = set(section) - set(_CHARGING_FIELDS)
    if unknown:
        raise ValueError(f"Unknown charging setting(s): {', '.join(sorted(unknown))}")

    values: dict[str, Any] = {}
    for field in _CHARGING_FIELDS:
        if field not in section:
            continue
        val = section[field]
        if isinstance(val, bool) or not isinstance(val, (int, float)):
            raise ValueError(f"Charging setting '{field}' must be numeric, got {type(val).__name__}")
        values[field] = int(val) if field == "led_count" else float(val)

    return ChargingConfig(**values)


def load_cars(
    path: Path | None = None,
    config: ChargingConfig | None = None,
    scheduler: TickScheduler | None = None,
) -> list[Car]:
    """Load the car catalogue from the game configuration file.

    Each entry is validated and converted into a :class:`Car` sharing
    *config* and *scheduler*.

    Args:
        path: Optional override for the configuration file path.
        config: Charging parameters; loaded from the same file if omitted.
        scheduler: Tick source handed to every car.

    Returns:
        List of :class:`Car` objects in file order.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If any car entry is missing fields or has invalid values.
    """
    data = _read_yaml(path)
    charging = config or load_config(path)
    entries: list[dict] = data.get("cars") or []
    if not isinstance(entries, list):
        raise ValueError("'cars' section must be a list of car entries.")
    cars: list[Car] = []

    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Car entry {idx} must be a mapping, got {type(entry).__name__}")

        # --- Validate required fields ---
        for field in _CAR_FIELDS:
            if field not in entry:
                raise ValueError(
                    f"Car entry {idx} ({entry.get('name', '<unknown>')}) "
                    f"is missing required field '{field}'"
                )

        # --- Validate integer fields ---
        for field in _INT_CAR_FIELDS:
            val = entry[field]
            if isinstance(val, bool) or not isinstance(val, int):
                raise ValueError(
                    f"Car entry {idx} ({entry['name']}): "
                    f"'{field}' must be an integer, got {type(val).__name__}"
                )
        if entry["battery_capacity_wh"] <= 0:
            raise ValueError(
                f"Car entry {idx} ({entry['name']}): "
                f"'battery_capacity_wh' must be > 0, got {entry['battery_capacity_wh']}"
            )

        cars.append(
            Car(
                chip_id=str(entry["chip_id"]),
                name=str(entry["name"]),
                battery_capacity_wh=entry["battery_capacity_wh"],
                max_range_km=entry["max_range_km"],
                config=charging,
                scheduler=scheduler,
            )
        )

    return cars


def load_players(path: Path | None = None) -> list[Player]:
    """Load player names and LED colours from the game configuration file.

    Charge strips are hardware and are attached by the caller.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If a player entry has no name or an invalid colour.
    """
    entries: list[dict] = _read_yaml(path).get("players") or []
    if not isinstance(entries, list):
        raise ValueError("'players' section must be a list of player entries.")
    players: list[Player] = []

    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Player entry {idx} must be a mapping, got {type(entry).__name__}")
        if "name" not in entry:
            raise ValueError(f"Player entry {idx} is missing required field 'name'")
        color = entry.get("color", [255, 255, 255])
        if not isinstance(color, (list, tuple)) or len(color) != 3:
            raise ValueError(f"Player entry {idx} ({entry['name']}): 'color' must be [r, g, b]")
        players.append(Player(name=str(entry["name"]), color=tuple(color)))

    return players
