"""Tests for loading the game configuration file."""

from __future__ import annotations

from pathlib import Path

import pytest

from renewable_charge.config import load_cars, load_config, load_players
from renewable_charge.core.car import Car
from renewable_charge.core.scheduler import ManualTickScheduler
from renewable_charge.core.settings import ChargingConfig

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "game_config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


_MINIMAL_CARS = """
cars:
  - chip_id: "AA:BB"
    name: test_car
    battery_capacity_wh: 1000
    max_range_km: 100
"""


# ---------------------------------------------------------------------------
# Shipped configuration
# ---------------------------------------------------------------------------


def test_default_config_loads() -> None:
    config = load_config()
    assert isinstance(config, ChargingConfig)
    assert config.time_blocked_per_charged_kwh == 10.0
    assert config.led_count == 6


def test_default_cars_load_with_shared_config() -> None:
    config = load_config()
    cars = load_cars(config=config)
    assert len(cars) == 4
    for car in cars:
        assert isinstance(car, Car)
        assert car.config is config
        assert car.charged_capacity_wh == 0
        assert not car.is_blocked
    chips = [chip for car in cars for chip in car.chip_ids]
    assert len(set(chips)) == len(chips), "chip ids must be unique"


def test_default_players_load() -> None:
    players = load_players()
    assert len(players) == 4
    for player in players:
        assert player.name
        assert all(0 <= c <= 255 for c in player.color)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_missing_charging_section_uses_defaults(tmp_path: Path) -> None:
    path = _write(tmp_path, _MINIMAL_CARS)
    assert load_config(path) == ChargingConfig()


def test_partial_charging_section(tmp_path: Path) -> None:
    path = _write(tmp_path, "charging:\n  time_blocked_per_charged_kwh: 2\n")
    config = load_config(path)
    assert config.time_blocked_per_charged_kwh == 2.0
    assert config.led_count == 6


def test_non_numeric_setting_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "charging:\n  time_blocked_per_charged_kwh: fast\n")
    with pytest.raises(ValueError, match="must be numeric"):
        load_config(path)


def test_unknown_setting_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "charging:\n  blocked_seconds: 10\n")
    with pytest.raises(ValueError, match="Unknown charging setting"):
        load_config(path)


def test_negative_setting_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "charging:\n  time_blocked_per_charged_kwh: -1\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_cars_use_given_scheduler(tmp_path: Path) -> None:
    path = _write(tmp_path, _MINIMAL_CARS)
    cars = load_cars(path, scheduler=ManualTickScheduler())
    assert [car.name for car in cars] == ["test_car"]
    assert cars[0].chip_ids == ["AA", "BB"]
    assert cars[0].energy_efficiency_km_wh == pytest.approx(0.1)


def test_car_missing_field_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "cars:\n  - chip_id: AA\n    name: broken\n    battery_capacity_wh: 1000\n")
    with pytest.raises(ValueError, match="missing required field 'max_range_km'"):
        load_cars(path)


def test_car_non_integer_capacity_rejected(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "cars:\n  - chip_id: AA\n    name: broken\n    battery_capacity_wh: 1000.5\n    max_range_km: 10\n",
    )
    with pytest.raises(ValueError, match="must be an integer"):
        load_cars(path)


def test_player_bad_color_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "players:\n  - name: p1\n    color: [1, 2]\n")
    with pytest.raises(ValueError, match="color"):
        load_players(path)


def test_car_entry_not_a_mapping_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "cars:\n  - AA:BB\n")
    with pytest.raises(ValueError, match="Car entry 0 must be a mapping"):
        load_cars(path)


def test_cars_section_not_a_list_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "cars:\n  chip_id: AA\n  name: broken\n")
    with pytest.raises(ValueError, match="'cars' section must be a list"):
        load_cars(path)


def test_player_entry_not_a_mapping_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "players:\n  - name: p1\n  - p2\n")
    with pytest.raises(ValueError, match="Player entry 1 must be a mapping"):
        load_players(path)
