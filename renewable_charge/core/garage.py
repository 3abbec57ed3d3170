"""Chip-to-car resolution and car assignment for the Renewable Charge game."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from renewable_charge.core.car import Car
from renewable_charge.core.player import Player

_LOGGER = logging.getLogger(__name__)


class Garage:
    """The set of cars in play, indexed by every registered chip id.

    Attributes:
        cars: Cars in registration order.
    """

    __slots__ = ("cars", "_by_chip")

    def __init__(self, cars: Iterable[Car]) -> None:
        self.cars: list[Car] = list(cars)
        self._by_chip: dict[str, Car] = {}
        for car in self.cars:
            for chip_id in car.chip_ids:
                other = self._by_chip.get(chip_id)
                if other is not None and other is not car:
                    raise ValueError(
                        f"Chip '{chip_id}' is registered to both '{other.name}' and '{car.name}'."
                    )
                self._by_chip[chip_id] = car

    def find_by_chip(self, chip_id: str) -> Car | None:
        return self._by_chip.get(chip_id)

    def assign(self, player: Player, chip_id: str) -> Car | None:
        """Give the car behind *chip_id* to *player*.

        Returns:
            The assigned car, or None if the chip is unknown or the car
            already belongs to another player.
        """
        car = self.find_by_chip(chip_id)
        if car is None:
            _LOGGER.info(f"Unknown chip scanned for '{player.name}': {chip_id}")
            return None
        owner = car.owner
        if owner is not None and owner is not player:
            _LOGGER.info(f"'{player.name}' tried to take '{car.name}' owned by '{owner.name}'")
            return None
        player.select_car(car)
        _LOGGER.info(f"'{player.name}' selected '{car.name}'")
        return car

    def release(self, player: Player) -> Car | None:
        """Take the player's car out of play, cancelling any charge."""
        car = player.release_car()
        if car is not None:
            _LOGGER.info(f"'{player.name}' released '{car.name}'")
        return car

    def __len__(self) -> int:
        return len(self.cars)

    def __repr__(self) -> str:
        return f"Garage(cars=[{', '.join(c.name for c in self.cars)}])"
