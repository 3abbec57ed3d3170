"""Player model for the Renewable Charge game.

A player owns at most one car at a time and carries the hardware the car
needs to report charge progress: a charge strip and a button colour.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from renewable_charge.core.feedback import LedStrip

if TYPE_CHECKING:
    from renewable_charge.core.car import Car

RGB = tuple[int, int, int]


class Player:
    """A participant that can own a car.

    Attributes:
        name: Display name of the player.
        color: RGB triple (0-255 each) used for the player's LEDs.
        charge_strip: LED strip showing the owned car's charge, if wired.
    """

    __slots__ = ("name", "color", "charge_strip", "_car", "__weakref__")

    def __init__(
        self,
        name: str,
        color: RGB = (255, 255, 255),
        charge_strip: LedStrip | None = None,
    ) -> None:
        if not name:
            raise ValueError("Player name must not be empty.")
        if len(color) != 3 or any(not 0 <= c <= 255 for c in color):
            raise ValueError(f"Player '{name}' color must be three values in [0, 255].")
        self.name: str = name
        self.color: RGB = (int(color[0]), int(color[1]), int(color[2]))
        self.charge_strip: LedStrip | None = charge_strip
        self._car: Car | None = None

    @property
    def selected_car(self) -> Car | None:
        return self._car

    def select_car(self, car: Car) -> None:
        """Take ownership of *car*, releasing any previously owned car."""
        if self._car is car:
            return
        self.release_car()
        car.owner = self
        self._car = car

    def release_car(self) -> Car | None:
        """Give up the owned car, cancelling any charge in progress."""
        car = self._car
        if car is None:
            return None
        car.cancel_charging()
        if car.owner is self:
            car.owner = None
        self._car = None
        return car

    def __repr__(self) -> str:
        car_name = self._car.name if self._car is not None else None
        return f"Player(name={self.name!r}, car={car_name!r})"
