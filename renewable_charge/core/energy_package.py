"""Energy package model for the Renewable Charge game."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EnergyPackage:
    """A discrete quantity of energy a player can allocate to a car.

    Attributes:
        size: Total energy offered by the package in watt-hours (>= 0).
            A zero-sized package is legal and completes instantly.
    """

    size: int

    def __post_init__(self) -> None:
        """Validate package size."""
        if isinstance(self.size, bool) or not isinstance(self.size, int):
            raise ValueError("size must be an integer number of watt-hours.")
        if self.size < 0:
            raise ValueError("size must be >= 0.")

    @property
    def size_kwh(self) -> float:
        """Package size in kilowatt-hours."""
        return self.size / 1000.0
