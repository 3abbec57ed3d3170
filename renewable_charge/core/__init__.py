"""Core charging modules for the Renewable Charge engine."""

from renewable_charge.core.car import Car, CarStatus
from renewable_charge.core.cycle import ChargeCycle, CycleState
from renewable_charge.core.energy_package import EnergyPackage
from renewable_charge.core.errors import ChargingError, FeedbackError, MissingOwnerError
from renewable_charge.core.feedback import (
    ChargeFeedback,
    ChargeResult,
    LedFeedback,
    LedStrip,
    leds_to_light,
)
from renewable_charge.core.garage import Garage
from renewable_charge.core.player import Player
from renewable_charge.core.scheduler import (
    ManualTickScheduler,
    ThreadedTickScheduler,
    TickHandle,
    TickScheduler,
)
from renewable_charge.core.settings import LED_COUNT, ChargingConfig

__all__ = [
    "Car",
    "CarStatus",
    "ChargeCycle",
    "ChargeFeedback",
    "ChargeResult",
    "ChargingConfig",
    "ChargingError",
    "CycleState",
    "EnergyPackage",
    "FeedbackError",
    "Garage",
    "LED_COUNT",
    "LedFeedback",
    "LedStrip",
    "ManualTickScheduler",
    "MissingOwnerError",
    "Player",
    "ThreadedTickScheduler",
    "TickHandle",
    "TickScheduler",
    "leds_to_light",
]
