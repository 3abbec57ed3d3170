"""LED feedback boundary for the Renewable Charge engine.

The charging state machine never talks to hardware directly.  After every
charge transition the car hands a :class:`ChargeResult` to a
:class:`ChargeFeedback` adapter; the default :class:`LedFeedback` lights the
owner's charge strip in the owner's colour.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from renewable_charge.core.errors import FeedbackError
from renewable_charge.core.settings import LED_COUNT

if TYPE_CHECKING:
    from renewable_charge.core.player import Player

_LOGGER = logging.getLogger(__name__)


class LedStrip(Protocol):
    """Physical LED strip driver."""

    def send_many(self, count: int, red: int, green: int, blue: int) -> None:
        """Light the first *count* LEDs in the given colour.

        May raise :class:`FeedbackError` or :class:`OSError` on I/O failure.
        """
        ...


@dataclass(frozen=True)
class ChargeResult:
    """Outcome of a single charge transition.

    Attributes:
        charged_capacity_wh: Battery level after the transition.
        leds_to_light: LEDs that represent the new level.
    """

    charged_capacity_wh: int
    leds_to_light: int


class ChargeFeedback(Protocol):
    """Receiver of charge transitions (hardware, UI, ...).

    Implementations report failure through the return value and must not
    raise into the charge cycle.
    """

    def show(self, car_name: str, owner: Player, result: ChargeResult) -> bool: ...


def leds_to_light(charged_capacity_wh: int, battery_capacity_wh: int, led_count: int = LED_COUNT) -> int:
    """Number of LEDs representing the charge level, rounded up.

    Args:
        charged_capacity_wh: Current battery level in Wh.
        battery_capacity_wh: Battery capacity in Wh (> 0).
        led_count: LEDs available on the strip.

    Raises:
        ValueError: If battery_capacity_wh is not positive.
    """
    if battery_capacity_wh <= 0:
        raise ValueError("battery_capacity_wh must be > 0.")
    return math.ceil((charged_capacity_wh / battery_capacity_wh) * led_count)


class LedFeedback:
    """Routes charge progress to the owner's LED strip.

    Hardware failures are logged and reported through the return value;
    they never propagate into the charge cycle.
    """

    def show(self, car_name: str, owner: Player, result: ChargeResult) -> bool:
        strip = owner.charge_strip
        if strip is None:
            _LOGGER.debug(f"{car_name}: owner '{owner.name}' has no charge strip, skipping LEDs.")
            return False
        red, green, blue = owner.color
        try:
            strip.send_many(result.leds_to_light, red, green, blue)
        except (FeedbackError, OSError) as err:
            _LOGGER.warning(
                f"{car_name}: LED update to {result.leds_to_light} failed for "
                f"'{owner.name}': {err}"
            )
            return False
        _LOGGER.debug(f"{car_name}: lit {result.leds_to_light} LEDs for '{owner.name}'")
        return True
