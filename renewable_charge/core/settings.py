"""Typed charging configuration for the Renewable Charge engine."""

from dataclasses import dataclass

LED_COUNT: int = 6


@dataclass(frozen=True)
class ChargingConfig:
    """Process-wide, read-only charging parameters.

    A single instance is shared by every car; nothing mutates it after
    startup.

    Attributes:
        time_blocked_per_charged_kwh: Seconds a car stays blocked for every
            kilowatt-hour in a claimed package (>= 0.0).
        led_count: Number of LEDs on each player's charge strip (>= 1).
        tick_interval_seconds: Wall-clock spacing between charge ticks (> 0.0).
    """

    time_blocked_per_charged_kwh: float = 10.0
    led_count: int = LED_COUNT
    tick_interval_seconds: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.time_blocked_per_charged_kwh < 0.0:
            raise ValueError("time_blocked_per_charged_kwh must be >= 0.0.")
        if self.led_count < 1:
            raise ValueError("led_count must be >= 1.")
        if self.tick_interval_seconds <= 0.0:
            raise ValueError("tick_interval_seconds must be > 0.0.")
