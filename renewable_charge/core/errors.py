"""Runtime error types raised by the charging engine."""


class ChargingError(RuntimeError):
    """Base class for invalid charging states."""


class MissingOwnerError(ChargingError):
    """Raised when a car without an owner is asked to charge.

    The owner is required to route LED feedback, so the charge attempt is
    rejected before any state is touched.
    """

    def __init__(self, car_name: str) -> None:
        super().__init__(f"Car '{car_name}' has no owner; cannot route charge feedback.")
        self.car_name: str = car_name


class FeedbackError(ChargingError):
    """Recoverable failure of an LED strip or other feedback hardware."""
