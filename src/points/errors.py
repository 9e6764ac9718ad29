"""Errors raised by the points core."""


class PointsError(Exception):
    """Base class for recoverable points errors."""


class InvalidArgumentError(PointsError, ValueError):
    """Raised when a spend amount is not a positive integer."""


class InsufficientFundsError(PointsError):
    """Raised when a spend asks for more points than all payers hold together."""

    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient points. Available: {available}, Requested: {requested}"
        )
