"""
Exceptions raised by the forecast engine
"""


class ForecastError(Exception):
    """Base class for all forecast engine errors"""


class InsufficientDataError(ForecastError, ValueError):
    """
    Raised when a history is too short to forecast

    Attributes:
        observations: Number of observations received
        required: Minimum number of observations needed
    """

    def __init__(self, observations: int, required: int):
        self.observations = observations
        self.required = required
        super().__init__(
            f"At least {required} observations are required, got {observations}"
        )


class InvalidObservationError(ForecastError, ValueError):
    """Raised when a history record cannot be turned into an observation"""


class InvalidForecastRequestError(ForecastError, ValueError):
    """Raised for an out-of-range forecast horizon"""
