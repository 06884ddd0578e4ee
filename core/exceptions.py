class ConfigurationError(ValueError):
    """Missing token, bad config values or invalid date flags."""


class PointsApiError(RuntimeError):
    """Transport failure or non-200 response from the points history API."""

    def __init__(self, message: str, status: int = None, body: str = None):
        super().__init__(message)
        self.status = status
        self.body = body
