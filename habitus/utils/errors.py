"""Error handling utilities."""

from typing import Optional


class HabitusError(Exception):
    """Base exception for the Habitus insight core."""
    pass


class ConfigurationError(HabitusError):
    """Invalid or missing configuration value."""
    pass


class ModelGatewayError(HabitusError):
    """Language model call failed."""
    pass


class NetworkFailure(ModelGatewayError):
    """Transport failure (unreachable host, timeout) while calling the model."""

    def __init__(self, cause: Exception):
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class InvalidResponse(ModelGatewayError):
    """Non-success status or undecodable body from the model endpoint."""

    def __init__(self, message: str = "Invalid response from server", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidCredential(ModelGatewayError):
    """Model endpoint rejected the API credential."""

    def __init__(self, status_code: int = 401):
        super().__init__("Invalid API key")
        self.status_code = status_code


class RateLimited(ModelGatewayError):
    """Model endpoint throttled the request."""

    def __init__(self, retry_after: Optional[float] = None):
        super().__init__("Too many requests. Please try again later.")
        self.retry_after = retry_after


# Selector tuple for grouped exception handling
GATEWAY_ERRORS = (
    NetworkFailure,
    InvalidResponse,
    InvalidCredential,
    RateLimited,
)
