"""Domain-specific exceptions for restaurants services."""


class RestaurantsServiceError(Exception):
    """Base exception for restaurants services."""
    pass


class RestaurantNotFoundError(RestaurantsServiceError):
    """Raised when restaurant does not exist."""
    pass


class DuplicateRestaurantError(RestaurantsServiceError):
    """Raised when the place reference or wallet is already registered."""
    pass


class InvalidCoordinatesError(RestaurantsServiceError):
    """Raised when latitude/longitude fall outside valid ranges."""
    pass
