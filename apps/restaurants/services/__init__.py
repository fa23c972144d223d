"""
Restaurants services - Business logic layer.

Restaurant onboarding and lookups. The coin counter on Restaurant is
owned by apps.transfers and is never written here.
"""

from .restaurant_management import (
    register_restaurant,
    get_restaurant,
    search_restaurants,
)

from .exceptions import (
    RestaurantsServiceError,
    RestaurantNotFoundError,
    DuplicateRestaurantError,
    InvalidCoordinatesError,
)

__all__ = [
    # Restaurant Management Services
    'register_restaurant',
    'get_restaurant',
    'search_restaurants',
    # Exceptions
    'RestaurantsServiceError',
    'RestaurantNotFoundError',
    'DuplicateRestaurantError',
    'InvalidCoordinatesError',
]
