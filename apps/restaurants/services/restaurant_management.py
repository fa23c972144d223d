"""Restaurant onboarding and lookup service."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet

from ..models import Restaurant
from .exceptions import (
    DuplicateRestaurantError,
    InvalidCoordinatesError,
    RestaurantNotFoundError,
)

logger = logging.getLogger(__name__)


def _validate_coordinates(latitude, longitude) -> tuple[Decimal, Decimal]:
    try:
        lat = Decimal(str(latitude))
        lng = Decimal(str(longitude))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidCoordinatesError("Latitude and longitude must be numeric")

    if not Decimal('-90') <= lat <= Decimal('90'):
        raise InvalidCoordinatesError(f"Latitude {lat} out of range [-90, 90]")
    if not Decimal('-180') <= lng <= Decimal('180'):
        raise InvalidCoordinatesError(f"Longitude {lng} out of range [-180, 180]")

    return lat.quantize(Decimal('0.000001')), lng.quantize(Decimal('0.000001'))


@transaction.atomic
def register_restaurant(
    *,
    place_ref: str,
    name: str,
    latitude,
    longitude,
    wallet_address: str,
    address: str = ""
) -> Restaurant:
    """
    Register a restaurant so it can receive coins.

    Args:
        place_ref: External place reference (unique)
        name: Restaurant name
        latitude: Decimal degrees in [-90, 90]
        longitude: Decimal degrees in [-180, 180]
        wallet_address: Receiving wallet (unique)
        address: Optional street address

    Returns:
        Created Restaurant instance

    Raises:
        InvalidCoordinatesError: If coordinates are out of range
        DuplicateRestaurantError: If place_ref or wallet is taken
    """
    lat, lng = _validate_coordinates(latitude, longitude)

    place_ref = place_ref.strip()
    wallet_address = wallet_address.strip()

    existing = Restaurant.objects.filter(
        Q(place_ref=place_ref) | Q(wallet_address=wallet_address)
    ).first()
    if existing:
        raise DuplicateRestaurantError(
            f"Restaurant already registered: {existing.name} ({existing.place_ref})"
        )

    try:
        with transaction.atomic():
            restaurant = Restaurant.objects.create(
                place_ref=place_ref,
                name=name.strip(),
                address=address,
                latitude=lat,
                longitude=lng,
                wallet_address=wallet_address,
            )
    except IntegrityError:
        raise DuplicateRestaurantError(f"Restaurant {place_ref} already registered")

    logger.info("Registered restaurant %s (%s)", restaurant.id, restaurant.place_ref)
    return restaurant


def get_restaurant(*, restaurant_id: UUID) -> Restaurant:
    """
    Get restaurant by ID.

    Raises:
        RestaurantNotFoundError: If restaurant doesn't exist
    """
    try:
        return Restaurant.objects.get(id=restaurant_id)
    except (Restaurant.DoesNotExist, ValidationError):
        raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")


def search_restaurants(*, search: Optional[str] = None) -> QuerySet[Restaurant]:
    """Filter restaurants by name or address."""
    queryset = Restaurant.objects.all()

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(address__icontains=search)
        )

    return queryset.order_by('name', 'id')
