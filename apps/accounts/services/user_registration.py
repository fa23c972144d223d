"""Tourist registration service."""

import logging
from datetime import date

from django.db import IntegrityError, transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import (
    DuplicateWalletError,
    InvalidCredentialsError,
    InvalidTripDatesError,
)

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_tourist(
    *,
    wallet_address: str,
    origin_country: str,
    arrival_date: date,
    departure_date: date,
    display_name: str = ""
) -> User:
    """
    Register a tourist for the duration of a trip.

    Args:
        wallet_address: Wallet the tourist gives coins from (unique)
        origin_country: Country the tourist travels from
        arrival_date: First day of the trip
        departure_date: Last day of the trip, strictly after arrival
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        InvalidTripDatesError: If arrival is not before departure
        DuplicateWalletError: If the wallet is already registered
    """
    if arrival_date >= departure_date:
        raise InvalidTripDatesError("Arrival date must be before departure date")

    wallet_address = wallet_address.strip()
    if User.objects.filter(wallet_address=wallet_address).exists():
        raise DuplicateWalletError(f"Wallet {wallet_address} is already registered")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                wallet_address=wallet_address,
                origin_country=origin_country.strip(),
                arrival_date=arrival_date,
                departure_date=departure_date,
                display_name=display_name,
            )
    except IntegrityError:
        # Lost a race against a concurrent registration of the same wallet
        raise DuplicateWalletError(f"Wallet {wallet_address} is already registered")

    logger.info("Registered tourist %s from %s", user.id, user.origin_country)
    return user


def authenticate_tourist(*, wallet_address: str) -> User:
    """
    Resolve a wallet login to its tourist account.

    Tourists hold no password; the wallet address identifies them. Staff
    accounts must authenticate with their password instead.

    Raises:
        InvalidCredentialsError: If no active, non-staff account owns the wallet
    """
    try:
        user = User.objects.get(wallet_address=wallet_address.strip())
    except User.DoesNotExist:
        raise InvalidCredentialsError("Unknown wallet address")

    if not user.is_active or user.is_staff:
        raise InvalidCredentialsError("Wallet login is not available for this account")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    return user
