"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidTripDatesError,
    DuplicateWalletError,
    InvalidCredentialsError,
)
from .user_registration import register_tourist, authenticate_tourist

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidTripDatesError',
    'DuplicateWalletError',
    'InvalidCredentialsError',
    # Services
    'register_tourist',
    'authenticate_tourist',
]
