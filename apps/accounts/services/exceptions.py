"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when tourist registration fails."""
    pass


class InvalidTripDatesError(UserRegistrationError):
    """Raised when arrival is not strictly before departure."""
    pass


class DuplicateWalletError(UserRegistrationError):
    """Raised when the wallet address is already registered."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when a wallet login does not resolve to an active tourist."""
    pass
