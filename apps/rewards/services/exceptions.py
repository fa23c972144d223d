"""
Domain exceptions for rewards app.

Exception Hierarchy:
    RewardsServiceError (base)
    ├── UserNotFoundError
    ├── NotEligibleError
    ├── VoucherNotFoundError
    ├── InvalidVoucherPayloadError
    └── VoucherStorageError
"""


class RewardsServiceError(Exception):
    """Base exception for all rewards service errors."""
    pass


class UserNotFoundError(RewardsServiceError):
    """Tourist does not exist."""
    pass


class NotEligibleError(RewardsServiceError):
    """
    Tourist has not completed every day of the trip yet.

    Example:
        raise NotEligibleError("Complete every day of your trip to earn a voucher")
    """
    pass


class VoucherNotFoundError(RewardsServiceError):
    """No valid voucher is stored for the tourist."""
    pass


class InvalidVoucherPayloadError(RewardsServiceError):
    """QR payload has a bad signature or points at an expired/unknown voucher."""
    pass


class VoucherStorageError(RewardsServiceError):
    """
    The key/value store holding vouchers could not be reached.

    Vouchers live only in the cache backend, so unlike derived views
    this failure is surfaced to the caller.
    """
    pass
