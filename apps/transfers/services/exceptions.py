"""Domain exceptions for transfers app."""


class TransfersServiceError(Exception):
    """Base exception for all transfers service errors."""
    pass


class InvalidAmountError(TransfersServiceError):
    """Amount is not an integer within the allowed per-transfer range."""
    pass


class UserNotFoundError(TransfersServiceError):
    """Tourist does not exist or is inactive."""
    pass


class RestaurantNotFoundError(TransfersServiceError):
    """Restaurant does not exist."""
    pass


class QuotaExceededError(TransfersServiceError):
    """
    Transfer would exceed the daily cap or the per-restaurant daily cap.

    Carries the QuotaCheck with the remaining-quota figures so callers can
    tell the tourist how much they can still give.
    """

    def __init__(self, message, *, check=None):
        super().__init__(message)
        self.check = check


class TransferConflictError(TransfersServiceError):
    """Concurrent writes kept the transfer from committing; safe to retry."""
    pass


class InvalidPaginationError(TransfersServiceError):
    """Page or limit outside the allowed range."""
    pass
