"""
Transfers services - Business logic layer.

This package contains all business operations for the coin ledger:
- Quota checks (daily cap, per-restaurant cap)
- Transfer recording with concurrency protection
- Ledger history and daily distribution reads
"""

# Quota Guard
from .quota_guard import (
    QuotaCheck,
    validate_transfer,
    local_day,
)

# Transaction Recorder
from .transfer_recording import (
    RecordedTransfer,
    record_transfer,
)

# Ledger reads
from .transfer_history import (
    get_user_transfer_history,
    get_restaurant_transfer_history,
    get_daily_distribution,
    pagination_meta,
)

# Domain Exceptions
from .exceptions import (
    TransfersServiceError,
    InvalidAmountError,
    UserNotFoundError,
    RestaurantNotFoundError,
    QuotaExceededError,
    TransferConflictError,
    InvalidPaginationError,
)

__all__ = [
    # Quota Guard
    'QuotaCheck',
    'validate_transfer',
    'local_day',
    # Transaction Recorder
    'RecordedTransfer',
    'record_transfer',
    # Ledger reads
    'get_user_transfer_history',
    'get_restaurant_transfer_history',
    'get_daily_distribution',
    'pagination_meta',
    # Exceptions
    'TransfersServiceError',
    'InvalidAmountError',
    'UserNotFoundError',
    'RestaurantNotFoundError',
    'QuotaExceededError',
    'TransferConflictError',
    'InvalidPaginationError',
]
