"""
Rewards services - Business logic layer.

- Trip progress and voucher eligibility
- Physical-coin voucher issuance, lookup, verification and QR rendering
"""

from .eligibility import (
    get_progress_summary,
    get_daily_progress,
)

from .vouchers import (
    issue_voucher,
    get_voucher,
    verify_voucher_payload,
    render_voucher_qr,
)

from .exceptions import (
    RewardsServiceError,
    UserNotFoundError,
    NotEligibleError,
    VoucherNotFoundError,
    InvalidVoucherPayloadError,
    VoucherStorageError,
)

__all__ = [
    # Eligibility
    'get_progress_summary',
    'get_daily_progress',
    # Vouchers
    'issue_voucher',
    'get_voucher',
    'verify_voucher_payload',
    'render_voucher_qr',
    # Exceptions
    'RewardsServiceError',
    'UserNotFoundError',
    'NotEligibleError',
    'VoucherNotFoundError',
    'InvalidVoucherPayloadError',
    'VoucherStorageError',
]
