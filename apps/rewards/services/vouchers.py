"""
Physical-coin voucher service.

A tourist who completed every day of the trip can claim one voucher,
redeemable for a physical Smile Coin within VOUCHER_VALIDITY_DAYS.
Vouchers have no table: the cache backend under the ``voucher`` prefix
is their system of record, with a TTL equal to the remaining validity
window. Backend failures therefore raise VoucherStorageError instead of
degrading silently like the derived views do.
"""

import logging
import secrets
from datetime import date, datetime, timedelta
from io import BytesIO
from typing import Optional, Union
from uuid import UUID

import qrcode
from django.conf import settings
from django.core import signing
from django.core.cache import cache
from django.utils import timezone

from apps.caching import keys
from apps.caching.store import invalidate
from .eligibility import get_progress_summary
from .exceptions import (
    InvalidVoucherPayloadError,
    NotEligibleError,
    VoucherStorageError,
)

logger = logging.getLogger(__name__)

VOUCHER_SALT = 'smilecoins.vouchers'

COLLECTION_INSTRUCTIONS = (
    "Show this QR code at a Smile Coin collection point before it expires "
    "to receive your physical commemorative coin. One coin per tourist."
)


def _moment(as_of: Union[date, datetime, None]) -> datetime:
    if isinstance(as_of, datetime):
        return as_of if timezone.is_aware(as_of) else timezone.make_aware(as_of)
    return timezone.now()


def _voucher_key(user_id) -> str:
    try:
        return keys.build_key(keys.VOUCHER, 'current', entity=user_id)
    except Exception as e:
        raise VoucherStorageError("Voucher storage unavailable") from e


def _new_voucher(user_id: UUID, now: datetime) -> dict:
    suffix = str(user_id).replace('-', '')[-8:].upper()
    voucher_id = f'SMILE_{suffix}_{secrets.token_hex(4).upper()}'
    validity = timedelta(days=settings.SMILE_COINS['VOUCHER_VALIDITY_DAYS'])

    return {
        'voucher_id': voucher_id,
        'user_id': str(user_id),
        'generated_at': now,
        'expires_at': now + validity,
        'qr_payload': signing.dumps(
            {'voucher_id': voucher_id, 'user_id': str(user_id)},
            salt=VOUCHER_SALT,
        ),
        'collection_instructions': COLLECTION_INSTRUCTIONS,
        'is_valid': True,
    }


def get_voucher(*, user_id: UUID, as_of: Union[date, datetime, None] = None) -> Optional[dict]:
    """
    Return the tourist's voucher while it is valid, otherwise None.

    An expired voucher still present in the store is deleted.

    Raises:
        VoucherStorageError: If the store cannot be read
    """
    key = _voucher_key(user_id)
    now = _moment(as_of)

    try:
        voucher = cache.get(key)
        if voucher is None:
            return None
        if now >= voucher['expires_at']:
            cache.delete(key)
            logger.info("Deleted expired voucher %s", voucher['voucher_id'])
            return None
    except Exception as e:
        raise VoucherStorageError("Voucher storage unavailable") from e

    return voucher


def has_active_voucher(*, user_id: UUID, as_of: Union[date, datetime, None] = None) -> bool:
    """Whether a voucher valid at as_of is stored; storage errors read as False."""
    try:
        return get_voucher(user_id=user_id, as_of=as_of) is not None
    except VoucherStorageError:
        logger.warning("Could not check voucher for %s", user_id, exc_info=True)
        return False


def issue_voucher(*, user_id: UUID, as_of: Union[date, datetime, None] = None) -> dict:
    """
    Issue the tourist's physical-coin voucher, or return the existing one.

    Issuance is idempotent: the voucher is written with a set-if-absent,
    so concurrent requests converge on whichever voucher landed first.

    Args:
        user_id: Tourist UUID
        as_of: Moment to evaluate eligibility and expiry at; defaults to now

    Returns:
        Voucher dict with voucher_id, user_id, generated_at, expires_at,
        qr_payload, collection_instructions and is_valid.

    Raises:
        UserNotFoundError: If the user does not exist
        NotEligibleError: If the trip is not fully completed
        VoucherStorageError: If the store cannot be read or written
    """
    summary = get_progress_summary(user_id=user_id, as_of=as_of)
    if not summary['is_eligible_for_voucher']:
        raise NotEligibleError(
            f"Not eligible for a voucher yet: {summary['completed_days']} of "
            f"{summary['total_trip_days']} trip days completed"
        )

    existing = get_voucher(user_id=user_id, as_of=as_of)
    if existing is not None:
        return existing

    now = _moment(as_of)
    voucher = _new_voucher(user_id, now)
    timeout = int((voucher['expires_at'] - now).total_seconds())
    key = _voucher_key(user_id)

    try:
        added = cache.add(key, voucher, timeout)
    except Exception as e:
        raise VoucherStorageError("Voucher storage unavailable") from e

    if not added:
        # Another request issued first
        stored = get_voucher(user_id=user_id, as_of=as_of)
        if stored is None:
            raise VoucherStorageError("Voucher could not be stored, please retry")
        return stored

    invalidate(keys.ELIGIBILITY, entity=user_id)
    logger.info("Issued voucher %s to %s", voucher['voucher_id'], user_id)
    return voucher


def verify_voucher_payload(payload: str, *, as_of: Union[date, datetime, None] = None) -> dict:
    """
    Resolve a scanned QR payload to the stored, still-valid voucher.

    Raises:
        InvalidVoucherPayloadError: On a bad signature, or when the voucher
            expired or was replaced
        VoucherStorageError: If the store cannot be read
    """
    try:
        data = signing.loads(payload, salt=VOUCHER_SALT)
    except signing.BadSignature:
        raise InvalidVoucherPayloadError("Voucher payload signature is invalid")

    voucher = get_voucher(user_id=data['user_id'], as_of=as_of)
    if voucher is None or voucher['voucher_id'] != data['voucher_id']:
        raise InvalidVoucherPayloadError("Voucher is expired or unknown")

    return voucher


def render_voucher_qr(voucher: dict) -> bytes:
    """Render the voucher's redemption payload as a PNG QR code."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(voucher['qr_payload'])
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()
