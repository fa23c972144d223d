"""Transfer recording service with concurrency protection."""

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, OperationalError, transaction
from django.db.models import F
from django.utils import timezone

from apps.caching import keys
from apps.caching.store import invalidate
from apps.restaurants.models import Restaurant
from ..models import DailyReward, Transfer
from .exceptions import (
    InvalidAmountError,
    QuotaExceededError,
    RestaurantNotFoundError,
    TransferConflictError,
    UserNotFoundError,
)
from .quota_guard import compute_quota, is_valid_amount, local_day, quota_settings

User = get_user_model()

logger = logging.getLogger(__name__)

# First attempt plus one retry with fresh figures
MAX_ATTEMPTS = 2


@dataclass
class RecordedTransfer:
    transfer: Transfer
    daily_reward: DailyReward


def record_transfer(
    *,
    user_id: UUID,
    restaurant_id: UUID,
    amount: int,
    settlement_hash: Optional[str] = None,
    at: Optional[datetime] = None
) -> RecordedTransfer:
    """
    Record a coin transfer and update every aggregate that depends on it.

    This operation, in one database transaction:
    1. Locks the user row, serializing all transfers of that user
    2. Re-runs the quota arithmetic against the locked ledger
    3. Appends the Transfer
    4. Increments the restaurant's coin counter with an F() expression
    5. Creates or updates the user's DailyReward for the day
    6. Schedules cache invalidation (rankings, the restaurant's dashboard,
       the user's eligibility) to run once the transaction commits

    Lock or uniqueness failures roll the whole unit back and it is
    retried once; a second failure surfaces as TransferConflictError.

    Args:
        user_id: Tourist giving the coins
        restaurant_id: Restaurant receiving them
        amount: Coins to give (MIN_AMOUNT..MAX_AMOUNT)
        settlement_hash: Opaque settlement reference; a pending
            placeholder is generated when omitted
        at: Moment of the transfer; defaults to now

    Returns:
        RecordedTransfer with the new Transfer and the updated DailyReward

    Raises:
        InvalidAmountError: If amount is outside the allowed range
        UserNotFoundError: If the tourist does not exist
        RestaurantNotFoundError: If the restaurant does not exist
        QuotaExceededError: If either daily cap would be exceeded
        TransferConflictError: If concurrent writes prevented the commit
    """
    limits = quota_settings()
    if not is_valid_amount(amount):
        raise InvalidAmountError(
            f"Amount must be an integer between {limits['MIN_AMOUNT']} "
            f"and {limits['MAX_AMOUNT']}"
        )

    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            recorded = _record_once(
                user_id=user_id,
                restaurant_id=restaurant_id,
                amount=amount,
                settlement_hash=settlement_hash,
                at=at,
            )
        except QuotaExceededError as e:
            logger.warning(
                "Rejected transfer of %s coins from %s to %s: %s",
                amount, user_id, restaurant_id, e
            )
            raise
        except (OperationalError, IntegrityError) as e:
            if attempt < MAX_ATTEMPTS:
                logger.warning(
                    "Transfer from %s to %s conflicted (attempt %s), retrying: %s",
                    user_id, restaurant_id, attempt, e
                )
                continue
            logger.warning(
                "Transfer from %s to %s conflicted after %s attempts: %s",
                user_id, restaurant_id, attempt, e
            )
            raise TransferConflictError(
                "Transfer could not be recorded due to a concurrent update, please retry"
            ) from e

        logger.info(
            "Recorded transfer %s: %s coins from %s to %s",
            recorded.transfer.id, amount, user_id, restaurant_id
        )
        return recorded


def _record_once(*, user_id, restaurant_id, amount, settlement_hash, at) -> RecordedTransfer:
    with transaction.atomic():
        try:
            user = (
                User.objects
                .select_for_update()
                .get(id=user_id, is_active=True)
            )
        except (User.DoesNotExist, ValidationError):
            raise UserNotFoundError(f"User {user_id} not found")

        try:
            restaurant = Restaurant.objects.get(id=restaurant_id)
        except (Restaurant.DoesNotExist, ValidationError):
            raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")

        now = at or timezone.now()
        day = local_day(now)

        check = compute_quota(
            user_id=user.id,
            restaurant_id=restaurant.id,
            amount=amount,
            day=day,
        )
        if not check.allowed:
            raise QuotaExceededError(check.reason, check=check)

        transfer_fields = dict(
            from_address=user.wallet_address,
            to_address=restaurant.wallet_address,
            user=user,
            restaurant=restaurant,
            amount=amount,
            transferred_at=now,
            transfer_date=day,
            origin_country=user.origin_country,
        )
        if settlement_hash:
            transfer_fields['settlement_hash'] = settlement_hash
        transfer = Transfer.objects.create(**transfer_fields)

        Restaurant.objects.filter(id=restaurant.id).update(
            total_coins_received=F('total_coins_received') + amount,
            updated_at=timezone.now(),
        )

        daily_cap = check.daily_cap
        coins_given = check.daily_given + amount
        reward, created = DailyReward.objects.get_or_create(
            user=user,
            reward_date=day,
            defaults={
                'coins_received': daily_cap,
                'coins_given': coins_given,
                'all_coins_given': coins_given >= daily_cap,
            },
        )
        if not created:
            reward.coins_given = coins_given
            reward.all_coins_given = coins_given >= reward.coins_received
            reward.save(update_fields=['coins_given', 'all_coins_given', 'updated_at'])

        transaction.on_commit(
            partial(invalidate_after_transfer, user_id=user.id, restaurant_id=restaurant.id)
        )

    return RecordedTransfer(transfer=transfer, daily_reward=reward)


def invalidate_after_transfer(*, user_id: UUID, restaurant_id: UUID) -> None:
    """Drop every derived view a new transfer can change."""
    invalidate(keys.RANKING)
    invalidate(keys.DASHBOARD, entity=restaurant_id)
    invalidate(keys.ELIGIBILITY, entity=user_id)
