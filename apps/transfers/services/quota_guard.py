"""
Quota guard - read-only checks of the daily coin budget.

Two caps apply to every tourist, per calendar day in settings.TIME_ZONE:

* DAILY_CAP coins in total (10 by default)
* PER_RESTAURANT_CAP coins to any single restaurant (3 by default)

Figures are always summed from the Transfer ledger, never from
DailyReward, so a check can never disagree with what was recorded.
The recorder re-runs ``compute_quota`` under a row lock on the user;
``validate_transfer`` is the side-effect-free pre-flight.
"""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Optional, Union
from uuid import UUID

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.restaurants.models import Restaurant
from ..models import Transfer

User = get_user_model()


@dataclass
class QuotaCheck:
    """Outcome of a quota check plus the figures it was based on."""

    allowed: bool
    reason: Optional[str]
    daily_given: int
    daily_remaining: int
    restaurant_given_today: int
    max_per_restaurant: int
    daily_cap: int

    def as_dict(self) -> dict:
        return asdict(self)


def quota_settings() -> dict:
    return settings.SMILE_COINS


def local_day(as_of: Union[date, datetime, None] = None) -> date:
    """Calendar day of as_of (default now) in the configured time zone."""
    if as_of is None:
        return timezone.localdate()
    if isinstance(as_of, datetime):
        if timezone.is_naive(as_of):
            as_of = timezone.make_aware(as_of)
        return timezone.localdate(as_of)
    return as_of


def is_valid_amount(amount) -> bool:
    limits = quota_settings()
    if isinstance(amount, bool) or not isinstance(amount, int):
        return False
    return limits['MIN_AMOUNT'] <= amount <= limits['MAX_AMOUNT']


def compute_quota(*, user_id: UUID, restaurant_id: UUID, amount: int, day: date) -> QuotaCheck:
    """
    Sum today's ledger for the user and decide whether amount fits both caps.

    Does not check that user or restaurant exist.
    """
    limits = quota_settings()
    daily_cap = limits['DAILY_CAP']
    per_restaurant = limits['PER_RESTAURANT_CAP']

    totals = Transfer.objects.filter(
        user_id=user_id,
        transfer_date=day,
    ).aggregate(
        daily=Coalesce(Sum('amount'), 0),
        restaurant=Coalesce(Sum('amount', filter=Q(restaurant_id=restaurant_id)), 0),
    )
    daily_given = totals['daily']
    restaurant_given = totals['restaurant']

    reason = None
    if daily_given + amount > daily_cap:
        reason = (
            f"Daily limit of {daily_cap} coins exceeded: "
            f"{daily_given} given today, {max(daily_cap - daily_given, 0)} remaining"
        )
    elif restaurant_given + amount > per_restaurant:
        reason = (
            f"Restaurant limit of {per_restaurant} coins per day exceeded: "
            f"{restaurant_given} already given to this restaurant today"
        )

    return QuotaCheck(
        allowed=reason is None,
        reason=reason,
        daily_given=daily_given,
        daily_remaining=max(daily_cap - daily_given, 0),
        restaurant_given_today=restaurant_given,
        max_per_restaurant=per_restaurant,
        daily_cap=daily_cap,
    )


def _rejected(reason: str) -> QuotaCheck:
    limits = quota_settings()
    return QuotaCheck(
        allowed=False,
        reason=reason,
        daily_given=0,
        daily_remaining=limits['DAILY_CAP'],
        restaurant_given_today=0,
        max_per_restaurant=limits['PER_RESTAURANT_CAP'],
        daily_cap=limits['DAILY_CAP'],
    )


def validate_transfer(
    *,
    user_id: UUID,
    restaurant_id: UUID,
    amount: int,
    as_of: Union[date, datetime, None] = None
) -> QuotaCheck:
    """
    Check whether a transfer would be accepted right now, without writing.

    The answer is advisory: a concurrent transfer can still use up the
    quota before this one is recorded. record_transfer re-checks under a
    lock and is the authority.

    Args:
        user_id: Tourist giving the coins
        restaurant_id: Restaurant receiving them
        amount: Coins to give (MIN_AMOUNT..MAX_AMOUNT)
        as_of: Day (or moment) to check against; defaults to now

    Returns:
        QuotaCheck with allowed/reason and today's figures. Unknown
        users or restaurants and invalid amounts are reported through
        reason rather than raised.

    Example:
        >>> check = validate_transfer(user_id=u.id, restaurant_id=r.id, amount=2)
        >>> check.allowed, check.daily_remaining
        (True, 10)
    """
    limits = quota_settings()

    if not is_valid_amount(amount):
        return _rejected(
            f"Amount must be an integer between {limits['MIN_AMOUNT']} "
            f"and {limits['MAX_AMOUNT']}"
        )

    try:
        user_exists = User.objects.filter(id=user_id, is_active=True).exists()
    except ValidationError:
        user_exists = False
    if not user_exists:
        return _rejected("User not found")

    try:
        restaurant_exists = Restaurant.objects.filter(id=restaurant_id).exists()
    except ValidationError:
        restaurant_exists = False
    if not restaurant_exists:
        return _rejected("Restaurant not found")

    day = local_day(as_of)
    return compute_quota(user_id=user_id, restaurant_id=restaurant_id, amount=amount, day=day)
