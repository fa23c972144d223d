"""Trip progress and voucher eligibility service."""

from datetime import date, datetime, timedelta
from typing import Optional, Union
from uuid import UUID

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from apps.caching import keys
from apps.caching.store import get_or_compute
from apps.transfers.models import DailyReward
from apps.transfers.services import local_day
from .exceptions import UserNotFoundError

User = get_user_model()


def _get_user(user_id: UUID):
    try:
        return User.objects.get(id=user_id)
    except (User.DoesNotExist, ValidationError):
        raise UserNotFoundError(f"User {user_id} not found")


def _current_streak(complete_days: set, as_of_day: date) -> int:
    """Consecutive complete days ending on as_of_day; an incomplete as_of_day gives 0."""
    streak = 0
    past_days = sorted((day for day in complete_days if day <= as_of_day), reverse=True)
    for day in past_days:
        if day != as_of_day - timedelta(days=streak):
            break
        streak += 1
    return streak


def _build_summary(user, as_of_day: date, as_of=None) -> dict:
    from .vouchers import has_active_voucher

    complete_days = set(
        DailyReward.objects
        .filter(user=user, all_coins_given=True)
        .values_list('reward_date', flat=True)
    )
    completed_days = len(complete_days)

    if user.has_trip:
        total_trip_days = (user.departure_date - user.arrival_date).days
        trip_days = (
            user.arrival_date + timedelta(days=i)
            for i in range(total_trip_days + 1)
        )
        every_day_complete = all(day in complete_days for day in trip_days)
        is_eligible = as_of_day >= user.departure_date and every_day_complete
        days_until_departure = max((user.departure_date - as_of_day).days, 0)
    else:
        total_trip_days = 0
        is_eligible = False
        days_until_departure = 0

    if total_trip_days:
        completion = min(round(completed_days / total_trip_days * 100, 2), 100.0)
    else:
        completion = 0.0

    return {
        'total_trip_days': total_trip_days,
        'completed_days': completed_days,
        'remaining_days': max(total_trip_days - completed_days, 0),
        'current_streak': _current_streak(complete_days, as_of_day),
        'completion_percentage': completion,
        'is_eligible_for_voucher': is_eligible,
        'has_generated_voucher': has_active_voucher(user_id=user.id, as_of=as_of),
        'days_until_departure': days_until_departure,
        'as_of': as_of_day,
    }


def get_progress_summary(
    *,
    user_id: UUID,
    as_of: Union[date, datetime, None] = None
) -> dict:
    """
    Summarize a tourist's trip progress and voucher eligibility.

    A day is complete when the tourist gave away the whole daily budget.
    The tourist is eligible once the as-of day has reached departure and
    every calendar day from arrival to departure, both inclusive, is
    complete.

    The summary is cached per user and as-of day. Recording a transfer or
    issuing a voucher invalidates the user's entries.

    Args:
        user_id: Tourist UUID
        as_of: Day (or moment) to evaluate at; defaults to now

    Returns:
        Dictionary with:
        - total_trip_days: int - whole days between arrival and departure
        - completed_days: int - days with the full budget given
        - remaining_days: int
        - current_streak: int - consecutive complete days ending on as_of
        - completion_percentage: float - clamped to 100, 2 decimals
        - is_eligible_for_voucher: bool
        - has_generated_voucher: bool
        - days_until_departure: int
        - as_of: date

    Raises:
        UserNotFoundError: If the user does not exist

    Example:
        >>> summary = get_progress_summary(user_id=user.id)
        >>> summary['completed_days'], summary['is_eligible_for_voucher']
        (4, True)
    """
    user = _get_user(user_id)
    as_of_day = local_day(as_of)

    return get_or_compute(
        keys.ELIGIBILITY, 'summary', as_of_day,
        entity=user.id,
        compute=lambda: _build_summary(user, as_of_day, as_of),
        timeout=settings.SMILE_COINS['ELIGIBILITY_CACHE_TTL'],
    )


def get_daily_progress(*, user_id: UUID, limit: int = 30) -> list:
    """
    Recent daily rewards of a tourist, newest first.

    Args:
        user_id: Tourist UUID
        limit: Maximum number of days returned

    Returns:
        List of dicts with date, coins_received, coins_given,
        all_coins_given and completion_percentage for the day.
    """
    user = _get_user(user_id)

    rewards = DailyReward.objects.filter(user=user).order_by('-reward_date')[:limit]
    return [
        {
            'date': reward.reward_date,
            'coins_received': reward.coins_received,
            'coins_given': reward.coins_given,
            'all_coins_given': reward.all_coins_given,
            'completion_percentage': (
                min(round(reward.coins_given / reward.coins_received * 100, 2), 100.0)
                if reward.coins_received else 0.0
            ),
        }
        for reward in rewards
    ]
