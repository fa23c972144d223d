"""Ledger reads - transfer history and daily distribution."""

import math
from datetime import date
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db.models import Count, Sum

from apps.restaurants.models import Restaurant
from ..models import DailyReward, Transfer
from .exceptions import InvalidPaginationError, RestaurantNotFoundError, UserNotFoundError
from .quota_guard import local_day, quota_settings

User = get_user_model()

MAX_PAGE_SIZE = 100


def pagination_meta(total: int, page: int, limit: int) -> dict:
    """Pagination block shared by every paginated read."""
    total_pages = math.ceil(total / limit) if total else 0
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'total_pages': total_pages,
        'has_next': page < total_pages,
        'has_prev': page > 1,
    }


def validate_page(page: int, limit: int) -> None:
    if page < 1:
        raise InvalidPaginationError("Page must be >= 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise InvalidPaginationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")


def _transfer_row(transfer: Transfer) -> dict:
    return {
        'id': transfer.id,
        'settlement_hash': transfer.settlement_hash,
        'user_id': transfer.user_id,
        'restaurant_id': transfer.restaurant_id,
        'restaurant_name': transfer.restaurant.name,
        'amount': transfer.amount,
        'origin_country': transfer.origin_country,
        'transferred_at': transfer.transferred_at,
        'transfer_date': transfer.transfer_date,
    }


def _paginated(queryset, page: int, limit: int) -> dict:
    validate_page(page, limit)
    total = queryset.count()
    offset = (page - 1) * limit
    rows = queryset.select_related('restaurant').order_by('-transferred_at', '-id')[offset:offset + limit]
    return {
        'results': [_transfer_row(t) for t in rows],
        'pagination': pagination_meta(total, page, limit),
    }


def get_user_transfer_history(*, user_id: UUID, page: int = 1, limit: int = 20) -> dict:
    """
    Paginated transfers given by a tourist, newest first.

    Raises:
        UserNotFoundError: If the user does not exist
        InvalidPaginationError: If page/limit are out of range
    """
    try:
        if not User.objects.filter(id=user_id).exists():
            raise UserNotFoundError(f"User {user_id} not found")
    except ValidationError:
        raise UserNotFoundError(f"User {user_id} not found")

    return _paginated(Transfer.objects.filter(user_id=user_id), page, limit)


def get_restaurant_transfer_history(*, restaurant_id: UUID, page: int = 1, limit: int = 20) -> dict:
    """
    Paginated transfers received by a restaurant, newest first.

    Raises:
        RestaurantNotFoundError: If the restaurant does not exist
        InvalidPaginationError: If page/limit are out of range
    """
    try:
        if not Restaurant.objects.filter(id=restaurant_id).exists():
            raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")
    except ValidationError:
        raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")

    return _paginated(Transfer.objects.filter(restaurant_id=restaurant_id), page, limit)


def get_daily_distribution(*, user_id: UUID, day: Optional[date] = None) -> dict:
    """
    Coins received, given and remaining for a tourist on one day.

    Given coins are summed from the ledger; the DailyReward row only
    supplies the received budget when it exists.

    Args:
        user_id: Tourist UUID
        day: Calendar day; defaults to today in the configured time zone

    Returns:
        Dictionary with:
        - date, coins_received, coins_given, coins_remaining
        - all_coins_given: bool
        - restaurants_visited: list of {restaurant_id, restaurant_name, coins, transfers}
    """
    try:
        if not User.objects.filter(id=user_id).exists():
            raise UserNotFoundError(f"User {user_id} not found")
    except ValidationError:
        raise UserNotFoundError(f"User {user_id} not found")

    day = day or local_day()
    reward = DailyReward.objects.filter(user_id=user_id, reward_date=day).first()
    coins_received = reward.coins_received if reward else quota_settings()['DAILY_CAP']

    per_restaurant = list(
        Transfer.objects
        .filter(user_id=user_id, transfer_date=day)
        .values('restaurant_id', 'restaurant__name')
        .annotate(coins=Sum('amount'), transfers=Count('id'))
        .order_by('-coins', 'restaurant_id')
    )
    coins_given = sum(row['coins'] for row in per_restaurant)

    return {
        'date': day,
        'coins_received': coins_received,
        'coins_given': coins_given,
        'coins_remaining': max(coins_received - coins_given, 0),
        'all_coins_given': coins_given >= coins_received,
        'restaurants_visited': [
            {
                'restaurant_id': row['restaurant_id'],
                'restaurant_name': row['restaurant__name'],
                'coins': row['coins'],
                'transfers': row['transfers'],
            }
            for row in per_restaurant
        ],
    }
