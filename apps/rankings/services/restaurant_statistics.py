"""Single-restaurant statistics drill-down."""

from datetime import date, datetime, timedelta
from typing import Union
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce, TruncDay, TruncMonth, TruncWeek

from apps.caching import keys
from apps.caching.store import get_or_compute
from apps.restaurants.models import Restaurant
from apps.transfers.models import Transfer
from apps.transfers.services import local_day
from .exceptions import RestaurantNotFoundError

TRUNCATIONS = {
    'daily': TruncDay,
    'weekly': TruncWeek,
    'monthly': TruncMonth,
}

# Number of periods in each drill-down trend series, ending on the as-of day
TREND_LENGTHS = {
    'daily': 30,
    'weekly': 12,
    'monthly': 12,
}


def growth_rate(current: int, previous: int) -> float:
    """Period-over-period growth in percent; 0 when the previous period was 0."""
    if not previous:
        return 0.0
    return round((current - previous) / previous * 100, 2)


def _shift_months(day: date, months: int) -> date:
    month_index = day.year * 12 + day.month - 1 + months
    return date(month_index // 12, month_index % 12 + 1, 1)


def period_start(day: date, period: str) -> date:
    """First day of the daily / weekly (ISO, Monday) / monthly period holding day."""
    if period == 'weekly':
        return day - timedelta(days=day.weekday())
    if period == 'monthly':
        return day.replace(day=1)
    return day


def _shift_periods(start: date, period: str, count: int) -> date:
    if period == 'weekly':
        return start + timedelta(weeks=count)
    if period == 'monthly':
        return _shift_months(start, count)
    return start + timedelta(days=count)


def trend_window_start(as_of_day: date, period: str) -> date:
    """First day of the drill-down window for a period kind."""
    return _shift_periods(period_start(as_of_day, period), period, 1 - TREND_LENGTHS[period])


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def trend_series(transfers, period: str, start: date, end: date) -> list:
    """
    Coins, transactions and unique tourists per period, oldest first.

    Every period between start and end is present, with zeros when it had
    no transfers, so growth rates always compare adjacent periods. The
    first and last periods may cover only part of their span.
    """
    rows = (
        transfers
        .filter(transfer_date__gte=start, transfer_date__lte=end)
        .annotate(period=TRUNCATIONS[period]('transfer_date'))
        .values('period')
        .annotate(
            coins=Sum('amount'),
            transactions=Count('id'),
            unique_tourists=Count('user', distinct=True),
        )
        .order_by('period')
    )
    by_period = {_as_date(row['period']): row for row in rows}

    series = []
    previous = 0
    current = period_start(start, period)
    while current <= end:
        row = by_period.get(current)
        coins = row['coins'] if row else 0
        series.append({
            'period': current,
            'coins': coins,
            'transactions': row['transactions'] if row else 0,
            'unique_tourists': row['unique_tourists'] if row else 0,
            'growth_rate': growth_rate(coins, previous),
        })
        previous = coins
        current = _shift_periods(current, period, 1)
    return series


def origin_breakdown(transfers, total_coins: int) -> list:
    """Coins, transactions and share of total per origin country, largest first."""
    rows = (
        transfers
        .values('origin_country')
        .annotate(
            coins=Sum('amount'),
            transactions=Count('id'),
            tourists=Count('user', distinct=True),
        )
        .order_by('-coins', 'origin_country')
    )
    return [
        {
            'country': row['origin_country'],
            'coins': row['coins'],
            'transactions': row['transactions'],
            'tourists': row['tourists'],
            'percentage': round(row['coins'] * 100 / total_coins, 2) if total_coins else 0.0,
        }
        for row in rows
    ]


def restaurant_rank(restaurant: Restaurant) -> tuple:
    """
    Position of the restaurant in the overall ranking.

    Returns:
        (rank, total_restaurants, percentile) where percentile is the
        share of restaurants ranked at or below this one, rounded.
    """
    total = restaurant.total_coins_received
    ahead = Restaurant.objects.filter(
        Q(total_coins_received__gt=total)
        | Q(total_coins_received=total, id__lt=restaurant.id)
    ).count()
    rank = ahead + 1
    total_restaurants = Restaurant.objects.count()
    percentile = round((total_restaurants - rank + 1) / total_restaurants * 100) if total_restaurants else 0
    return rank, total_restaurants, percentile


def _build_statistics(restaurant: Restaurant, as_of_day: date) -> dict:
    transfers = Transfer.objects.filter(restaurant=restaurant)

    totals = transfers.aggregate(
        total_coins=Coalesce(Sum('amount'), 0),
        total_transactions=Count('id'),
        unique_tourists=Count('user', distinct=True),
        unique_countries=Count('origin_country', distinct=True),
    )
    total_coins = totals['total_coins']
    total_transactions = totals['total_transactions']

    rank, total_restaurants, percentile = restaurant_rank(restaurant)

    return {
        'restaurant_id': restaurant.id,
        'name': restaurant.name,
        'total_coins': total_coins,
        'total_transactions': total_transactions,
        'unique_tourists': totals['unique_tourists'],
        'unique_countries': totals['unique_countries'],
        'average_coins_per_transaction': (
            round(total_coins / total_transactions, 2) if total_transactions else 0.0
        ),
        'rank': rank,
        'total_restaurants': total_restaurants,
        'percentile': percentile,
        'origin_breakdown': origin_breakdown(transfers, total_coins),
        'trends': {
            period: trend_series(transfers, period, trend_window_start(as_of_day, period), as_of_day)
            for period in TRUNCATIONS
        },
        'as_of': as_of_day,
    }


def get_restaurant_statistics(
    *,
    restaurant_id: UUID,
    as_of: Union[date, datetime, None] = None
) -> dict:
    """
    Aggregate a restaurant's ledger into totals, ranking and trends.

    Cached per restaurant and as-of day under the ranking prefix, so any
    recorded transfer (which can move ranks of every restaurant) drops it.

    Args:
        restaurant_id: Restaurant UUID
        as_of: Last day of the trend windows; defaults to today

    Returns:
        Dictionary with:
        - restaurant_id, name
        - total_coins, total_transactions, unique_tourists, unique_countries
        - average_coins_per_transaction: float, 2 decimals
        - rank, total_restaurants, percentile
        - origin_breakdown: list of {country, coins, transactions, tourists, percentage}
        - trends: {'daily': [...], 'weekly': [...], 'monthly': [...]} where
          each point is {period, coins, transactions, unique_tourists, growth_rate}
        - as_of: date

    Raises:
        RestaurantNotFoundError: If the restaurant does not exist

    Example:
        >>> stats = get_restaurant_statistics(restaurant_id=restaurant.id)
        >>> stats['rank'], stats['percentile']
        (1, 100)
    """
    try:
        restaurant = Restaurant.objects.get(id=restaurant_id)
    except (Restaurant.DoesNotExist, ValidationError):
        raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")

    as_of_day = local_day(as_of)

    return get_or_compute(
        keys.RANKING, 'statistics', as_of_day,
        entity=restaurant.id,
        compute=lambda: _build_statistics(restaurant, as_of_day),
        timeout=settings.SMILE_COINS['STATISTICS_CACHE_TTL'],
    )
