"""
Analytics Module
=================

This module provides the restaurant dashboard queries. It aggregates the
coin ledger of one restaurant into the tables and series its owner's
dashboard shows.

Classes:
    DashboardQueries: Static methods for the dashboard widgets.

Key Features:
    - Daily coin statistics with date and origin filters
    - Totals with ranking position and percentile
    - Tourist origin breakdown
    - Daily / weekly / monthly performance trends with growth rates
    - Benchmarking against similar, top or nearby restaurants

Example:
    Getting a restaurant's last month::

        from apps.analytics.analytics import DashboardQueries

        stats = DashboardQueries.total_stats(
            restaurant_id=restaurant.id,
            start_date=date.today() - timedelta(days=30),
            end_date=date.today(),
        )
        print(f"{stats['total_coins']} coins, rank {stats['ranking_position']}")

Note:
    This module is read-only. Every result is cached per restaurant under
    the ``dashboard`` prefix for DASHBOARD_CACHE_TTL seconds; recording a
    transfer invalidates the receiving restaurant's entries. A restaurant's
    ranking position can therefore lag other restaurants' transfers by up
    to one TTL.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db.models import Avg, Count, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.caching import keys
from apps.caching.store import get_or_compute, invalidate
from apps.rankings.services.geo import bounding_box, haversine_km
from apps.rankings.services.restaurant_statistics import (
    TRUNCATIONS,
    restaurant_rank,
    trend_series,
)
from apps.restaurants.models import Restaurant
from apps.transfers.models import Transfer
from .exceptions import (
    InvalidComparisonError,
    InvalidDateRangeError,
    InvalidPeriodError,
    RestaurantNotFoundError,
)

logger = logging.getLogger(__name__)

COMPARISON_MODES = ('similar', 'top', 'nearby')
DEFAULT_TREND_DAYS = 30
MAX_COMPARISON_LIMIT = 50
NEARBY_RADIUS_KM = 5.0


def _get_restaurant(restaurant_id):
    try:
        return Restaurant.objects.get(id=restaurant_id)
    except (Restaurant.DoesNotExist, ValidationError):
        raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")


def _check_range(start_date, end_date):
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRangeError("Start date must be before end date")


def _filtered_transfers(restaurant, start_date=None, end_date=None, origin_country=None):
    transfers = Transfer.objects.filter(restaurant=restaurant)
    if start_date:
        transfers = transfers.filter(transfer_date__gte=start_date)
    if end_date:
        transfers = transfers.filter(transfer_date__lte=end_date)
    if origin_country:
        transfers = transfers.filter(origin_country__iexact=origin_country)
    return transfers


def _days_active(restaurant) -> int:
    """Calendar days since the restaurant was onboarded, today included."""
    onboarded = timezone.localdate(restaurant.created_at)
    return max((timezone.localdate() - onboarded).days + 1, 1)


def _cached(restaurant, name, *parts, compute):
    return get_or_compute(
        keys.DASHBOARD, name, *parts,
        entity=restaurant.id,
        compute=compute,
        timeout=settings.SMILE_COINS['DASHBOARD_CACHE_TTL'],
    )


class DashboardQueries:
    """
    Ledger aggregations for restaurant dashboards.

    All methods are static, take the restaurant id first and return plain
    dictionaries or lists suitable for JSON serialization.

    Methods:
        daily_stats: Coins, tourists and transactions per day.
        total_stats: Totals plus ranking position and percentile.
        origin_breakdown: Coins and tourists per origin country.
        performance_trends: Per-period series with growth rates.
        restaurant_comparison: Benchmark rows of comparable restaurants.
        clear_restaurant_cache: Drop the restaurant's cached dashboards.

    Raises:
        RestaurantNotFoundError: From every query method when the
            restaurant does not exist.
    """

    @staticmethod
    def daily_stats(restaurant_id, start_date=None, end_date=None, origin_country=None):
        """
        Get coins received per day.

        Only days with at least one transfer are listed.

        Args:
            restaurant_id (UUID): The restaurant's unique identifier.
            start_date (date, optional): First day to include.
            end_date (date, optional): Last day to include.
            origin_country (str, optional): Only transfers from tourists of
                this country (case-insensitive).

        Returns:
            list[dict]: Oldest day first, each containing:
                - date (date)
                - coins_received (int)
                - unique_tourists (int)
                - transactions (int)
                - average_coins_per_transaction (float): 2 decimals.

        Raises:
            InvalidDateRangeError: If start_date is after end_date.

        Example:
            Last week of a restaurant::

                days = DashboardQueries.daily_stats(
                    restaurant.id,
                    start_date=date.today() - timedelta(days=6),
                    end_date=date.today(),
                )
                for day in days:
                    print(f"{day['date']}: {day['coins_received']} coins")
        """
        _check_range(start_date, end_date)
        restaurant = _get_restaurant(restaurant_id)

        def compute():
            rows = (
                _filtered_transfers(restaurant, start_date, end_date, origin_country)
                .values('transfer_date')
                .annotate(
                    coins=Sum('amount'),
                    tourists=Count('user', distinct=True),
                    transactions=Count('id'),
                    average=Avg('amount'),
                )
                .order_by('transfer_date')
            )
            return [
                {
                    'date': row['transfer_date'],
                    'coins_received': row['coins'],
                    'unique_tourists': row['tourists'],
                    'transactions': row['transactions'],
                    'average_coins_per_transaction': round(float(row['average']), 2),
                }
                for row in rows
            ]

        return _cached(
            restaurant, 'daily', start_date, end_date, (origin_country or '').lower(),
            compute=compute,
        )

    @staticmethod
    def total_stats(restaurant_id, start_date=None, end_date=None, origin_country=None):
        """
        Get a restaurant's totals and where it stands in the overall ranking.

        Args:
            restaurant_id (UUID): The restaurant's unique identifier.
            start_date (date, optional): First day to include.
            end_date (date, optional): Last day to include.
            origin_country (str, optional): Only transfers from this country.

        Returns:
            dict: A dictionary containing:
                - total_coins (int)
                - total_transactions (int)
                - unique_tourists (int)
                - average_coins_per_day (float): Over the requested range
                  (both ends inclusive), or since onboarding when no full
                  range is given.
                - average_coins_per_transaction (float)
                - ranking_position (int): Position in the overall ranking.
                - total_restaurants (int)
                - percentile_rank (int): Share of restaurants ranked at or
                  below this one.

        Note:
            The ranking figures always refer to the all-time overall
            ranking; date and origin filters only apply to the totals.
        """
        _check_range(start_date, end_date)
        restaurant = _get_restaurant(restaurant_id)

        def compute():
            totals = _filtered_transfers(
                restaurant, start_date, end_date, origin_country
            ).aggregate(
                coins=Coalesce(Sum('amount'), 0),
                transactions=Count('id'),
                tourists=Count('user', distinct=True),
            )

            if start_date and end_date:
                days = (end_date - start_date).days + 1
            else:
                days = _days_active(restaurant)

            rank, total_restaurants, percentile = restaurant_rank(restaurant)

            return {
                'total_coins': totals['coins'],
                'total_transactions': totals['transactions'],
                'unique_tourists': totals['tourists'],
                'average_coins_per_day': round(totals['coins'] / days, 2),
                'average_coins_per_transaction': (
                    round(totals['coins'] / totals['transactions'], 2)
                    if totals['transactions'] else 0.0
                ),
                'ranking_position': rank,
                'total_restaurants': total_restaurants,
                'percentile_rank': percentile,
            }

        return _cached(
            restaurant, 'total', start_date, end_date, (origin_country or '').lower(),
            compute=compute,
        )

    @staticmethod
    def origin_breakdown(restaurant_id, start_date=None, end_date=None, limit=None):
        """
        Get coins and tourists per origin country, largest share first.

        Args:
            restaurant_id (UUID): The restaurant's unique identifier.
            start_date (date, optional): First day to include.
            end_date (date, optional): Last day to include.
            limit (int, optional): Keep only the first N countries.

        Returns:
            list[dict]: Each containing:
                - country (str)
                - coins_received (int)
                - tourist_count (int)
                - transaction_count (int)
                - percentage (float): Share of the restaurant's coins in the
                  range, 2 decimals. Over all countries the shares sum to
                  100 within rounding.
                - average_coins_per_tourist (float)
        """
        _check_range(start_date, end_date)
        restaurant = _get_restaurant(restaurant_id)

        def compute():
            rows = list(
                _filtered_transfers(restaurant, start_date, end_date)
                .values('origin_country')
                .annotate(
                    coins=Sum('amount'),
                    tourists=Count('user', distinct=True),
                    transactions=Count('id'),
                )
                .order_by('-coins', 'origin_country')
            )
            total_coins = sum(row['coins'] for row in rows)

            return [
                {
                    'country': row['origin_country'],
                    'coins_received': row['coins'],
                    'tourist_count': row['tourists'],
                    'transaction_count': row['transactions'],
                    'percentage': round(row['coins'] * 100 / total_coins, 2),
                    'average_coins_per_tourist': round(row['coins'] / row['tourists'], 2),
                }
                for row in rows
            ]

        breakdown = _cached(restaurant, 'origins', start_date, end_date, compute=compute)
        return breakdown[:limit] if limit else breakdown

    @staticmethod
    def performance_trends(restaurant_id, period='daily', start_date=None, end_date=None):
        """
        Get a per-period coin series with period-over-period growth.

        Args:
            restaurant_id (UUID): The restaurant's unique identifier.
            period (str, optional): 'daily', 'weekly' (ISO weeks) or
                'monthly'. Defaults to 'daily'.
            start_date (date, optional): Defaults to 30 days before end_date.
            end_date (date, optional): Defaults to today.

        Returns:
            list[dict]: One entry per period in the range, oldest first,
            including empty periods:
                - period (date): First day of the period.
                - coins (int)
                - transactions (int)
                - unique_tourists (int)
                - growth_rate (float): ``(current - previous) / previous * 100``
                  rounded to 2 decimals, 0 when the previous period had no coins.

        Raises:
            InvalidPeriodError: If period is not one of the above.
            InvalidDateRangeError: If start_date is after end_date.
        """
        if period not in TRUNCATIONS:
            raise InvalidPeriodError(
                f"Invalid period: '{period}'. Valid options: {', '.join(TRUNCATIONS)}"
            )

        end_date = end_date or timezone.localdate()
        start_date = start_date or end_date - timedelta(days=DEFAULT_TREND_DAYS)
        _check_range(start_date, end_date)
        restaurant = _get_restaurant(restaurant_id)

        return _cached(
            restaurant, 'trends', period, start_date, end_date,
            compute=lambda: trend_series(
                Transfer.objects.filter(restaurant=restaurant),
                period, start_date, end_date,
            ),
        )

    @staticmethod
    def restaurant_comparison(restaurant_id, compare_with='similar', limit=10):
        """
        Get benchmark rows of restaurants comparable to this one.

        Args:
            restaurant_id (UUID): The restaurant's unique identifier.
            compare_with (str, optional): One of:
                - 'similar': Others with 50%-150% of this restaurant's coins.
                - 'top': The overall leaders (may include this restaurant).
                - 'nearby': Others within 5 km.
                Defaults to 'similar'.
            limit (int, optional): 1-50 rows. Defaults to 10.

        Returns:
            list[dict]: Ordered by total coins, each containing:
                - restaurant_id (UUID)
                - name (str)
                - total_coins (int)
                - ranking_position (int)
                - average_coins_per_day (float)
                - unique_tourists (int)
                - distance_km (float | None): Only set for 'nearby'.

        Raises:
            InvalidComparisonError: If compare_with or limit is invalid.
        """
        if compare_with not in COMPARISON_MODES:
            raise InvalidComparisonError(
                f"Invalid comparison: '{compare_with}'. "
                f"Valid options: {', '.join(COMPARISON_MODES)}"
            )
        if not 1 <= limit <= MAX_COMPARISON_LIMIT:
            raise InvalidComparisonError(f"Limit must be between 1 and {MAX_COMPARISON_LIMIT}")

        restaurant = _get_restaurant(restaurant_id)

        def compute():
            candidates = Restaurant.objects.annotate(
                unique_tourists=Count('transfers__user', distinct=True)
            ).order_by('-total_coins_received', 'id')
            distances = {}

            if compare_with == 'top':
                selected = list(candidates[:limit])
            elif compare_with == 'similar':
                total = restaurant.total_coins_received
                selected = list(
                    candidates
                    .exclude(id=restaurant.id)
                    .filter(
                        total_coins_received__gte=(total + 1) // 2,
                        total_coins_received__lte=total * 3 // 2,
                    )[:limit]
                )
            else:
                latitude = float(restaurant.latitude)
                longitude = float(restaurant.longitude)
                selected = []
                box = bounding_box(latitude, longitude, NEARBY_RADIUS_KM)
                for other in candidates.exclude(id=restaurant.id).filter(**box):
                    distance = haversine_km(
                        latitude, longitude, float(other.latitude), float(other.longitude)
                    )
                    if distance <= NEARBY_RADIUS_KM:
                        distances[other.id] = round(distance, 3)
                        selected.append(other)
                    if len(selected) == limit:
                        break

            return [
                {
                    'restaurant_id': other.id,
                    'name': other.name,
                    'total_coins': other.total_coins_received,
                    'ranking_position': restaurant_rank(other)[0],
                    'average_coins_per_day': round(
                        other.total_coins_received / _days_active(other), 2
                    ),
                    'unique_tourists': other.unique_tourists,
                    'distance_km': distances.get(other.id),
                }
                for other in selected
            ]

        return _cached(restaurant, 'comparison', compare_with, limit, compute=compute)

    @staticmethod
    def clear_restaurant_cache(restaurant_id):
        """
        Drop every cached dashboard entry of one restaurant.

        Returns:
            bool: False when the cache backend could not be reached; the
            entries then expire through their TTL.
        """
        cleared = invalidate(keys.DASHBOARD, entity=restaurant_id)
        if cleared:
            logger.info("Cleared dashboard cache for restaurant %s", restaurant_id)
        return cleared
