"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    DashboardQuerySerializer - Validates month / date range / origin filters
    OriginsQuerySerializer - Adds the optional row limit
    TrendsQuerySerializer - Adds the trend period
    ComparisonQuerySerializer - Validates comparison mode and limit

Response Serializers:
    DailyStatsSerializer - One day of coin statistics
    TotalStatsSerializer - Totals with ranking position
    OriginStatsSerializer - One origin country's share
    TrendPointSerializer - One period of a performance trend
    ComparisonRowSerializer - One benchmark restaurant
"""

from datetime import datetime, timedelta

from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class DashboardQuerySerializer(serializers.Serializer):
    """
    Validate month and date range query parameters.

    Used by: daily_stats, total_stats, origin_breakdown, performance_trends

    Query Parameters:
        month (str): Month in YYYY-MM format (e.g., '2025-01')
        start_date (date): Start of date range
        end_date (date): End of date range
        origin_country (str): Only transfers from tourists of this country

    Note:
        If 'month' is provided, it takes precedence and is converted
        to start_date and end_date for the full month.
    """

    month = serializers.RegexField(
        regex=r'^\d{4}-(0[1-9]|1[0-2])$',
        required=False,
        allow_blank=True,
        help_text='Month in YYYY-MM format'
    )
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    origin_country = serializers.CharField(max_length=64, required=False, allow_blank=True)

    def validate(self, attrs):
        """Parse month into date range if provided."""
        month = attrs.get('month')

        if month:
            year, month_number = (int(part) for part in month.split('-'))
            attrs['start_date'] = datetime(year, month_number, 1).date()
            # Last day of month
            if month_number == 12:
                attrs['end_date'] = datetime(year + 1, 1, 1).date() - timedelta(days=1)
            else:
                attrs['end_date'] = datetime(year, month_number + 1, 1).date() - timedelta(days=1)

        start = attrs.get('start_date')
        end = attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({
                'start_date': 'Start date must be before end date'
            })

        return attrs


class OriginsQuerySerializer(DashboardQuerySerializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False)


class TrendsQuerySerializer(DashboardQuerySerializer):
    """
    Validate query parameters for performance trends.

    Query Parameters:
        period (str): 'daily', 'weekly' or 'monthly'
    """

    VALID_PERIODS = ('daily', 'weekly', 'monthly')

    period = serializers.ChoiceField(
        choices=VALID_PERIODS,
        default='daily',
        help_text="Trend period: 'daily', 'weekly' or 'monthly'"
    )


class ComparisonQuerySerializer(serializers.Serializer):
    """
    Validate query parameters for restaurant comparison.

    Query Parameters:
        compare_with (str): 'similar', 'top' or 'nearby'
        limit (int): Number of rows (1-50)
    """

    VALID_MODES = ('similar', 'top', 'nearby')

    compare_with = serializers.ChoiceField(
        choices=VALID_MODES,
        default='similar',
        help_text="Comparison: 'similar', 'top' or 'nearby'"
    )
    limit = serializers.IntegerField(
        min_value=1,
        max_value=50,
        required=False,
        default=10,
        help_text='Number of results (1-50)'
    )


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class DailyStatsSerializer(serializers.Serializer):
    """Response serializer for one day of coin statistics."""
    date = serializers.DateField()
    coins_received = serializers.IntegerField()
    unique_tourists = serializers.IntegerField()
    transactions = serializers.IntegerField()
    average_coins_per_transaction = serializers.FloatField()


class TotalStatsSerializer(serializers.Serializer):
    """Response serializer for restaurant totals."""
    total_coins = serializers.IntegerField()
    total_transactions = serializers.IntegerField()
    unique_tourists = serializers.IntegerField()
    average_coins_per_day = serializers.FloatField()
    average_coins_per_transaction = serializers.FloatField()
    ranking_position = serializers.IntegerField()
    total_restaurants = serializers.IntegerField()
    percentile_rank = serializers.IntegerField()


class OriginStatsSerializer(serializers.Serializer):
    """Response serializer for one origin country."""
    country = serializers.CharField()
    coins_received = serializers.IntegerField()
    tourist_count = serializers.IntegerField()
    transaction_count = serializers.IntegerField()
    percentage = serializers.FloatField()
    average_coins_per_tourist = serializers.FloatField()


class TrendPointSerializer(serializers.Serializer):
    """Response serializer for one trend period."""
    period = serializers.DateField()
    coins = serializers.IntegerField()
    transactions = serializers.IntegerField()
    unique_tourists = serializers.IntegerField()
    growth_rate = serializers.FloatField()


class TrendsResponseSerializer(serializers.Serializer):
    period = serializers.CharField()
    data = TrendPointSerializer(many=True)


class ComparisonRowSerializer(serializers.Serializer):
    """Response serializer for one benchmark restaurant."""
    restaurant_id = serializers.UUIDField()
    name = serializers.CharField()
    total_coins = serializers.IntegerField()
    ranking_position = serializers.IntegerField()
    average_coins_per_day = serializers.FloatField()
    unique_tourists = serializers.IntegerField()
    distance_km = serializers.FloatField(allow_null=True)


class ComparisonResponseSerializer(serializers.Serializer):
    compare_with = serializers.CharField()
    limit = serializers.IntegerField()
    results = ComparisonRowSerializer(many=True)


class CacheClearedSerializer(serializers.Serializer):
    cleared = serializers.BooleanField()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
