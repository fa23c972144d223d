"""
Domain exceptions for analytics app.

This module defines domain-specific exceptions that are raised by the
dashboard queries. These exceptions represent invalid requests, separate
from HTTP concerns.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidPeriodError
    ├── InvalidDateRangeError
    ├── InvalidComparisonError
    └── RestaurantNotFoundError

Usage:
    from apps.analytics.exceptions import InvalidPeriodError

    if period not in TRUNCATIONS:
        raise InvalidPeriodError(f"Invalid period: {period}")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics service errors.

    All domain-specific exceptions in the analytics app inherit from this
    class, making it easy to catch all analytics errors in views:

        try:
            data = DashboardQueries.performance_trends(restaurant_id, period='yearly')
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """
    Raised when a trend period is not daily, weekly or monthly.

    Example:
        raise InvalidPeriodError(
            "Invalid period: 'yearly'. Valid options: daily, weekly, monthly"
        )
    """

    pass


class InvalidDateRangeError(AnalyticsServiceError):
    """
    Raised when date range is invalid.

    Typically when start_date is after end_date.

    Example:
        raise InvalidDateRangeError("Start date must be before end date")
    """

    pass


class InvalidComparisonError(AnalyticsServiceError):
    """
    Raised when a comparison mode or limit is invalid.

    Valid modes are: similar, top, nearby.
    """

    pass


class RestaurantNotFoundError(AnalyticsServiceError):
    """
    Raised when the dashboard's restaurant does not exist.

    Example:
        raise RestaurantNotFoundError("Restaurant not found")
    """

    pass
