"""
Rankings domain exceptions.

These exceptions represent business rule violations and should be
caught by views and converted to appropriate HTTP responses.
"""


class RankingsServiceError(Exception):
    """Base exception for rankings service errors."""
    pass


class InvalidRankingQueryError(RankingsServiceError):
    """Raised when pagination or geo filter parameters are out of range."""
    pass


class RestaurantNotFoundError(RankingsServiceError):
    """Raised when the restaurant of a statistics drill-down does not exist."""
    pass
