"""
Rankings services - Business logic layer.

This package contains the read side built on the coin ledger:
- Overall, per-origin and nearby restaurant rankings
- Manual ranking refresh
- Single-restaurant statistics drill-down
"""

# Ranking Engine
from .ranking_queries import (
    get_overall_ranking,
    get_origin_ranking,
    get_nearby_ranking,
    refresh_rankings,
)

# Restaurant statistics
from .restaurant_statistics import (
    get_restaurant_statistics,
    growth_rate,
)

# Geo helpers
from .geo import haversine_km

# Domain Exceptions
from .exceptions import (
    RankingsServiceError,
    InvalidRankingQueryError,
    RestaurantNotFoundError,
)

__all__ = [
    # Ranking Engine
    'get_overall_ranking',
    'get_origin_ranking',
    'get_nearby_ranking',
    'refresh_rankings',
    # Restaurant statistics
    'get_restaurant_statistics',
    'growth_rate',
    # Geo helpers
    'haversine_km',
    # Exceptions
    'RankingsServiceError',
    'InvalidRankingQueryError',
    'RestaurantNotFoundError',
]
