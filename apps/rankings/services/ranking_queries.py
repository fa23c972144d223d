"""
Ranking queries - restaurants ordered by coins received.

Three rankings share one pipeline:

* overall: by the restaurant's ``total_coins_received`` counter
* origin: by coins from transfers whose denormalized origin country
  matches (case-insensitive); restaurants without such coins rank with 0
* nearby: overall ranking restricted to a radius around a point

Order is always descending by total with the restaurant id as tiebreak,
and ``rank`` is the 1-based position in the filtered ordering. The radius
filter runs before pagination: a bounding box narrows the database query
and the haversine distance decides membership.

Every (type, filters, page, limit) combination is cached under the
``ranking`` prefix. A recorded transfer invalidates the whole prefix.
"""

import logging
from typing import Optional

from django.conf import settings
from django.db.models import F, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.caching import keys
from apps.caching.store import get_or_compute, invalidate
from apps.restaurants.models import Restaurant
from apps.transfers.services import pagination_meta
from .exceptions import InvalidRankingQueryError
from .geo import MAX_RADIUS_KM, MIN_RADIUS_KM, bounding_box, haversine_km

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
DEFAULT_NEARBY_RADIUS_KM = 5.0
PREWARM_LIMIT = 50

ROW_FIELDS = ('id', 'name', 'address', 'latitude', 'longitude', 'total_coins')


def _validate_page(page: int, limit: int) -> None:
    if page < 1:
        raise InvalidRankingQueryError("Page must be >= 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise InvalidRankingQueryError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")


def _normalize_geo(geo: Optional[dict]) -> Optional[tuple]:
    """Validate a {latitude, longitude, radius_km} filter into a float triple."""
    if not geo:
        return None

    try:
        latitude = float(geo['latitude'])
        longitude = float(geo['longitude'])
        radius_km = float(geo.get('radius_km') or DEFAULT_NEARBY_RADIUS_KM)
    except (KeyError, TypeError, ValueError):
        raise InvalidRankingQueryError("Geo filter needs numeric latitude and longitude")

    if not -90.0 <= latitude <= 90.0:
        raise InvalidRankingQueryError(f"Latitude {latitude} out of range [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidRankingQueryError(f"Longitude {longitude} out of range [-180, 180]")
    if not MIN_RADIUS_KM <= radius_km <= MAX_RADIUS_KM:
        raise InvalidRankingQueryError(
            f"Radius must be between {MIN_RADIUS_KM} and {MAX_RADIUS_KM} km"
        )

    return latitude, longitude, radius_km


def _geo_filters(geo: Optional[tuple]) -> dict:
    if geo is None:
        return {}
    latitude, longitude, radius_km = geo
    return {'latitude': latitude, 'longitude': longitude, 'radius_km': radius_km}


def _row(values: dict, rank: int, distance_km: Optional[float]) -> dict:
    return {
        'rank': rank,
        'restaurant_id': values['id'],
        'name': values['name'],
        'address': values['address'],
        'latitude': float(values['latitude']),
        'longitude': float(values['longitude']),
        'total_coins': values['total_coins'],
        'distance_km': distance_km,
    }


def _rank_page(queryset, page: int, limit: int, geo: Optional[tuple]) -> dict:
    """
    Order, filter and paginate an annotated queryset.

    The queryset must carry a ``total_coins`` annotation.
    """
    queryset = queryset.order_by('-total_coins', 'id')
    offset = (page - 1) * limit

    if geo is None:
        total = queryset.count()
        page_values = [(values, None) for values in queryset.values(*ROW_FIELDS)[offset:offset + limit]]
    else:
        latitude, longitude, radius_km = geo
        in_radius = []
        for values in queryset.filter(**bounding_box(latitude, longitude, radius_km)).values(*ROW_FIELDS):
            distance = haversine_km(
                latitude, longitude,
                float(values['latitude']), float(values['longitude']),
            )
            if distance <= radius_km:
                in_radius.append((values, round(distance, 3)))
        total = len(in_radius)
        page_values = in_radius[offset:offset + limit]

    return {
        'results': [
            _row(values, rank, distance)
            for rank, (values, distance) in enumerate(page_values, start=offset + 1)
        ],
        'pagination': pagination_meta(total, page, limit),
    }


def _ranking_ttl() -> int:
    return settings.SMILE_COINS['RANKING_CACHE_TTL']


def get_overall_ranking(*, page: int = 1, limit: int = 20, geo: Optional[dict] = None) -> dict:
    """
    Rank every restaurant by total coins received.

    Args:
        page: 1-based page number
        limit: Page size, 1..100
        geo: Optional {latitude, longitude, radius_km} filter; matching
            rows carry distance_km

    Returns:
        Dictionary with:
        - type: 'overall'
        - filters: the geo filter applied, if any
        - results: list of {rank, restaurant_id, name, address, latitude,
          longitude, total_coins, distance_km}
        - pagination: {page, limit, total, total_pages, has_next, has_prev}

    Raises:
        InvalidRankingQueryError: If page, limit or the geo filter is out of range

    Example:
        >>> ranking = get_overall_ranking(page=1, limit=10)
        >>> [row['rank'] for row in ranking['results']][:3]
        [1, 2, 3]
    """
    _validate_page(page, limit)
    geo = _normalize_geo(geo)

    page_data = get_or_compute(
        keys.RANKING, 'overall', *(geo or (None, None, None)), page, limit,
        compute=lambda: _rank_page(
            Restaurant.objects.annotate(total_coins=F('total_coins_received')),
            page, limit, geo,
        ),
        timeout=_ranking_ttl(),
    )

    return {'type': 'overall', 'filters': _geo_filters(geo), **page_data}


def get_origin_ranking(
    *,
    country: str,
    page: int = 1,
    limit: int = 20,
    geo: Optional[dict] = None
) -> dict:
    """
    Rank restaurants by coins received from tourists of one origin country.

    Country matching is case-insensitive. Restaurants that received no
    coins from that country are included with a total of 0.

    Raises:
        InvalidRankingQueryError: If the country is blank, or page, limit
            or the geo filter is out of range
    """
    country = (country or '').strip()
    if not country:
        raise InvalidRankingQueryError("Country is required")
    _validate_page(page, limit)
    geo = _normalize_geo(geo)

    def compute():
        queryset = Restaurant.objects.annotate(
            total_coins=Coalesce(
                Sum('transfers__amount', filter=Q(transfers__origin_country__iexact=country)),
                0,
            )
        )
        return _rank_page(queryset, page, limit, geo)

    page_data = get_or_compute(
        keys.RANKING, 'origin', country.lower(), *(geo or (None, None, None)), page, limit,
        compute=compute,
        timeout=_ranking_ttl(),
    )

    return {
        'type': 'origin',
        'filters': {'country': country, **_geo_filters(geo)},
        **page_data,
    }


def get_nearby_ranking(
    *,
    latitude: float,
    longitude: float,
    radius_km: float = DEFAULT_NEARBY_RADIUS_KM,
    page: int = 1,
    limit: int = 20
) -> dict:
    """Overall ranking restricted to restaurants within radius_km of a point."""
    ranking = get_overall_ranking(
        page=page,
        limit=limit,
        geo={'latitude': latitude, 'longitude': longitude, 'radius_km': radius_km},
    )
    ranking['type'] = 'nearby'
    return ranking


def refresh_rankings() -> dict:
    """
    Invalidate every ranking entry and pre-warm the first overall page.

    Returns:
        Dictionary with success, message and timestamp.
    """
    logger.info("Manual ranking refresh initiated")

    invalidated = invalidate(keys.RANKING)
    get_overall_ranking(page=1, limit=PREWARM_LIMIT)

    timestamp = timezone.now()
    logger.info("Ranking refresh completed at %s", timestamp.isoformat())

    return {
        'success': invalidated,
        'message': (
            "Rankings refreshed successfully" if invalidated
            else "Ranking cache unavailable, entries expire with their TTL"
        ),
        'timestamp': timestamp,
    }
