"""Great-circle distance helpers for the radius filters."""

import math

EARTH_RADIUS_KM = 6371.0

MIN_RADIUS_KM = 0.1
MAX_RADIUS_KM = 50.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometers between two points given in degrees."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def bounding_box(latitude: float, longitude: float, radius_km: float) -> dict:
    """
    Coarse lookup filter around a point, as ORM lookups on latitude/longitude.

    The box always contains the whole circle. Near the poles, or when the
    circle crosses the antimeridian, only latitude is constrained and the
    haversine pass does the rest.
    """
    lat_delta = math.degrees(radius_km / EARTH_RADIUS_KM)
    lookups = {
        'latitude__gte': round(max(latitude - lat_delta, -90.0), 6),
        'latitude__lte': round(min(latitude + lat_delta, 90.0), 6),
    }

    if abs(latitude) + lat_delta >= 89.0:
        return lookups

    lng_delta = math.degrees(radius_km / (EARTH_RADIUS_KM * math.cos(math.radians(latitude))))
    if longitude - lng_delta < -180.0 or longitude + lng_delta > 180.0:
        return lookups

    lookups['longitude__gte'] = round(longitude - lng_delta, 6)
    lookups['longitude__lte'] = round(longitude + lng_delta, 6)
    return lookups
