"""
Serializers for rankings app.

Input Serializers:
    RankingQuerySerializer - page / limit and optional geo filter
    NearbyQuerySerializer - required point, radius, page / limit
    StatisticsQuerySerializer - optional as-of day

Response Serializers:
    RankingResponseSerializer, RestaurantStatisticsSerializer,
    RefreshResponseSerializer
"""

from rest_framework import serializers

from apps.transfers.serializers import PaginationSerializer
from .services.geo import MAX_RADIUS_KM, MIN_RADIUS_KM


# =============================================================================
# Input Serializers
# =============================================================================

class RankingQuerySerializer(serializers.Serializer):
    """
    Validate ranking query parameters.

    The geo filter is all-or-nothing: latitude and longitude go together,
    radius defaults to 5 km when a point is given.
    """
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)
    radius = serializers.FloatField(min_value=MIN_RADIUS_KM, max_value=MAX_RADIUS_KM, required=False)

    def validate(self, attrs):
        has_lat = 'latitude' in attrs
        has_lng = 'longitude' in attrs
        if has_lat != has_lng:
            raise serializers.ValidationError(
                "latitude and longitude must be provided together"
            )
        if 'radius' in attrs and not has_lat:
            raise serializers.ValidationError(
                "radius requires latitude and longitude"
            )
        return attrs

    def geo_filter(self):
        """Geo filter dict for the ranking services, or None."""
        data = self.validated_data
        if 'latitude' not in data:
            return None
        return {
            'latitude': data['latitude'],
            'longitude': data['longitude'],
            'radius_km': data.get('radius', 5.0),
        }


class NearbyQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    radius = serializers.FloatField(
        min_value=MIN_RADIUS_KM, max_value=MAX_RADIUS_KM, required=False, default=5.0
    )


class StatisticsQuerySerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False)


# =============================================================================
# Response Serializers
# =============================================================================

class RankingRowSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    restaurant_id = serializers.UUIDField()
    name = serializers.CharField()
    address = serializers.CharField()
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    total_coins = serializers.IntegerField()
    distance_km = serializers.FloatField(allow_null=True)


class RankingResponseSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=['overall', 'origin', 'nearby'])
    filters = serializers.DictField()
    results = RankingRowSerializer(many=True)
    pagination = PaginationSerializer()


class OriginShareSerializer(serializers.Serializer):
    country = serializers.CharField()
    coins = serializers.IntegerField()
    transactions = serializers.IntegerField()
    tourists = serializers.IntegerField()
    percentage = serializers.FloatField()


class TrendPointSerializer(serializers.Serializer):
    period = serializers.DateField()
    coins = serializers.IntegerField()
    transactions = serializers.IntegerField()
    unique_tourists = serializers.IntegerField()
    growth_rate = serializers.FloatField()


class TrendsSerializer(serializers.Serializer):
    daily = TrendPointSerializer(many=True)
    weekly = TrendPointSerializer(many=True)
    monthly = TrendPointSerializer(many=True)


class RestaurantStatisticsSerializer(serializers.Serializer):
    restaurant_id = serializers.UUIDField()
    name = serializers.CharField()
    total_coins = serializers.IntegerField()
    total_transactions = serializers.IntegerField()
    unique_tourists = serializers.IntegerField()
    unique_countries = serializers.IntegerField()
    average_coins_per_transaction = serializers.FloatField()
    rank = serializers.IntegerField()
    total_restaurants = serializers.IntegerField()
    percentile = serializers.IntegerField()
    origin_breakdown = OriginShareSerializer(many=True)
    trends = TrendsSerializer()
    as_of = serializers.DateField()


class RefreshResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    timestamp = serializers.DateTimeField()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
