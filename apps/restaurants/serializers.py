from rest_framework import serializers
from .models import Restaurant


class RestaurantSerializer(serializers.ModelSerializer):
    """Main serializer for restaurants."""

    class Meta:
        model = Restaurant
        fields = [
            'id',
            'place_ref',
            'name',
            'address',
            'latitude',
            'longitude',
            'wallet_address',
            'total_coins_received',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class RestaurantListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for restaurant lists."""

    class Meta:
        model = Restaurant
        fields = [
            'id',
            'name',
            'address',
            'latitude',
            'longitude',
            'total_coins_received',
        ]


class RestaurantCreateSerializer(serializers.Serializer):
    """Validate restaurant onboarding input."""

    place_ref = serializers.CharField(max_length=255)
    name = serializers.CharField(max_length=200)
    address = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    latitude = serializers.DecimalField(max_digits=9, decimal_places=6, min_value=-90, max_value=90)
    longitude = serializers.DecimalField(max_digits=9, decimal_places=6, min_value=-180, max_value=180)
    wallet_address = serializers.CharField(max_length=128)
