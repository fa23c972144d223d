"""
Serializers for transfers app.

Input Serializers:
    TransferInputSerializer - Pre-flight check and recording input
    HistoryQuerySerializer - page / limit query parameters
    DailyQuerySerializer - Optional day for the daily distribution

Response Serializers:
    TransferSerializer, DailyRewardSerializer, QuotaCheckSerializer,
    TransferHistoryResponseSerializer, DailyDistributionSerializer
"""

from rest_framework import serializers
from .models import Transfer, DailyReward


# =============================================================================
# Input Serializers
# =============================================================================

class TransferInputSerializer(serializers.Serializer):
    """
    Validate a transfer request body.

    The amount range is enforced by the services so that the pre-flight
    can report it as a reason instead of a field error.
    """
    restaurant_id = serializers.UUIDField()
    amount = serializers.IntegerField()
    settlement_hash = serializers.CharField(max_length=128, required=False, allow_blank=False)


class HistoryQuerySerializer(serializers.Serializer):
    """Validate page / limit query parameters."""
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)


class DailyQuerySerializer(serializers.Serializer):
    """Validate the optional day of a daily distribution."""
    date = serializers.DateField(required=False)


# =============================================================================
# Response Serializers
# =============================================================================

class TransferSerializer(serializers.ModelSerializer):
    restaurant_name = serializers.CharField(source='restaurant.name', read_only=True)

    class Meta:
        model = Transfer
        fields = [
            'id',
            'settlement_hash',
            'from_address',
            'to_address',
            'user',
            'restaurant',
            'restaurant_name',
            'amount',
            'transferred_at',
            'transfer_date',
            'origin_country',
        ]
        read_only_fields = fields


class DailyRewardSerializer(serializers.ModelSerializer):
    coins_remaining = serializers.IntegerField(read_only=True)

    class Meta:
        model = DailyReward
        fields = [
            'reward_date',
            'coins_received',
            'coins_given',
            'coins_remaining',
            'all_coins_given',
        ]
        read_only_fields = fields


class QuotaCheckSerializer(serializers.Serializer):
    allowed = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    daily_given = serializers.IntegerField()
    daily_remaining = serializers.IntegerField()
    restaurant_given_today = serializers.IntegerField()
    max_per_restaurant = serializers.IntegerField()
    daily_cap = serializers.IntegerField()


class RecordedTransferSerializer(serializers.Serializer):
    transfer = TransferSerializer()
    daily_reward = DailyRewardSerializer()


class PaginationSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_prev = serializers.BooleanField()


class TransferRowSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    settlement_hash = serializers.CharField()
    user_id = serializers.UUIDField()
    restaurant_id = serializers.UUIDField()
    restaurant_name = serializers.CharField()
    amount = serializers.IntegerField()
    origin_country = serializers.CharField()
    transferred_at = serializers.DateTimeField()
    transfer_date = serializers.DateField()


class TransferHistoryResponseSerializer(serializers.Serializer):
    results = TransferRowSerializer(many=True)
    pagination = PaginationSerializer()


class RestaurantVisitSerializer(serializers.Serializer):
    restaurant_id = serializers.UUIDField()
    restaurant_name = serializers.CharField()
    coins = serializers.IntegerField()
    transfers = serializers.IntegerField()


class DailyDistributionSerializer(serializers.Serializer):
    date = serializers.DateField()
    coins_received = serializers.IntegerField()
    coins_given = serializers.IntegerField()
    coins_remaining = serializers.IntegerField()
    all_coins_given = serializers.BooleanField()
    restaurants_visited = RestaurantVisitSerializer(many=True)


class QuotaErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
    quota = QuotaCheckSerializer()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
