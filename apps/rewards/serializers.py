"""Serializers for rewards app."""

from rest_framework import serializers


# =============================================================================
# Input Serializers
# =============================================================================

class ProgressQuerySerializer(serializers.Serializer):
    """Optional as-of day for progress summaries."""
    as_of = serializers.DateField(required=False)


class DailyProgressQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=365, required=False, default=30)


class VerifyVoucherInputSerializer(serializers.Serializer):
    payload = serializers.CharField(help_text='Signed payload scanned from the voucher QR code')


# =============================================================================
# Response Serializers
# =============================================================================

class ProgressSummarySerializer(serializers.Serializer):
    total_trip_days = serializers.IntegerField()
    completed_days = serializers.IntegerField()
    remaining_days = serializers.IntegerField()
    current_streak = serializers.IntegerField()
    completion_percentage = serializers.FloatField()
    is_eligible_for_voucher = serializers.BooleanField()
    has_generated_voucher = serializers.BooleanField()
    days_until_departure = serializers.IntegerField()
    as_of = serializers.DateField()


class DailyProgressSerializer(serializers.Serializer):
    date = serializers.DateField()
    coins_received = serializers.IntegerField()
    coins_given = serializers.IntegerField()
    all_coins_given = serializers.BooleanField()
    completion_percentage = serializers.FloatField()


class VoucherSerializer(serializers.Serializer):
    voucher_id = serializers.CharField()
    user_id = serializers.UUIDField()
    generated_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    qr_payload = serializers.CharField()
    collection_instructions = serializers.CharField()
    is_valid = serializers.BooleanField()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
