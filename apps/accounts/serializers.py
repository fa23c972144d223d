from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Tourist profile for display."""

    class Meta:
        model = User
        fields = [
            'id',
            'wallet_address',
            'display_name',
            'origin_country',
            'arrival_date',
            'departure_date',
            'created_at',
        ]
        read_only_fields = fields


class TouristRegistrationSerializer(serializers.Serializer):
    """Validate tourist registration input."""

    wallet_address = serializers.CharField(max_length=128)
    origin_country = serializers.CharField(max_length=64)
    arrival_date = serializers.DateField()
    departure_date = serializers.DateField()
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')

    def validate_wallet_address(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Wallet address cannot be blank')
        return value

    def validate(self, attrs):
        """Arrival must come strictly before departure."""
        if attrs['arrival_date'] >= attrs['departure_date']:
            raise serializers.ValidationError({
                'departure_date': 'Departure date must be after arrival date'
            })
        return attrs


class WalletLoginSerializer(serializers.Serializer):
    """Validate wallet login input."""

    wallet_address = serializers.CharField(max_length=128)
